"""
The project context.

A Context is the authority on what exists in a project and which plugin handles
it: it owns the plugin registry, the active environment, capability resolution and
the module/service indexes. Running things is delegated to the task graph.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from .discovery import ModuleMap, ModuleServiceGraphBuilder, ServiceMap
from .dispatch import ActionDispatcher
from .environment import Environment, EnvironmentResolver
from .log import get_logger
from .plugin import PluginFactory
from .plugins import BUILTIN_PLUGINS
from .project_config import ProjectConfig, load_project_config
from .registry import CapabilityRegistry
from .task_graph import Task, TaskGraph, TaskResult
from .vcs import GitHandler, VcsHandler


class Context:
    def __init__(
        self,
        project_root: Union[str, Path],
        logger: Optional[logging.Logger] = None,
        plugins: Iterable[PluginFactory] = (),
    ):
        self.project_root = Path(project_root).resolve()
        self.log = logger or get_logger()
        self.config: ProjectConfig = load_project_config(self.project_root)

        # TODO: pick the VCS implementation from project config once a second one exists
        self.vcs: VcsHandler = GitHandler(self)
        self.task_graph = TaskGraph(self)

        self.plugins = CapabilityRegistry(self)
        self.environments = EnvironmentResolver(self.config)
        self.dispatcher = ActionDispatcher(self.plugins, self.environments)
        self.graph = ModuleServiceGraphBuilder(self, self.dispatcher)

        for plugin_cls in BUILTIN_PLUGINS:
            self.register_plugin(plugin_cls)
        for factory in plugins:
            self.register_plugin(factory)

        self.log.info("loaded project %s at %s", self.config.name, self.project_root)

    # --- Plugins ---

    def register_plugin(self, factory: PluginFactory) -> Any:
        return self.plugins.register(factory)

    def get_action_handler(self, action: str, module_type: Optional[str] = None) -> Callable[..., Any]:
        return self.dispatcher.resolve(action, module_type)

    def get_env_action_handler(self, action: str, module_type: Optional[str] = None) -> Callable[..., Any]:
        return self.dispatcher.resolve_for_environment(action, module_type)

    # --- Environment ---

    def set_environment(self, selector: str) -> Dict[str, str]:
        return self.environments.set_environment(selector)

    def get_environment(self) -> Environment:
        return self.environments.get_environment()

    # --- Modules and services ---

    async def get_modules(self, names: Optional[Iterable[str]] = None) -> ModuleMap:
        return await self.graph.get_modules(names)

    async def get_services(self, names: Optional[Iterable[str]] = None) -> ServiceMap:
        return await self.graph.get_services(names)

    # --- Tasks ---

    async def add_task(self, task: Task) -> None:
        await self.task_graph.add_task(task)

    async def process_tasks(self) -> Dict[str, TaskResult]:
        return await self.task_graph.process_tasks()
