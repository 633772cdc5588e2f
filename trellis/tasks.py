"""Build task: asks the environment's plugins for build status and builds when needed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from .exceptions import ConfigurationError
from .module import Module
from .plugin import BUILD_MODULE, GET_MODULE_BUILD_STATUS, call_handler
from .task_graph import Task

if TYPE_CHECKING:
    from .context import Context


class BuildTask(Task):
    type = "build"

    def __init__(self, ctx: "Context", module: Module, force: bool = False):
        super().__init__(ctx)
        self.module = module
        self.force = force

    @property
    def key(self) -> str:
        return f"build.{self.module.name}"

    async def get_dependencies(self) -> List[Task]:
        names = self.module.build_dependencies
        modules = await self.ctx.get_modules(names)

        missing = [name for name in names if name not in modules]
        if missing:
            raise ConfigurationError(
                f"Module {self.module.name} depends on unknown modules: {', '.join(missing)}",
                {"module": self.module.name, "missing": missing},
            )

        return [BuildTask(self.ctx, modules[name], force=self.force) for name in names]

    async def process(self) -> Dict[str, Any]:
        if not self.force:
            get_status = self.ctx.get_env_action_handler(GET_MODULE_BUILD_STATUS, self.module.type)
            status = await call_handler(get_status, self.module)
            if status.get("ready"):
                return {"fresh": False}

        build = self.ctx.get_env_action_handler(BUILD_MODULE, self.module.type)
        return await call_handler(build, self.module, force=self.force)
