"""
Capability resolution.

Both modes scan plugins in registration order and return the handler of the first
plugin implementing the action. Environment-scoped resolution only considers
plugins named as a provider type by the active environment.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from .environment import EnvironmentResolver
from .exceptions import ParameterError
from .plugin import PLUGIN_ACTION_NAMES
from .registry import CapabilityRegistry

logger = logging.getLogger(__name__)


class ActionDispatcher:
    def __init__(self, registry: CapabilityRegistry, environments: EnvironmentResolver):
        self._registry = registry
        self._environments = environments

    def _check_action(self, action: str) -> None:
        if action not in PLUGIN_ACTION_NAMES:
            raise ParameterError(
                f"Unknown plugin action {action}",
                {"requested_handler_type": action, "known_actions": list(PLUGIN_ACTION_NAMES)},
            )

    def _first_handler(self, action: str, plugins: Iterable[Any]) -> Optional[Callable[..., Any]]:
        for plugin in plugins:
            handler = self._registry.get_handler(action, plugin.name)
            if handler is not None:
                logger.debug("resolved %s to plugin %s", action, plugin.name)
                return handler
        return None

    def resolve(self, action: str, module_type: Optional[str] = None) -> Callable[..., Any]:
        """Handler for ``action`` regardless of the active environment."""
        self._check_action(action)

        handler = self._first_handler(action, self._registry.all_plugins(module_type))
        if handler is not None:
            return handler

        msg = f"No handler for {action} configured"
        if module_type:
            msg += f" for module type {module_type}"

        raise ParameterError(msg, {
            "requested_handler_type": action,
            "requested_module_type": module_type,
        })

    def resolve_for_environment(self, action: str, module_type: Optional[str] = None) -> Callable[..., Any]:
        """Handler for ``action`` among the plugins the active environment enables."""
        self._check_action(action)

        env = self._environments.get_environment()
        provider_types = set(self._environments.provider_types())
        plugins = [p for p in self._registry.all_plugins(module_type) if p.name in provider_types]

        handler = self._first_handler(action, plugins)
        if handler is not None:
            return handler

        msg = f"No handler for {action} configured for environment {env.name}"
        if module_type:
            msg += f" and module type {module_type}"

        raise ParameterError(msg, {
            "requested_handler_type": action,
            "requested_module_type": module_type,
            "environment": env.name,
        })
