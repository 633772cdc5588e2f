"""Registered plugins and, per capability, the handler each plugin provides."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .common import is_identifier
from .config import IDENTIFIER_PATTERN
from .exceptions import PluginError
from .plugin import PLUGIN_ACTION_NAMES, PluginFactory

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    """
    Ordered plugin registry.

    Registration order is kept and is what resolution scans, so plugins that
    register earlier win ties for the same capability.
    """

    def __init__(self, ctx: "Context"):
        self._ctx = ctx
        self._plugins: Dict[str, Any] = {}
        self._handlers: Dict[str, Dict[str, Callable[..., Any]]] = {
            action: {} for action in PLUGIN_ACTION_NAMES
        }

    def register(self, factory: PluginFactory) -> Any:
        plugin = factory(self._ctx)
        name = getattr(plugin, "name", None)

        if not is_identifier(name):
            raise PluginError(
                f"Invalid plugin name {name!r}",
                {"name": name, "pattern": IDENTIFIER_PATTERN},
            )

        if name in self._plugins:
            raise PluginError(
                f"Plugin {name} declared more than once",
                {"previous": self._plugins[name], "adding": plugin},
            )

        self._plugins[name] = plugin

        for action in PLUGIN_ACTION_NAMES:
            handler = getattr(plugin, action, None)
            if callable(handler):
                # Bound method: arguments are forwarded to the plugin unchanged.
                self._handlers[action][name] = handler

        logger.debug(
            "registered plugin %s (types=%s, actions=%s)",
            name,
            list(getattr(plugin, "supported_module_types", ())),
            [a for a in PLUGIN_ACTION_NAMES if name in self._handlers[a]],
        )
        return plugin

    def all_plugins(self, module_type: Optional[str] = None) -> List[Any]:
        """All plugins in registration order, optionally only those supporting ``module_type``."""
        plugins = list(self._plugins.values())
        if module_type:
            return [p for p in plugins if module_type in getattr(p, "supported_module_types", ())]
        return plugins

    def get_plugin(self, name: str) -> Any:
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin {name} is not registered", {"name": name}) from None

    def handlers(self, action: str) -> Dict[str, Callable[..., Any]]:
        return dict(self._handlers.get(action, {}))

    def get_handler(self, action: str, plugin_name: str) -> Optional[Callable[..., Any]]:
        return self._handlers.get(action, {}).get(plugin_name)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)
