"""
Plugin surface.

A plugin is any object with a ``name``, a ``supported_module_types`` collection and
zero or more of the capability methods named in PLUGIN_ACTION_NAMES. Plugins are
registered through a factory called with the owning context; a plugin class whose
constructor takes the context is itself a valid factory.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, List, Tuple

if TYPE_CHECKING:
    from .context import Context

PARSE_MODULE = "parse_module"
GET_MODULE_BUILD_STATUS = "get_module_build_status"
BUILD_MODULE = "build_module"

PLUGIN_ACTION_NAMES: Tuple[str, ...] = (PARSE_MODULE, GET_MODULE_BUILD_STATUS, BUILD_MODULE)

PluginFactory = Callable[["Context"], Any]


class Plugin:
    """Convenience base for plugins that keep a handle on their context."""

    name: str = ""
    supported_module_types: Tuple[str, ...] = ()

    def __init__(self, ctx: "Context"):
        self.ctx = ctx

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


async def call_handler(handler: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call a capability handler, awaiting the result when the plugin implemented it as a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def implemented_actions(plugin: Any) -> List[str]:
    return [action for action in PLUGIN_ACTION_NAMES if callable(getattr(plugin, action, None))]
