"""
Trellis - project context for multi-module build and deploy tooling.

Components:
- context.py: Context, the composition root
- registry.py: plugin registry, per-capability handlers
- dispatch.py: global and environment-scoped capability resolution
- environment.py: the active environment
- discovery.py: module/service discovery and indexing
- plugins/: built-in module type handlers
"""

from __future__ import annotations

__version__ = "0.1.0"

from .context import Context
from .environment import Environment
from .exceptions import BuildError, ConfigurationError, ParameterError, PluginError, TrellisError
from .module import Module, ModuleConfig, Service
from .plugin import PLUGIN_ACTION_NAMES, Plugin
from .task_graph import Task, TaskGraph, TaskResult

__all__ = [
    "__version__",
    "Context",
    "Environment",
    "Module",
    "ModuleConfig",
    "Service",
    "Plugin",
    "PLUGIN_ACTION_NAMES",
    "Task",
    "TaskGraph",
    "TaskResult",
    # Errors
    "TrellisError",
    "ConfigurationError",
    "ParameterError",
    "PluginError",
    "BuildError",
]
