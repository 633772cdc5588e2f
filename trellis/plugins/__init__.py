from __future__ import annotations

from .container import ContainerModule, ContainerModuleConfig, ContainerModuleHandler
from .function import FunctionModule, FunctionModuleConfig, GenericFunctionModuleHandler
from .generic import GenericModuleHandler
from .npm_package import NpmPackageModuleHandler

# Registration order matters: earlier plugins win capability resolution.
BUILTIN_PLUGINS = (
    GenericModuleHandler,
    ContainerModuleHandler,
    GenericFunctionModuleHandler,
    NpmPackageModuleHandler,
)

__all__ = [
    "BUILTIN_PLUGINS",
    "ContainerModule",
    "ContainerModuleConfig",
    "ContainerModuleHandler",
    "FunctionModule",
    "FunctionModuleConfig",
    "GenericFunctionModuleHandler",
    "GenericModuleHandler",
    "NpmPackageModuleHandler",
]
