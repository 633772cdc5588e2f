from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from ..exceptions import ConfigurationError
from ..module import Module, ModuleConfig
from ..plugin import Plugin
from .generic import run_build_command

if TYPE_CHECKING:
    from ..context import Context

DEFAULT_BUILD_COMMAND = "npm install"


class NpmPackageModuleHandler(Plugin):
    name = "npm-package"
    supported_module_types = ("npm-package",)

    def parse_module(self, ctx: "Context", config: ModuleConfig) -> Module:
        module = Module(ctx, config)
        if not (module.path / "package.json").is_file():
            raise ConfigurationError(
                f"Module {module.name} has type npm-package but no package.json",
                {"module": module.name, "path": str(module.path)},
            )
        return module

    async def get_module_build_status(self, module: Module) -> Dict[str, Any]:
        return {"ready": (module.path / "node_modules").is_dir()}

    async def build_module(self, module: Module, force: bool = False) -> Dict[str, Any]:
        return await run_build_command(module, module.config.build.command or DEFAULT_BUILD_COMMAND)
