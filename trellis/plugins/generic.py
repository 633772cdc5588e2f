from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from ..exceptions import BuildError
from ..module import Module, ModuleConfig
from ..plugin import Plugin
from ..util import run_command

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


async def run_build_command(module: Module, command: str) -> Dict[str, Any]:
    logger.info("building %s: %s", module.name, command)
    result = await run_command(command, cwd=module.path)
    if not result.ok:
        raise BuildError(
            f"Build command for module {module.name} failed with exit code {result.returncode}",
            {"module": module.name, "command": command, "output": result.stdout + result.stderr},
        )
    return {"fresh": True, "build_log": result.stdout}


class GenericModuleHandler(Plugin):
    """Modules built by running an arbitrary command in their directory."""

    name = "generic"
    supported_module_types = ("generic",)

    def parse_module(self, ctx: "Context", config: ModuleConfig) -> Module:
        return Module(ctx, config)

    async def get_module_build_status(self, module: Module) -> Dict[str, Any]:
        return {"ready": not module.config.build.command}

    async def build_module(self, module: Module, force: bool = False) -> Dict[str, Any]:
        command = module.config.build.command
        if not command:
            return {}
        return await run_build_command(module, command)
