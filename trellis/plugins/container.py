"""Container modules: built from a Dockerfile in the module directory or pulled by image name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..exceptions import BuildError, ConfigurationError
from ..module import Module, ModuleConfig, coerce_config
from ..plugin import Plugin
from ..util import run_command

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


class ContainerModuleConfig(ModuleConfig):
    image: Optional[str] = None
    dockerfile: str = "Dockerfile"


class ContainerModule(Module):
    config: ContainerModuleConfig

    @property
    def has_dockerfile(self) -> bool:
        return (self.path / self.config.dockerfile).is_file()

    @property
    def image_name(self) -> str:
        return self.config.image or f"{self.name}:latest"


class ContainerModuleHandler(Plugin):
    name = "container"
    supported_module_types = ("container",)

    def parse_module(self, ctx: "Context", config: ModuleConfig) -> ContainerModule:
        module = ContainerModule(ctx, coerce_config(config, ContainerModuleConfig))

        if not module.config.image and not module.has_dockerfile:
            raise ConfigurationError(
                f"Module {module.name} neither specifies an image nor provides a {module.config.dockerfile}",
                {"module": module.name, "path": str(module.path)},
            )
        return module

    async def get_module_build_status(self, module: ContainerModule) -> Dict[str, Any]:
        result = await run_command(["docker", "images", "-q", module.image_name])
        return {"ready": result.ok and bool(result.stdout.strip())}

    async def build_module(self, module: ContainerModule, force: bool = False) -> Dict[str, Any]:
        if module.has_dockerfile:
            args = ["docker", "build", "-t", module.image_name, "-f", module.config.dockerfile, "."]
        else:
            args = ["docker", "pull", module.image_name]

        logger.info("building %s: %s", module.name, " ".join(args))
        result = await run_command(args, cwd=module.path)
        if not result.ok:
            raise BuildError(
                f"Could not build image for module {module.name}",
                {"module": module.name, "command": args, "output": result.stdout + result.stderr},
            )
        return {"fresh": True, "build_log": result.stdout}
