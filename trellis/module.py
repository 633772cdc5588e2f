"""
Modules and services.

A module is a directory holding a ``trellis.yml`` with a ``module:`` section. The
declared ``type`` picks the plugin that parses it into a typed ``Module``; any
services it declares are indexed project-wide by the discovery pass.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .common import Identifier, load_yaml
from .config import MODULE_CONFIG_FILENAME
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .context import Context
    from .vcs import TreeVersion


class BuildConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: Optional[str] = None
    # Names of modules that must be built first.
    dependencies: List[Identifier] = Field(default_factory=list)


class ModuleConfig(BaseModel):
    # Type-specific fields are kept as extras and validated by the type's plugin.
    model_config = ConfigDict(extra="allow")

    name: Identifier
    type: str
    path: str
    description: Optional[str] = None
    services: Dict[Identifier, Any] = Field(default_factory=dict)
    build: BuildConfig = Field(default_factory=BuildConfig)


C = TypeVar("C", bound=ModuleConfig)


class Module:
    def __init__(self, ctx: "Context", config: ModuleConfig):
        self.ctx = ctx
        self.config = config
        self.name = config.name
        self.type = config.type
        self.path = Path(config.path)

    @property
    def build_dependencies(self) -> List[str]:
        return list(self.config.build.dependencies)

    async def get_version(self) -> "TreeVersion":
        return await self.ctx.vcs.get_tree_version([self.path])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, type={self.type!r}, path={str(self.path)!r})"


@dataclass(frozen=True)
class Service:
    name: str
    module: Module
    config: Any


def coerce_config(config: ModuleConfig, model: Type[C]) -> C:
    """Re-validate a generic module config against a type-specific model."""
    if isinstance(config, model):
        return config
    try:
        return model.model_validate(config.model_dump())
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration for module {config.name}",
            {"module": config.name, "path": config.path, "errors": exc.errors(include_url=False)},
        ) from exc


def _read_module_config(module_path: Path) -> Optional[ModuleConfig]:
    path = module_path / MODULE_CONFIG_FILENAME
    raw = load_yaml(path)

    section = raw.get("module")
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigurationError(f"The module section in {path} must be a mapping", {"path": str(path)})

    try:
        return ModuleConfig.model_validate({**section, "path": str(module_path)})
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid module configuration in {path}",
            {"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc


async def load_module_config(module_path: Path) -> Optional[ModuleConfig]:
    """Load the module declaration in ``module_path``, or None if the file declares no module."""
    return await asyncio.to_thread(_read_module_config, Path(module_path))
