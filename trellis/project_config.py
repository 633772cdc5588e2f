"""Project configuration: the environments and which provider plugins each one enables."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .common import Identifier, load_yaml
from .config import PROJECT_CONFIG_FILENAME
from .exceptions import ConfigurationError


class ProviderConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Name of the plugin that fills this provider slot.
    type: Identifier


class EnvironmentConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)

    @property
    def provider_types(self) -> List[str]:
        return [p.type for p in self.providers.values()]


class ProjectConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Identifier
    environments: Dict[Identifier, EnvironmentConfig] = Field(default_factory=dict)


def load_project_config(project_root: Union[str, Path]) -> ProjectConfig:
    path = Path(project_root) / PROJECT_CONFIG_FILENAME
    raw = load_yaml(path)

    section = raw.get("project")
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"{path} does not declare a project",
            {"path": str(path)},
        )

    try:
        return ProjectConfig.model_validate(section)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid project configuration in {path}",
            {"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc
