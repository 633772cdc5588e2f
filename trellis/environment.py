"""The active deployment environment of a context."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_NAMESPACE
from .exceptions import ParameterError, PluginError
from .project_config import EnvironmentConfig, ProjectConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    name: str
    namespace: str
    config: EnvironmentConfig

    @property
    def provider_types(self) -> List[str]:
        return self.config.provider_types


def parse_environment_selector(selector: str) -> Tuple[str, str]:
    """Split ``name[.namespace...]``; the namespace is everything after the first dot."""
    parts = selector.split(".")
    name = parts[0]
    namespace = ".".join(parts[1:]) or DEFAULT_NAMESPACE
    return name, namespace


class EnvironmentResolver:
    def __init__(self, project_config: ProjectConfig):
        self._project_config = project_config
        self._active: Optional[Tuple[str, str]] = None

    def set_environment(self, selector: str) -> Dict[str, str]:
        name, namespace = parse_environment_selector(selector)

        if name not in self._project_config.environments:
            raise ParameterError(
                f"Could not find environment {selector}",
                {"name": name, "namespace": namespace},
            )

        self._active = (name, namespace)
        logger.info("environment set to %s (namespace %s)", name, namespace)
        return {"name": name, "namespace": namespace}

    def get_environment(self) -> Environment:
        if self._active is None:
            raise PluginError("Environment has not been set", {})

        name, namespace = self._active
        return Environment(
            name=name,
            namespace=namespace,
            config=self._project_config.environments[name],
        )

    def provider_types(self) -> List[str]:
        return self.get_environment().provider_types
