"""Identifier grammar and YAML document loading shared by the config loaders."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Any, Dict

import yaml
from pydantic import StringConstraints

from .config import IDENTIFIER_MAX_LENGTH, IDENTIFIER_PATTERN
from .exceptions import ConfigurationError

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)

# Lowercase letters, digits and single dashes, starting with a letter.
Identifier = Annotated[
    str,
    StringConstraints(pattern=IDENTIFIER_PATTERN, max_length=IDENTIFIER_MAX_LENGTH),
]


def is_identifier(value: Any) -> bool:
    return (
        isinstance(value, str)
        and len(value) <= IDENTIFIER_MAX_LENGTH
        and _IDENTIFIER_RE.match(value) is not None
    )


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Could not find configuration file {path}", {"path": str(path)})

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Could not parse {path} as YAML",
            {"path": str(path), "error": str(exc)},
        ) from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping", {"path": str(path)})
    return raw
