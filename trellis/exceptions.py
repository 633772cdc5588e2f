"""Error taxonomy shared by the context, loaders and plugins."""

from __future__ import annotations

from typing import Any, Dict, Optional


class TrellisError(Exception):
    """Base error. Carries a human message and a machine-readable detail payload."""

    type = "trellis"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail: Dict[str, Any] = dict(detail or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message, "detail": self.detail}


class ConfigurationError(TrellisError):
    """Raised for malformed configuration or duplicate module/service names."""

    type = "configuration"


class ParameterError(TrellisError):
    """Raised when a caller asks for something that isn't configured."""

    type = "parameter"


class PluginError(TrellisError):
    """Raised for invalid or conflicting plugins and unset environment state."""

    type = "plugin"


class BuildError(TrellisError):
    type = "build"
