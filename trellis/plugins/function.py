from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..common import Identifier
from ..module import Module, ModuleConfig, coerce_config
from ..plugin import Plugin

if TYPE_CHECKING:
    from ..context import Context


class FunctionSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    handler: str
    runtime: Optional[str] = None


class FunctionModuleConfig(ModuleConfig):
    functions: Dict[Identifier, FunctionSpec] = Field(default_factory=dict)


class FunctionModule(Module):
    config: FunctionModuleConfig


class GenericFunctionModuleHandler(Plugin):
    """Parses function modules. Deploying them is left to environment providers."""

    name = "generic-function"
    supported_module_types = ("function",)

    def parse_module(self, ctx: "Context", config: ModuleConfig) -> FunctionModule:
        return FunctionModule(ctx, coerce_config(config, FunctionModuleConfig))
