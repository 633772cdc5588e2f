"""
Module and service discovery.

The project tree is scanned once per context. Each ``trellis.yml`` that declares a
module is parsed by the plugin resolved for its type, and the module and its
services are indexed by name. Names must be unique project-wide; the first
conflict aborts the pass and nothing is cached.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple, TypeVar

from .config import MODULE_CONFIG_FILENAME
from .dispatch import ActionDispatcher
from .exceptions import ConfigurationError
from .module import Module, ModuleConfig, Service, load_module_config
from .plugin import PARSE_MODULE, call_handler
from .util import get_ignorer, scan_directory

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)

ModuleMap = Dict[str, Module]
ServiceMap = Dict[str, Service]
ConfigLoader = Callable[[Path], Awaitable[Optional[ModuleConfig]]]

V = TypeVar("V")


def pick(mapping: Dict[str, V], names: Iterable[str]) -> Dict[str, V]:
    """Subset of ``mapping`` for ``names``; names that aren't present are left out."""
    return {name: mapping[name] for name in names if name in mapping}


class ModuleServiceGraphBuilder:
    def __init__(
        self,
        ctx: "Context",
        dispatcher: ActionDispatcher,
        scanner: Callable[..., Any] = scan_directory,
        ignorer_factory: Callable[[Path], Any] = get_ignorer,
        config_loader: ConfigLoader = load_module_config,
    ):
        self._ctx = ctx
        self._dispatcher = dispatcher
        self._scanner = scanner
        self._ignorer_factory = ignorer_factory
        self._config_loader = config_loader

        self._modules: Optional[ModuleMap] = None
        self._services: Optional[ServiceMap] = None
        self._scan: Optional["asyncio.Future[Tuple[ModuleMap, ServiceMap]]"] = None

    @property
    def loaded(self) -> bool:
        return self._modules is not None

    async def get_modules(self, names: Optional[Iterable[str]] = None) -> ModuleMap:
        modules, _ = await self._ensure_scanned()

        # TODO: raise ParameterError for unknown names once callers stop relying on partial lookups
        return modules if names is None else pick(modules, names)

    async def get_services(self, names: Optional[Iterable[str]] = None) -> ServiceMap:
        _, services = await self._ensure_scanned()

        return services if names is None else pick(services, names)

    def invalidate(self) -> None:
        """Forget the cached indexes; the next lookup rescans the tree."""
        self._modules = None
        self._services = None
        self._scan = None

    async def _ensure_scanned(self) -> Tuple[ModuleMap, ServiceMap]:
        if self._modules is not None and self._services is not None:
            return self._modules, self._services

        # Concurrent callers share one in-flight scan rather than each starting their own.
        if self._scan is None:
            self._scan = asyncio.ensure_future(self._scan_tree())
        scan = self._scan

        try:
            modules, services = await asyncio.shield(scan)
        except asyncio.CancelledError:
            if scan.cancelled() and self._scan is scan:
                self._scan = None
            raise
        except Exception:
            if self._scan is scan:
                self._scan = None
            raise

        if self._modules is None or self._services is None:
            self._modules = modules
            self._services = services
        return self._modules, self._services

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self._ctx.project_root).as_posix()
        except ValueError:
            return str(path)

    async def _scan_tree(self) -> Tuple[ModuleMap, ServiceMap]:
        root = self._ctx.project_root
        ignorer = self._ignorer_factory(root)

        def include(path: Path) -> bool:
            return not ignorer.ignores(self._relative(Path(path)), is_dir=Path(path).is_dir())

        modules: ModuleMap = {}
        services: ServiceMap = {}
        declared_at: Dict[str, str] = {}

        logger.info("scanning %s for modules", root)

        async for entry in self._scanner(root, filter=include):
            path = Path(entry.path)
            if path.name != MODULE_CONFIG_FILENAME:
                continue

            config = await self._config_loader(path.parent)
            if config is None:
                continue

            rel_path = self._relative(path)

            if config.name in modules:
                path_a = declared_at[config.name]
                path_b = rel_path
                raise ConfigurationError(
                    f"Module {config.name} is declared multiple times ('{path_a}' and '{path_b}')",
                    {"path_a": path_a, "path_b": path_b},
                )

            parse_handler = self._dispatcher.resolve(PARSE_MODULE, config.type)
            module = await call_handler(parse_handler, self._ctx, config)

            modules[config.name] = module
            declared_at[config.name] = rel_path

            for service_name, service_config in config.services.items():
                if service_name in services:
                    module_a = services[service_name].module.name
                    raise ConfigurationError(
                        f"Service names must be unique - {service_name} is declared multiple times "
                        f"(in '{module_a}' and '{config.name}')",
                        {
                            "service_name": service_name,
                            "module_a": module_a,
                            "module_b": config.name,
                        },
                    )

                services[service_name] = Service(name=service_name, module=module, config=service_config)

        logger.info("found %d modules and %d services", len(modules), len(services))
        return modules, services
