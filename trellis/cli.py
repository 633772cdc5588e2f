"""
Trellis CLI - inspect a project's modules, services and plugins.

Usage:
    python -m trellis modules          # List discovered modules
    python -m trellis services         # List declared services and their modules
    python -m trellis plugins          # List registered plugins and their capabilities
    python -m trellis env NAME         # Resolve an environment selector

The project root is the current directory, or TRELLIS_PROJECT_ROOT.
"""
from __future__ import annotations

import asyncio
import json
import sys
from typing import List, Optional

from trellis.config import get_project_root
from trellis.context import Context
from trellis.exceptions import TrellisError
from trellis.log import configure_logging
from trellis.plugin import implemented_actions


def cmd_modules(ctx: Context, args: List[str]) -> None:
    modules = asyncio.run(ctx.get_modules(args or None))
    if not modules:
        print("(no modules found)")
        return
    for name, module in modules.items():
        rel = module.path.relative_to(ctx.project_root).as_posix() or "."
        print(f"  {name:30s} {module.type:20s} {rel}")


def cmd_services(ctx: Context, args: List[str]) -> None:
    services = asyncio.run(ctx.get_services(args or None))
    if not services:
        print("(no services declared)")
        return
    for name, service in services.items():
        print(f"  {name:30s} (module {service.module.name})")


def cmd_plugins(ctx: Context, args: List[str]) -> None:
    for plugin in ctx.plugins.all_plugins(args[0] if args else None):
        types = ", ".join(plugin.supported_module_types)
        actions = ", ".join(implemented_actions(plugin))
        print(f"  {plugin.name:20s} types=[{types}] actions=[{actions}]")


def cmd_env(ctx: Context, args: List[str]) -> None:
    if not args:
        print("Usage: python -m trellis env NAME[.NAMESPACE]")
        sys.exit(1)
    ctx.set_environment(args[0])
    env = ctx.get_environment()
    print(json.dumps(
        {"name": env.name, "namespace": env.namespace, "providers": env.provider_types},
        indent=2,
    ))


COMMANDS = {
    "modules": cmd_modules,
    "services": cmd_services,
    "plugins": cmd_plugins,
    "env": cmd_env,
}


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        print(__doc__)
        sys.exit(0)

    cmd = argv[0]
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}")
        print(f"Available: {', '.join(COMMANDS)}")
        sys.exit(1)

    configure_logging()
    try:
        ctx = Context(get_project_root())
        COMMANDS[cmd](ctx, argv[1:])
    except TrellisError as exc:
        print(json.dumps(exc.to_dict(), indent=2, default=str), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
