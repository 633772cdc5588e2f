"""
Trellis test configuration: shared project-tree fixtures.
"""
from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from trellis.context import Context


PROJECT_YAML = """
project:
  name: test-project
  environments:
    local:
      providers:
        generic:
          type: generic
        containers:
          type: container
    prod:
      providers:
        generic:
          type: generic
"""


def write_tree(root: Path, files: Dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")


def module_yaml(name: str, type: str = "generic", services: Dict[str, dict] = None, extra: str = "") -> str:
    lines = ["module:", f"  name: {name}", f"  type: {type}"]
    if services:
        lines.append("  services:")
        for service_name, cfg in services.items():
            lines.append(f"    {service_name}:")
            for key, value in (cfg or {}).items():
                lines.append(f"      {key}: {value}")
            if not cfg:
                lines[-1] = f"    {service_name}: {{}}"
    if extra:
        lines.extend("  " + line for line in textwrap.dedent(extra).strip().splitlines())
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Write a project tree under tmp_path; the root trellis.yml defaults to PROJECT_YAML."""

    def _make(files: Dict[str, str] = None, project_yaml: str = PROJECT_YAML) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        write_tree(root, {"trellis.yml": project_yaml, **(files or {})})
        return root

    return _make


@pytest.fixture
def ctx(make_project) -> Context:
    return Context(make_project())
