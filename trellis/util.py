"""
Filesystem and subprocess helpers used by discovery and the built-in plugins.

- scan_directory: async walk of a project tree, sorted, with directory pruning
- Ignorer / get_ignorer: gitignore-style path matching
- run_command: async subprocess wrapper
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import AsyncIterator, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_IGNORES, IGNORE_FILENAMES

PathFilter = Callable[[Path], bool]


@dataclass(frozen=True)
class ScanEntry:
    path: Path


def _list_dir(path: Path) -> Tuple[List[Path], List[Path]]:
    dirs: List[Path] = []
    files: List[Path] = []
    with os.scandir(path) as it:
        for entry in sorted(it, key=lambda e: e.name):
            if entry.is_dir(follow_symlinks=False):
                dirs.append(Path(entry.path))
            elif entry.is_file():
                files.append(Path(entry.path))
    return dirs, files


async def scan_directory(
    root: Union[str, Path],
    filter: Optional[PathFilter] = None,
) -> AsyncIterator[ScanEntry]:
    """
    Yield every file under ``root``, depth-first in name order.

    Paths rejected by ``filter`` are skipped; a rejected directory is not descended into.
    """
    pending = [Path(root)]
    while pending:
        current = pending.pop()
        dirs, files = await asyncio.to_thread(_list_dir, current)

        for path in files:
            if filter is None or filter(path):
                yield ScanEntry(path=path)

        # Reversed so the stack pops directories in name order.
        for path in reversed(dirs):
            if filter is None or filter(path):
                pending.append(path)


def _match_segments(parts: List[str], pattern: List[str]) -> bool:
    """Match path segments against pattern segments; a `**` segment spans zero or more segments."""
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    negate: bool = False
    dir_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str) -> Optional["IgnoreRule"]:
        text = line.rstrip("\n").rstrip()
        if not text or text.startswith("#"):
            return None

        negate = text.startswith("!")
        if negate:
            text = text[1:]
        if text.startswith("\\"):
            text = text[1:]

        dir_only = text.endswith("/")
        text = text.rstrip("/")

        if text.startswith("**/"):
            text = text[3:]
            anchored = False
        else:
            anchored = "/" in text
            text = text.lstrip("/")

        if not text:
            return None
        return cls(pattern=text, negate=negate, dir_only=dir_only, anchored=anchored)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.anchored:
            return _match_segments(rel_path.split("/"), self.pattern.split("/"))
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


@dataclass
class Ignorer:
    """Matches project-relative paths against gitignore-style rules."""

    rules: List[IgnoreRule] = field(default_factory=list)

    def add(self, patterns: Iterable[str]) -> "Ignorer":
        for line in patterns:
            rule = IgnoreRule.parse(line)
            if rule is not None:
                self.rules.append(rule)
        return self

    def _match(self, rel_path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                ignored = not rule.negate
        return ignored

    def ignores(self, rel_path: Union[str, Path], is_dir: bool = False) -> bool:
        rel = Path(rel_path).as_posix().strip("/")
        if not rel or rel == ".":
            return False

        # Anything below an ignored directory stays ignored.
        parts = rel.split("/")
        for depth in range(1, len(parts) + 1):
            prefix = "/".join(parts[:depth])
            if self._match(prefix, is_dir=depth < len(parts) or is_dir):
                return True
        return False


def get_ignorer(project_root: Union[str, Path]) -> Ignorer:
    root = Path(project_root)
    ignorer = Ignorer().add(DEFAULT_IGNORES)
    for filename in IGNORE_FILENAMES:
        path = root / filename
        if path.is_file():
            ignorer.add(path.read_text(encoding="utf-8").splitlines())
    return ignorer


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    command: Union[str, Sequence[str]],
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[dict] = None,
) -> CommandResult:
    """Run a shell string or an argument list and collect its output."""
    if isinstance(command, str):
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd) if cwd else None,
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    else:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd else None,
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    stdout, stderr = await proc.communicate()
    return CommandResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
