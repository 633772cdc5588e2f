"""Version control: tree versions for module directories."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from .exceptions import TrellisError
from .util import run_command

if TYPE_CHECKING:
    from .context import Context

NEW_MODULE_VERSION = "0000000000"


class VcsError(TrellisError):
    type = "vcs"


@dataclass(frozen=True)
class TreeVersion:
    latest_commit: str
    # Newest mtime among uncommitted changes, None when the tree is clean.
    dirty_timestamp: Optional[float] = None

    @property
    def version_string(self) -> str:
        if self.dirty_timestamp is None:
            return self.latest_commit
        return f"{self.latest_commit}-{int(self.dirty_timestamp)}"


class VcsHandler(ABC):
    def __init__(self, ctx: "Context"):
        self.ctx = ctx

    @abstractmethod
    async def get_tree_version(self, paths: Iterable[Union[str, Path]]) -> TreeVersion:
        ...


class GitHandler(VcsHandler):
    def __init__(self, ctx: "Context"):
        super().__init__(ctx)
        self._repo_root: Optional[Path] = None

    async def _git(self, *args: str, check: bool = True) -> str:
        result = await run_command(["git", *args], cwd=self.ctx.project_root)
        if check and not result.ok:
            raise VcsError(
                f"git {args[0]} failed: {result.stderr.strip()}",
                {"args": list(args), "returncode": result.returncode},
            )
        return result.stdout

    def _relative(self, paths: Iterable[Union[str, Path]]) -> List[str]:
        root = self.ctx.project_root
        out = []
        for path in paths:
            p = Path(path)
            out.append(os.path.relpath(p, root) if p.is_absolute() else str(p))
        return out

    async def repo_root(self) -> Path:
        if self._repo_root is None:
            self._repo_root = Path((await self._git("rev-parse", "--show-toplevel")).strip())
        return self._repo_root

    async def get_tree_version(self, paths: Iterable[Union[str, Path]]) -> TreeVersion:
        repo_root = await self.repo_root()
        rel_paths = self._relative(paths)

        # rev-list fails on a repository without commits.
        commit = (await self._git("rev-list", "-1", "--abbrev-commit", "HEAD", "--", *rel_paths, check=False)).strip()

        # Porcelain paths are relative to the repository root, not the project root.
        status = await self._git("status", "--porcelain", "--untracked-files=all", "--", *rel_paths)
        dirty_timestamp = None
        for line in status.splitlines():
            changed = repo_root / line[3:].split(" -> ")[-1].strip('"')
            if changed.exists():
                mtime = changed.stat().st_mtime
                dirty_timestamp = mtime if dirty_timestamp is None else max(dirty_timestamp, mtime)

        return TreeVersion(latest_commit=commit or NEW_MODULE_VERSION, dirty_timestamp=dirty_timestamp)
