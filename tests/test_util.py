from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from conftest import write_tree
from trellis.util import Ignorer, get_ignorer, run_command, scan_directory


def collect(root: Path, filter=None) -> list:
    async def run():
        return [entry.path.relative_to(root).as_posix() async for entry in scan_directory(root, filter=filter)]

    return asyncio.run(run())


def test_scan_directory_yields_files_in_name_order(tmp_path: Path):
    write_tree(tmp_path, {
        "b.txt": "",
        "a.txt": "",
        "sub/z.txt": "",
        "sub/deeper/y.txt": "",
        "another/x.txt": "",
    })
    assert collect(tmp_path) == ["a.txt", "b.txt", "another/x.txt", "sub/z.txt", "sub/deeper/y.txt"]


def test_scan_directory_prunes_rejected_directories(tmp_path: Path):
    write_tree(tmp_path, {"keep/a.txt": "", "skip/b.txt": "", "skip/nested/c.txt": ""})
    assert collect(tmp_path, filter=lambda p: p.name != "skip") == ["keep/a.txt"]


def test_scan_directory_is_single_pass(tmp_path: Path):
    write_tree(tmp_path, {"a.txt": ""})

    async def run():
        gen = scan_directory(tmp_path)
        first = [e async for e in gen]
        second = [e async for e in gen]
        return first, second

    first, second = asyncio.run(run())
    assert len(first) == 1
    assert second == []


@pytest.mark.parametrize(
    "patterns, path, is_dir, expected",
    [
        (["*.log"], "logs/app.log", False, True),
        (["*.log"], "app.txt", False, False),
        (["build/"], "build", True, True),
        (["build/"], "build", False, False),
        (["build/"], "build/out.bin", False, True),
        (["/top"], "top", True, True),
        (["/top"], "nested/top", True, False),
        (["docs/*.md"], "docs/readme.md", False, True),
        (["docs/*.md"], "other/docs/readme.md", False, False),
        (["**/cache"], "a/b/cache", True, True),
        (["generated/*.yml"], "generated/app.yml", False, True),
        (["generated/*.yml"], "generated/sub/trellis.yml", False, False),
        (["a/**/b"], "a/b", True, True),
        (["a/**/b"], "a/x/y/b", True, True),
        (["a/**/b"], "a/x/c", True, False),
        (["*.log", "!keep.log"], "keep.log", False, False),
        (["logs", "!logs/keep.log"], "logs/keep.log", False, True),
        (["# comment", "", "   "], "# comment", False, False),
    ],
)
def test_ignorer_rules(patterns, path, is_dir, expected):
    assert Ignorer().add(patterns).ignores(path, is_dir=is_dir) is expected


def test_ignorer_never_ignores_root():
    assert not Ignorer().add(["*"]).ignores(".")


def test_get_ignorer_reads_ignore_files_and_defaults(tmp_path: Path):
    write_tree(tmp_path, {".gitignore": "dist\n", ".trellisignore": "secret.yml\n"})
    ignorer = get_ignorer(tmp_path)

    assert ignorer.ignores("dist", is_dir=True)
    assert ignorer.ignores("config/secret.yml")
    assert ignorer.ignores("node_modules/left-pad/index.js")
    assert ignorer.ignores(".git", is_dir=True)
    assert not ignorer.ignores("src/app.py")


def test_run_command_captures_output(tmp_path: Path):
    result = asyncio.run(run_command("echo hello && echo oops 1>&2 && exit 3", cwd=tmp_path))
    assert result.returncode == 3
    assert not result.ok
    assert result.stdout.strip() == "hello"
    assert result.stderr.strip() == "oops"
