from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from gopkg.errors import FetchError, RefError


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def tree_files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


class FakeVcs:
    """In-memory stand-in for git: each URL maps ref names to file trees.

    The ``None`` ref is what a fresh clone checks out.
    """

    def __init__(self) -> None:
        self.repos: dict[str, dict[str | None, dict[str, str]]] = {}
        self.calls: list[tuple[str, ...]] = []

    def add(self, url: str, files: dict[str, str], **refs: dict[str, str]) -> None:
        self.repos[url] = {None: files, **refs}

    def clone_count(self, url: str | None = None) -> int:
        return sum(
            1 for call in self.calls if call[0] == "clone" and (url is None or call[1] == url)
        )

    def _replace(self, dest: Path, files: dict[str, str]) -> None:
        for child in dest.iterdir():
            if child.name == ".git":
                continue
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()
        write_tree(dest, files)

    def clone(self, url: str, dest: Path) -> None:
        self.calls.append(("clone", url))
        if url not in self.repos:
            raise FetchError("git clone failed", context={"url": url})
        dest.mkdir(parents=True)
        (dest / ".git").mkdir()
        (dest / ".git" / "origin").write_text(url, encoding="utf-8")
        write_tree(dest, self.repos[url][None])

    def _switch(self, dest: Path, ref: str) -> None:
        url = (dest / ".git" / "origin").read_text(encoding="utf-8")
        states = self.repos[url]
        if ref not in states:
            raise RefError(f"Cannot resolve ref {ref!r}", context={"repo": str(dest)})
        self._replace(dest, states[ref])

    def checkout(self, dest: Path, ref: str) -> None:
        self.calls.append(("checkout", ref))
        self._switch(dest, ref)

    def reset_hard(self, dest: Path, revision: str) -> None:
        self.calls.append(("reset_hard", revision))
        self._switch(dest, revision)


@pytest.fixture
def fake_vcs() -> FakeVcs:
    return FakeVcs()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root
