from __future__ import annotations

from pathlib import Path

import pytest

from conftest import tree_files, write_tree
from gopkg.errors import LayoutIOError
from gopkg.layout import SOURCE_EXTENSIONS, has_canonical_manifest, is_source_file, normalize


@pytest.mark.parametrize(
    "name", ["a.go", "b.c", "b.h", "asm.s", "asm.S", "x.cpp", "sub/dir/y.cc", "blob.syso"]
)
def test_recognized_source_files(name: str) -> None:
    assert is_source_file(name)


@pytest.mark.parametrize("name", ["README.md", "LICENSE", ".go", "go", "a.go.txt", "a.GO"])
def test_other_files_are_not_source(name: str) -> None:
    assert not is_source_file(name)


def test_has_canonical_manifest(tmp_path: Path) -> None:
    assert not has_canonical_manifest(tmp_path)
    (tmp_path / "gopkg.yaml").mkdir()
    assert not has_canonical_manifest(tmp_path)
    (tmp_path / "gopkg.yaml").rmdir()
    (tmp_path / "gopkg.yaml").write_text("name: x\n", encoding="utf-8")
    assert has_canonical_manifest(tmp_path)


def test_normalize_moves_sources_and_keeps_metadata(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "a.go": "package a",
            "sub/b.c": "int b;",
            "README.md": "# readme",
            "LICENSE": "MIT",
            "docs/guide.txt": "guide",
            ".git/HEAD": "ref: refs/heads/main",
            ".git/hooks/x.go": "package hooks",
        },
    )

    moved = normalize(tmp_path)

    assert sorted(moved) == ["a.go", "sub/b.c"]
    assert tree_files(tmp_path) == {
        "src/a.go",
        "src/sub/b.c",
        "README.md",
        "LICENSE",
        "docs/guide.txt",
        ".git/HEAD",
        ".git/hooks/x.go",
    }
    assert (tmp_path / "src" / "sub" / "b.c").read_text(encoding="utf-8") == "int b;"
    # directories emptied by the move stay in place
    assert (tmp_path / "sub").is_dir()
    assert list((tmp_path / "sub").iterdir()) == []


def test_normalize_keeps_non_source_files_next_to_sources(tmp_path: Path) -> None:
    write_tree(tmp_path, {"pkg/x.go": "package pkg", "pkg/testdata.json": "{}"})

    normalize(tmp_path)

    assert tree_files(tmp_path) == {"src/pkg/x.go", "pkg/testdata.json"}


def test_normalize_src_contains_exactly_the_source_files(tmp_path: Path) -> None:
    files = {
        "main.go": "",
        "lib/util.go": "",
        "lib/util_amd64.s": "",
        "cgo/wrap.h": "",
        "cgo/wrap.cpp": "",
        "notes.md": "",
        "lib/data.bin": "",
        "scripts/build.sh": "",
    }
    write_tree(tmp_path, files)
    expected = {rel for rel in files if Path(rel).suffix in SOURCE_EXTENSIONS}

    normalize(tmp_path)

    assert tree_files(tmp_path / "src") == expected


def test_normalize_is_idempotent(tmp_path: Path) -> None:
    write_tree(tmp_path, {"a.go": "", "sub/b.c": "", "README.md": ""})
    normalize(tmp_path)
    before = tree_files(tmp_path)

    assert normalize(tmp_path) == []
    assert tree_files(tmp_path) == before


def test_normalize_creates_src_without_sources(tmp_path: Path) -> None:
    write_tree(tmp_path, {"README.md": "empty"})

    assert normalize(tmp_path) == []
    assert (tmp_path / "src").is_dir()
    assert tree_files(tmp_path) == {"README.md"}


def test_normalize_leaves_existing_src_directory_alone(tmp_path: Path) -> None:
    write_tree(tmp_path, {"src/core.c": "", "extra.c": ""})

    assert normalize(tmp_path) == ["extra.c"]
    assert tree_files(tmp_path) == {"src/core.c", "src/extra.c"}


def test_normalize_refuses_to_overwrite_inside_src(tmp_path: Path) -> None:
    write_tree(tmp_path, {"src/a.go": "old", "a.go": "new"})

    with pytest.raises(LayoutIOError, match="already exists"):
        normalize(tmp_path)
    assert (tmp_path / "src" / "a.go").read_text(encoding="utf-8") == "old"
