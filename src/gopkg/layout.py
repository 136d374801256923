"""Detect and normalize the canonical ``gopkg.yaml`` + ``src/`` package layout."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path, PurePosixPath

from .errors import LayoutIOError
from .fs import ignore_predicate, walk_tree
from .manifest import MANIFEST_NAME

logger = logging.getLogger(__name__)

SRC_DIR = "src"

# file types the go toolchain compiles or links from a package directory
SOURCE_EXTENSIONS = frozenset(
    {
        ".go",
        ".c",
        ".h",
        ".s",
        ".S",
        ".cc",
        ".cpp",
        ".cxx",
        ".hh",
        ".hpp",
        ".hxx",
        ".m",
        ".f",
        ".F",
        ".for",
        ".f90",
        ".swig",
        ".swigcxx",
        ".syso",
    }
)

# anchored at the package root
NORMALIZE_IGNORE = ("/.git/", f"/{SRC_DIR}/")


def is_source_file(name: str) -> bool:
    """Return True if ``name`` has a recognized source extension.

    Matching is case-sensitive (``.S`` and ``.s`` are distinct). Dotfiles such
    as ``.go`` have no extension and never match.
    """
    return PurePosixPath(name).suffix in SOURCE_EXTENSIONS


def has_canonical_manifest(path: str | Path) -> bool:
    return (Path(path) / MANIFEST_NAME).is_file()




def normalize(path: str | Path) -> list[str]:
    """Move every recognized source file under ``path`` into ``path/src``.

    Relative paths are preserved beneath ``src/``; everything else (license,
    readme, metadata, directories without sources) stays where it is. The
    root ``.git`` directory and an existing ``src`` directory are not scanned,
    so running this on an already-normalized tree changes nothing.

    Returns the relocated paths, relative to ``path``, in walk order.
    """
    root = Path(path)
    src_root = root / SRC_DIR
    skip = ignore_predicate(NORMALIZE_IGNORE)
    try:
        relocated = [
            f"{rel_dir}/{name}" if rel_dir else name
            for rel_dir, _, filenames in walk_tree(root, skip)
            for name in filenames
            if is_source_file(name)
        ]
        src_root.mkdir(exist_ok=True)
        for rel in relocated:
            target = src_root / rel
            if target.exists():
                raise LayoutIOError(
                    "Source file already exists in src/",
                    context={"package": str(root), "path": rel},
                )
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(os.fspath(root / rel), os.fspath(target))
    except OSError as exc:
        raise LayoutIOError(
            f"Failed to normalize package layout: {exc.strerror or exc}",
            context={"package": str(root), "path": str(exc.filename or "")},
        ) from exc

    if relocated:
        logger.debug("moved %d source files into %s", len(relocated), src_root)
    return relocated
