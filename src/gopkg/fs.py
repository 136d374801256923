"""Directory walking and tree copying used by the normalizer and the resolver."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, Iterator

from pathspec import PathSpec

from .errors import LayoutIOError

logger = logging.getLogger(__name__)

SkipPredicate = Callable[[str], bool]


def _raise(err: OSError) -> None:
    raise err


def ignore_predicate(patterns: Iterable[str]) -> SkipPredicate:
    """Build a skip predicate from gitignore-style patterns.

    The predicate receives a path relative to the walk root in posix form,
    with a trailing slash for directories.
    """
    spec = PathSpec.from_lines("gitwildmatch", list(patterns))
    return spec.match_file


def walk_tree(
    root: str | Path, skip: SkipPredicate | None = None
) -> Iterator[tuple[str, list[str], list[str]]]:
    """Walk ``root`` top-down, yielding ``(rel_dir, dirnames, filenames)``.

    ``rel_dir`` is "" for the root itself. Subdirectories for which ``skip``
    returns True are pruned before descending; files are filtered the same way.
    Errors reading a directory propagate as ``OSError``.
    """
    root = os.fspath(root)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        rel_dir = os.path.relpath(dirpath, root)
        rel_dir = "" if rel_dir == "." else Path(rel_dir).as_posix()
        prefix = f"{rel_dir}/" if rel_dir else ""
        dirnames.sort()
        if skip is not None:
            dirnames[:] = [d for d in dirnames if not skip(f"{prefix}{d}/")]
            filenames = [f for f in filenames if not skip(f"{prefix}{f}")]
        yield rel_dir, dirnames, sorted(filenames)


def copy_file(src: str | Path, dst: str | Path) -> None:
    """Copy bytes and permission bits of ``src`` to ``dst``, creating parents."""
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
    shutil.copymode(src, dst)


def mirror(source_path: str | Path, dest_path: str | Path) -> None:
    """Recursively copy ``source_path`` into ``dest_path``.

    Works for a single file as well as a directory. Existing files at the
    destination are overwritten; nothing is rolled back on failure.
    """
    source = Path(source_path)
    dest = Path(dest_path)
    try:
        if not source.is_dir():
            copy_file(source, dest)
            return
        copied_dirs = []
        for rel_dir, _, filenames in walk_tree(source):
            target_dir = dest / rel_dir if rel_dir else dest
            target_dir.mkdir(parents=True, exist_ok=True)
            copied_dirs.append((source / rel_dir if rel_dir else source, target_dir))
            for name in filenames:
                copy_file(source / rel_dir / name, target_dir / name)
        # deepest first, once nothing more is written below a directory
        for source_dir, target_dir in reversed(copied_dirs):
            shutil.copymode(source_dir, target_dir)
    except OSError as exc:
        raise LayoutIOError(
            f"Failed to copy tree: {exc.strerror or exc}",
            context={
                "source": str(source),
                "dest": str(dest),
                "path": str(exc.filename or ""),
            },
        ) from exc
    logger.debug("mirrored %s -> %s", source, dest)


def top_level_files(path: str | Path) -> list[Path]:
    """Return the regular (non-directory) entries directly under ``path``, sorted."""
    root = Path(path)
    return sorted(p for p in root.iterdir() if not p.is_dir())
