"""Recursive dependency resolution into a flat vendor tree.

Every dependency named in a manifest is cloned into a scratch working copy,
pinned to its ref, normalized to the ``src/`` layout if it does not ship a
``gopkg.yaml``, and merged into ``<vendor_root>/<name>``. Dependencies that
ship a manifest are resolved recursively against the same vendor root, so a
name that is already vendored is never fetched again (first fetch wins).
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .config import Settings
from .errors import DependencyConflictError, LayoutIOError
from .fs import copy_file, mirror, top_level_files
from .git import GitClient, Vcs, pin
from .layout import SRC_DIR, has_canonical_manifest, normalize
from .manifest import MANIFEST_NAME, Dependency, Manifest, load_manifest

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Dependency, Optional[str]], None]

STAGING_PREFIX = ".gopkg-staging-"


@dataclass(frozen=True)
class RefConflict:
    name: str
    fetched: tuple[str, str] | None
    requested: tuple[str, str] | None

    def describe(self) -> str:
        def fmt(selector: tuple[str, str] | None) -> str:
            return " ".join(selector) if selector else "default branch"

        return (
            f"{self.name}: requested {fmt(self.requested)}, "
            f"already vendored at {fmt(self.fetched)}"
        )


@dataclass
class ResolveResult:
    manifest: Manifest
    vendored: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    conflicts: list[RefConflict] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def authors(self) -> tuple[str, ...]:
        return self.manifest.authors


class Resolver:
    def __init__(
        self,
        vendor_root: str | Path,
        *,
        vcs: Vcs | None = None,
        settings: Settings | None = None,
        on_event: EventCallback | None = None,
    ):
        self.settings = settings or Settings()
        self.vendor_root = Path(vendor_root)
        self.vcs = vcs if vcs is not None else GitClient(self.settings.git)
        self.on_event = on_event
        self._fetched: dict[str, tuple[str, str] | None] = {}

    def resolve(self, manifest_path: str | Path) -> ResolveResult:
        manifest = load_manifest(manifest_path)
        self._fetched = {}
        result = ResolveResult(manifest=manifest)

        self.vendor_root.mkdir(parents=True, exist_ok=True)
        scratch_root = self.settings.scratch_root()
        scratch_root.mkdir(parents=True, exist_ok=True)
        scratch = Path(tempfile.mkdtemp(prefix="gopkg-", dir=scratch_root))
        logger.debug("scratch area %s", scratch)
        try:
            self._resolve_manifest(manifest, scratch, result)
        finally:
            if self.settings.keep_scratch:
                logger.info("keeping scratch area %s", scratch)
            else:
                shutil.rmtree(scratch, ignore_errors=True)
        return result

    def _emit(self, event: str, dependency: Dependency, detail: str | None = None) -> None:
        if self.on_event is not None:
            self.on_event(event, dependency, detail)

    def _resolve_manifest(self, manifest: Manifest, scratch: Path, result: ResolveResult) -> None:
        for dependency in manifest.packages:
            if (self.vendor_root / dependency.name).exists():
                self._skip(dependency, result)
                continue
            self._vendor(dependency, scratch, result)

    def _skip(self, dependency: Dependency, result: ResolveResult) -> None:
        result.skipped.append(dependency.name)
        self._emit("skip", dependency)
        logger.debug("%s already vendored, skipping", dependency.name)

        if dependency.name not in self._fetched:
            return
        fetched = self._fetched[dependency.name]
        if fetched == dependency.selector:
            return
        conflict = RefConflict(dependency.name, fetched, dependency.selector)
        if self.settings.strict:
            raise DependencyConflictError(
                "Conflicting refs requested for dependency",
                context={"dependency": dependency.name, "detail": conflict.describe()},
            )
        result.conflicts.append(conflict)
        self._emit("conflict", dependency, conflict.describe())
        logger.warning("ref conflict: %s", conflict.describe())

    def _vendor(self, dependency: Dependency, scratch: Path, result: ResolveResult) -> None:
        working_copy = scratch / dependency.name

        self._emit("fetch", dependency, dependency.git)
        self.vcs.clone(dependency.git, working_copy)
        try:
            selector = pin(self.vcs, working_copy, dependency)
            if selector is not None:
                self._emit("pin", dependency, " ".join(selector))

            canonical = has_canonical_manifest(working_copy)
            if not canonical:
                self._emit("normalize", dependency)
                normalize(working_copy)

            self._merge(working_copy, self.vendor_root / dependency.name)
            self._fetched[dependency.name] = dependency.selector
            result.vendored.append(dependency.name)
            self._emit("done", dependency)

            if canonical:
                nested = load_manifest(working_copy / MANIFEST_NAME)
                self._resolve_manifest(nested, scratch, result)
        finally:
            if not self.settings.keep_scratch:
                shutil.rmtree(working_copy, ignore_errors=True)

    def _merge(self, working_copy: Path, target: Path) -> None:
        """Copy ``src/`` and the loose top-level files of ``working_copy`` to ``target``.

        The copy is staged next to ``target`` and renamed into place, so a
        failure never leaves a half-written entry that later runs would skip.
        """
        staging = target.with_name(STAGING_PREFIX + target.name)
        try:
            if staging.exists():
                shutil.rmtree(staging)
            src = working_copy / SRC_DIR
            if src.is_dir():
                mirror(src, staging / SRC_DIR)
            (staging / SRC_DIR).mkdir(parents=True, exist_ok=True)
            for path in top_level_files(working_copy):
                copy_file(path, staging / path.name)
            os.replace(staging, target)
        except OSError as exc:
            raise LayoutIOError(
                f"Failed to vendor package: {exc.strerror or exc}",
                context={"target": str(target), "path": str(exc.filename or "")},
            ) from exc
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
        logger.debug("vendored %s", target)


def resolve(
    manifest_path: str | Path,
    vendor_root: str | Path,
    *,
    vcs: Vcs | None = None,
    settings: Settings | None = None,
    on_event: EventCallback | None = None,
) -> ResolveResult:
    """Vendor every dependency reachable from ``manifest_path`` into ``vendor_root``."""
    resolver = Resolver(vendor_root, vcs=vcs, settings=settings, on_event=on_event)
    return resolver.resolve(manifest_path)
