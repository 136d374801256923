from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Union

import yaml

from .errors import ManifestReadError

MANIFEST_NAME = "gopkg.yaml"

# checked in order; the first one set wins
SELECTOR_PRIORITY = ("rev", "tag", "branch")


def _optional(data: dict[str, Any], key: str) -> Any:
    # BaseLoader reads an empty value as ""
    value = data.get(key)
    return None if value == "" else value


@dataclass(frozen=True)
class Dependency:
    name: str
    git: str
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None

    @property
    def selector(self) -> tuple[str, str] | None:
        """Return the effective ``(kind, value)`` ref selector, or None."""
        for kind in SELECTOR_PRIORITY:
            value = getattr(self, kind)
            if value:
                return kind, value
        return None

    @property
    def ignored_selectors(self) -> list[tuple[str, str]]:
        effective = self.selector
        return [
            (kind, getattr(self, kind))
            for kind in SELECTOR_PRIORITY
            if getattr(self, kind) and (kind, getattr(self, kind)) != effective
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dependency":
        return cls(
            name=data["name"],
            git=data["git"],
            branch=_optional(data, "branch"),
            tag=_optional(data, "tag"),
            rev=_optional(data, "rev"),
        )


@dataclass(frozen=True)
class Manifest:
    name: str = ""
    authors: tuple[str, ...] = ()
    packages: tuple[Dependency, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Manifest":
        errors = validate_manifest(data)
        if errors:
            raise ManifestReadError("Invalid manifest: " + "; ".join(errors))
        return cls(
            name=_optional(data, "name") or "",
            authors=tuple(_optional(data, "authors") or ()),
            packages=tuple(Dependency.from_dict(p) for p in _optional(data, "packages") or ()),
        )


def validate_name(name: Any) -> str | None:
    """Return a problem description if ``name`` is not a single path segment."""
    if not isinstance(name, str):
        return "must be a string"
    if not name.strip() or name in {".", ".."}:
        return "must be a non-empty name"
    if "/" in name or "\\" in name or len(Path(name).parts) != 1:
        return "must not contain path separators"
    return None


def validate_manifest(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        errors.append("Manifest must be a mapping")
        return errors

    name = _optional(data, "name")
    if name is not None and not isinstance(name, str):
        errors.append("'name' must be a string")

    authors = _optional(data, "authors")
    if authors is not None and (
        not isinstance(authors, list) or not all(isinstance(a, str) for a in authors)
    ):
        errors.append("'authors' must be a list of strings")

    packages = _optional(data, "packages")
    if packages is None:
        return errors
    if not isinstance(packages, list):
        errors.append("'packages' must be a list")
        return errors

    seen: set[str] = set()
    for i, pkg in enumerate(packages):
        if not isinstance(pkg, dict):
            errors.append(f"Package at index {i} must be a mapping")
            continue
        pkg_name = pkg.get("name")
        problem = validate_name(pkg_name)
        if problem:
            errors.append(f"Package at index {i}: name {problem}")
        elif pkg_name in seen:
            errors.append(f"Duplicate package name: {pkg_name}")
        else:
            seen.add(pkg_name)
        git = pkg.get("git")
        if not isinstance(git, str) or not git.strip():
            errors.append(f"Package at index {i}: 'git' must be a non-empty string")
        for kind in SELECTOR_PRIORITY:
            value = _optional(pkg, kind)
            if value is not None and not isinstance(value, str):
                errors.append(f"Package at index {i}: '{kind}' must be a string")
    return errors


def parse_manifest(source: Union[str, IO]) -> Manifest:
    """Parse manifest YAML with every scalar kept as a string.

    Refs such as ``tag: 1.0`` or ``rev: 0123456`` must not become numbers.
    """
    try:
        data = yaml.load(source, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ManifestReadError(f"Invalid YAML in manifest: {exc}") from exc
    if data is None:
        data = {}
    return Manifest.from_dict(data)


def load_manifest(path: Union[str, Path]) -> Manifest:
    manifest_path = Path(path)
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            return parse_manifest(f)
    except ManifestReadError as exc:
        exc.context.setdefault("path", str(manifest_path))
        raise
    except OSError as exc:
        raise ManifestReadError(
            f"Cannot read manifest: {exc.strerror or exc}",
            context={"path": str(manifest_path)},
        ) from exc
