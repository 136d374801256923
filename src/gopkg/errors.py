from __future__ import annotations

from collections.abc import Mapping


class GopkgError(Exception):
    """Base error for vendoring failures; carries optional key/value context."""

    def __init__(self, message: str, *, context: Mapping[str, str] | None = None):
        super().__init__(message)
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        for key, value in self.context.items():
            if value:
                parts.append(f"  {key}: {value}")
        return "\n".join(parts)


class ManifestReadError(GopkgError):
    pass


class FetchError(GopkgError):
    pass


class RefError(GopkgError):
    pass


class LayoutIOError(GopkgError):
    pass


class DependencyConflictError(GopkgError):
    pass


class ToolchainError(GopkgError):
    pass


__all__ = [
    "DependencyConflictError",
    "FetchError",
    "GopkgError",
    "LayoutIOError",
    "ManifestReadError",
    "RefError",
    "ToolchainError",
]
