__version__ = "0.1.0"

from .config import Settings, load_settings
from .errors import (
    DependencyConflictError,
    FetchError,
    GopkgError,
    LayoutIOError,
    ManifestReadError,
    RefError,
    ToolchainError,
)
from .fs import mirror, walk_tree
from .git import GitClient, Vcs, pin
from .layout import has_canonical_manifest, is_source_file, normalize
from .manifest import Dependency, Manifest, load_manifest, parse_manifest
from .resolver import RefConflict, ResolveResult, Resolver, resolve

__all__ = [
    "DependencyConflictError",
    "Dependency",
    "FetchError",
    "GitClient",
    "GopkgError",
    "LayoutIOError",
    "Manifest",
    "ManifestReadError",
    "RefConflict",
    "RefError",
    "ResolveResult",
    "Resolver",
    "Settings",
    "ToolchainError",
    "Vcs",
    "has_canonical_manifest",
    "is_source_file",
    "load_manifest",
    "load_settings",
    "mirror",
    "normalize",
    "parse_manifest",
    "pin",
    "resolve",
    "walk_tree",
]
