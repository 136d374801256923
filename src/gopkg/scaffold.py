from __future__ import annotations

from pathlib import Path

from .errors import GopkgError
from .layout import SRC_DIR
from .manifest import MANIFEST_NAME, validate_name

_LIB_TEMPLATE = """package {name}

func {name}() string {{
\treturn "Hello World!"
}}
"""

_MAIN_TEMPLATE = """package main

import (
\t"fmt"
)

func main() {
\tfmt.Println("Hello World!")
}
"""

_MANIFEST_TEMPLATE = """name: {name}
authors:
  - Your Name <email@example.com>

packages:
  - name: package
    git: https://github.com/example/package
    rev: 49c95bdc21843256fb6c4e0d370a05f24a0bf213
"""


def create_package(parent: str | Path, name: str, lib: bool = False) -> Path:
    """Create ``parent/name`` with a manifest and a starter source file."""
    problem = validate_name(name)
    if problem:
        raise GopkgError(f"Package name {problem}", context={"name": str(name)})
    root = Path(parent) / name
    if root.exists():
        raise GopkgError("Package directory already exists", context={"path": str(root)})

    src = root / SRC_DIR
    src.mkdir(parents=True)
    if lib:
        (src / "lib.go").write_text(_LIB_TEMPLATE.format(name=name), encoding="utf-8")
    else:
        (src / "main.go").write_text(_MAIN_TEMPLATE, encoding="utf-8")
    (root / MANIFEST_NAME).write_text(_MANIFEST_TEMPLATE.format(name=name), encoding="utf-8")
    return root
