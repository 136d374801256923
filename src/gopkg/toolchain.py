"""Hand the vendored workspace to the go toolchain.

Vendored dependencies live at ``vendor/<name>/src``, while a GOPATH-mode
build looks up ``import "name"`` at ``$GOPATH/src/name``. Each toolchain run
therefore gets a throwaway GOPATH under the scratch root whose
``src/<name>`` entries are symlinks to the vendored ``src`` directories.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from .config import Settings
from .errors import ToolchainError
from .layout import SRC_DIR
from .resolver import STAGING_PREFIX

logger = logging.getLogger(__name__)


def _link_vendored(vendor: Path, src: Path) -> None:
    src.mkdir()
    if not vendor.is_dir():
        return
    for entry in sorted(vendor.iterdir()):
        package_src = entry / SRC_DIR
        if entry.name.startswith(STAGING_PREFIX) or not package_src.is_dir():
            continue
        (src / entry.name).symlink_to(package_src.resolve(), target_is_directory=True)


@contextmanager
def vendor_gopath(vendor_root: str | Path, scratch_root: str | Path) -> Iterator[Path]:
    """Yield a temporary GOPATH whose ``src/<name>`` links to ``vendor_root/<name>/src``."""
    scratch_root = Path(scratch_root)
    try:
        scratch_root.mkdir(parents=True, exist_ok=True)
        gopath = Path(tempfile.mkdtemp(prefix="gopkg-gopath-", dir=scratch_root))
    except OSError as exc:
        raise ToolchainError(
            f"Cannot create GOPATH: {exc.strerror or exc}",
            context={"scratch": str(scratch_root)},
        ) from exc
    try:
        try:
            _link_vendored(Path(vendor_root), gopath / SRC_DIR)
        except OSError as exc:
            raise ToolchainError(
                f"Cannot link vendored packages: {exc.strerror or exc}",
                context={"path": str(exc.filename or "")},
            ) from exc
        logger.debug("GOPATH %s", gopath)
        yield gopath
    finally:
        shutil.rmtree(gopath, ignore_errors=True)


def toolchain_env(gopath: str | Path, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a copy of ``base`` (default ``os.environ``) set up for a GOPATH-mode build."""
    env = dict(os.environ if base is None else base)
    env["GOPATH"] = str(Path(gopath).resolve())
    env["GO111MODULE"] = "off"
    return env


def _run(command: Sequence[str], *, cwd: Path, env: Mapping[str, str]) -> None:
    logger.debug("running %s in %s", " ".join(command), cwd)
    try:
        subprocess.run(list(command), cwd=cwd, env=dict(env), check=True)
    except subprocess.CalledProcessError as exc:
        raise ToolchainError(
            f"Command failed with exit status {exc.returncode}",
            context={"command": " ".join(command)},
        ) from exc
    except FileNotFoundError as exc:
        raise ToolchainError(
            f"Executable not found: {command[0]}",
            context={"command": " ".join(command)},
        ) from exc


def _build(workspace: Path, name: str, env: Mapping[str, str]) -> Path:
    _run(["go", "build", "-o", name, f".{os.sep}{SRC_DIR}"], cwd=workspace, env=env)
    return workspace / name


def go_build(workspace: str | Path, name: str, settings: Settings | None = None) -> Path:
    settings = settings or Settings()
    workspace = Path(workspace)
    with vendor_gopath(settings.vendor_root(workspace), settings.scratch_root()) as gopath:
        return _build(workspace, name, toolchain_env(gopath))


def go_test(workspace: str | Path, path: str = "", settings: Settings | None = None) -> None:
    settings = settings or Settings()
    workspace = Path(workspace)
    target = os.path.join(".", SRC_DIR, path) if path else f".{os.sep}{SRC_DIR}"
    with vendor_gopath(settings.vendor_root(workspace), settings.scratch_root()) as gopath:
        _run(["go", "test", target], cwd=workspace, env=toolchain_env(gopath))


def go_run(
    workspace: str | Path,
    name: str,
    args: Sequence[str] = (),
    settings: Settings | None = None,
) -> None:
    settings = settings or Settings()
    workspace = Path(workspace)
    with vendor_gopath(settings.vendor_root(workspace), settings.scratch_root()) as gopath:
        env = toolchain_env(gopath)
        binary = _build(workspace, name, env)
        _run([str(binary), *args], cwd=workspace, env=env)
