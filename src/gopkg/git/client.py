from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..errors import FetchError, RefError

logger = logging.getLogger(__name__)


@runtime_checkable
class Vcs(Protocol):
    def clone(self, url: str, dest: Path) -> None: ...
    def checkout(self, dest: Path, ref: str) -> None: ...
    def reset_hard(self, dest: Path, revision: str) -> None: ...


def _stderr(err: subprocess.CalledProcessError) -> str:
    raw = err.stderr or b""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw.strip()


class GitClient:
    """Blocking git operations backed by the ``git`` executable."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def _run(self, args: list[str]) -> None:
        logger.debug("running %s", " ".join([self.executable, *args]))
        subprocess.run([self.executable, *args], check=True, capture_output=True)

    def clone(self, url: str, dest: Path) -> None:
        def do_clone(repo_url: str) -> None:
            self._run(["clone", "-q", repo_url, str(dest)])

        try:
            try:
                do_clone(url)
            except subprocess.CalledProcessError as err:
                alt_url = url[:-4] if url.endswith(".git") else url + ".git"
                logger.debug("clone of %s failed, retrying as %s", url, alt_url)
                try:
                    do_clone(alt_url)
                except subprocess.CalledProcessError:
                    raise err
        except subprocess.CalledProcessError as err:
            raise FetchError(
                "git clone failed",
                context={"url": url, "dest": str(dest), "stderr": _stderr(err)},
            ) from err
        except FileNotFoundError as err:
            raise FetchError(
                f"git executable not found: {self.executable}",
                context={"url": url},
            ) from err

    def _run_ref(self, dest: Path, args: list[str], ref: str) -> None:
        try:
            self._run(["-C", str(dest), *args])
        except subprocess.CalledProcessError as err:
            raise RefError(
                f"Cannot resolve ref {ref!r}",
                context={"repo": str(dest), "stderr": _stderr(err)},
            ) from err
        except FileNotFoundError as err:
            raise RefError(
                f"git executable not found: {self.executable}",
                context={"repo": str(dest)},
            ) from err

    def checkout(self, dest: Path, ref: str) -> None:
        self._run_ref(dest, ["checkout", "-q", ref], ref)

    def reset_hard(self, dest: Path, revision: str) -> None:
        self._run_ref(dest, ["reset", "-q", "--hard", revision], revision)
