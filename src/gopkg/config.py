from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    vendor_dir: str = "vendor"
    scratch_dir: str | None = None
    strict: bool = False
    keep_scratch: bool = False
    git: str = "git"

    def vendor_root(self, workspace: str | Path) -> Path:
        return Path(workspace) / self.vendor_dir

    def scratch_root(self) -> Path:
        return Path(self.scratch_dir or tempfile.gettempdir())

    def override(self, **changes: Any) -> "Settings":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def get_config_path(custom_path=None):
    if custom_path:
        return custom_path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return os.path.join(xdg_config_home, "gopkg", "config.yaml")


def read_config(custom_path=None) -> dict[str, Any]:
    config_path = get_config_path(custom_path)
    try:
        with open(config_path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a YAML mapping: {config_path}")
    return data


def _parse_bool(raw: Any, *, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def load_settings(custom_path=None, *, environ=None, use_dotenv: bool = True) -> Settings:
    """Merge defaults, the YAML config file and ``GOPKG_*`` environment variables."""
    if use_dotenv and environ is None:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(env_path, override=False)
    env = os.environ if environ is None else environ

    data = read_config(custom_path)
    values: dict[str, Any] = {}
    for key in ("vendor_dir", "scratch_dir", "git"):
        if data.get(key) is not None:
            values[key] = str(data[key])
    for key in ("strict", "keep_scratch"):
        if data.get(key) is not None:
            values[key] = _parse_bool(data[key], name=key)

    env_map = {
        "GOPKG_VENDOR_DIR": "vendor_dir",
        "GOPKG_SCRATCH_DIR": "scratch_dir",
        "GOPKG_GIT": "git",
    }
    for env_name, key in env_map.items():
        raw = (env.get(env_name) or "").strip()
        if raw:
            values[key] = raw
    for env_name, key in (("GOPKG_STRICT", "strict"), ("GOPKG_KEEP_SCRATCH", "keep_scratch")):
        raw = env.get(env_name)
        if raw is not None and raw.strip():
            values[key] = _parse_bool(raw, name=env_name)

    settings = Settings(**values)
    logger.debug("loaded settings %s", settings)
    return settings
