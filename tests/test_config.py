from __future__ import annotations

from pathlib import Path

import pytest

from gopkg.config import Settings, get_config_path, load_settings, read_config


def test_defaults_without_config_or_env(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "missing.yaml", environ={})
    assert settings == Settings()
    assert settings.vendor_root(tmp_path) == tmp_path / "vendor"


def test_config_path_follows_xdg(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_config_path() == str(tmp_path / "gopkg" / "config.yaml")
    assert get_config_path("custom.yaml") == "custom.yaml"


def test_file_values_and_env_overrides(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "vendor_dir: third_party\nstrict: true\nscratch_dir: /tmp/x\n", encoding="utf-8"
    )

    settings = load_settings(
        config, environ={"GOPKG_VENDOR_DIR": "deps", "GOPKG_KEEP_SCRATCH": "yes"}
    )

    assert settings.vendor_dir == "deps"
    assert settings.strict is True
    assert settings.keep_scratch is True
    assert settings.scratch_dir == "/tmp/x"


def test_env_can_disable_strict(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("strict: yes\n", encoding="utf-8")

    assert load_settings(config, environ={"GOPKG_STRICT": "0"}).strict is False


def test_invalid_boolean_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="GOPKG_STRICT"):
        load_settings(tmp_path / "missing.yaml", environ={"GOPKG_STRICT": "maybe"})


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("- a\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        read_config(config)


def test_malformed_config_yaml_names_the_file(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("vendor_dir: [unterminated\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid YAML in config file") as excinfo:
        read_config(config)
    assert str(config) in str(excinfo.value)


def test_dotenv_file_is_loaded(monkeypatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("GOPKG_GIT=/opt/git/bin/git\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    # registers GOPKG_GIT so the value dotenv sets is removed afterwards
    monkeypatch.setenv("GOPKG_GIT", "placeholder")
    monkeypatch.delenv("GOPKG_GIT")

    settings = load_settings(tmp_path / "missing.yaml")

    assert settings.git == "/opt/git/bin/git"


def test_override_ignores_none() -> None:
    settings = Settings(strict=True).override(strict=None, vendor_dir="v")
    assert settings.strict is True
    assert settings.vendor_dir == "v"
