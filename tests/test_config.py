"""Tests for config resolution, credential sources, and atomic writes."""

from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path

import pytest

from tfmastodon.config import (
    atomic_write,
    get_data_dir,
    load_project_config,
    resolve_credential,
    resolve_provider_config,
)
from tfmastodon.exceptions import ConfigError
from tfmastodon.models import ProviderConfig


def _write_project_config(root: Path, data) -> None:
    (root / "tfmastodon.json").write_text(json.dumps(data), encoding="utf-8")


class TestProviderConfigModel:
    def test_defaults(self) -> None:
        cfg = ProviderConfig(domain="example.social")
        assert cfg.use_https is None
        assert cfg.scheme == "https"
        assert cfg.timeout == 30.0

    def test_domain_is_trimmed(self) -> None:
        assert ProviderConfig(domain="  example.social/ ").domain == "example.social"

    def test_rejects_url(self) -> None:
        with pytest.raises(ValueError):
            ProviderConfig(domain="https://example.social")

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError):
            ProviderConfig(domain="   ")


class TestResolveProviderConfig:
    def test_missing_domain(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="No Mastodon domain configured"):
            resolve_provider_config()

    def test_project_config(self, isolated_config: Path) -> None:
        _write_project_config(isolated_config, {"domain": "file.test", "use_https": False})
        cfg = resolve_provider_config()
        assert cfg.domain == "file.test"
        assert cfg.server == "http://file.test"

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch) -> None:
        _write_project_config(isolated_config, {"domain": "file.test", "use_https": False})
        monkeypatch.setenv("MASTODON_DOMAIN", "env.test")
        monkeypatch.setenv("MASTODON_USE_HTTPS", "yes")

        cfg = resolve_provider_config()

        assert cfg.domain == "env.test"
        assert cfg.use_https is True

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("MASTODON_DOMAIN", "env.test")
        monkeypatch.setenv("MASTODON_USE_HTTPS", "true")

        cfg = resolve_provider_config(cli_domain="cli.test", cli_use_https=False)

        assert cfg.domain == "cli.test"
        assert cfg.use_https is False

    @pytest.mark.parametrize("raw,expected", [("0", False), ("off", False), ("1", True), ("TRUE", True)])
    def test_env_bool_parsing(self, isolated_config: Path, monkeypatch, raw, expected) -> None:
        monkeypatch.setenv("MASTODON_USE_HTTPS", raw)
        assert resolve_provider_config(cli_domain="x.test").use_https is expected

    def test_env_bool_invalid(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("MASTODON_USE_HTTPS", "maybe")
        with pytest.raises(ConfigError, match="MASTODON_USE_HTTPS"):
            resolve_provider_config(cli_domain="x.test")

    def test_invalid_domain(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid provider configuration"):
            resolve_provider_config(cli_domain="https://x.test")


class TestLoadProjectConfig:
    def test_absent(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "tfmastodon.json").write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_project_config(isolated_config, ["domain"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


class TestResolveCredential:
    def test_literal(self) -> None:
        assert resolve_credential("abc") == "abc"

    def test_env(self, monkeypatch) -> None:
        monkeypatch.setenv("TFM_SECRET", "from-env")
        assert resolve_credential("env:TFM_SECRET") == "from-env"

    def test_env_missing(self, monkeypatch) -> None:
        monkeypatch.delenv("TFM_SECRET", raising=False)
        with pytest.raises(ConfigError, match="TFM_SECRET"):
            resolve_credential("env:TFM_SECRET")

    def test_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("from-file\n", encoding="utf-8")
        assert resolve_credential(f"file:{secret}") == "from-file"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")


class TestAtomicWrite:
    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "out.json"
        atomic_write(target, "{}")
        assert target.read_text(encoding="utf-8") == "{}"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.json"
        atomic_write(target, "{}", mode=0o600)
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600


def test_data_dir_honours_xdg(isolated_config: Path, monkeypatch) -> None:
    monkeypatch.setattr("tfmastodon.config._is_xdg_platform", lambda: True)
    path = get_data_dir()
    assert path == isolated_config / "data" / "tfmastodon"
    assert path.is_dir()
