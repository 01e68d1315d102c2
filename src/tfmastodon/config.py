"""Where tfmastodon finds its settings and how it writes files.

* :func:`resolve_provider_config` builds the provider block
  (:class:`~tfmastodon.models.ProviderConfig`) from CLI flags, the
  ``MASTODON_DOMAIN`` / ``MASTODON_USE_HTTPS`` environment variables and an
  optional ``./tfmastodon.json``, in that order of precedence.
* :func:`resolve_credential` turns ``env:VAR`` / ``file:/path`` / literal
  descriptors into secret values.
* :func:`atomic_write` replaces a file in one rename; the state file relies on
  it so a crash never leaves half-written client secrets behind.
* :func:`get_data_dir` is where crash logs go: ``$XDG_DATA_HOME/tfmastodon``
  on Linux and the BSDs, ``~/.tfmastodon`` elsewhere.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tfmastodon.exceptions import ConfigError
from tfmastodon.models import ProviderConfig

_APP_NAME = "tfmastodon"
_PROJECT_CONFIG_FILENAME = "tfmastodon.json"

ENV_DOMAIN = "MASTODON_DOMAIN"
ENV_USE_HTTPS = "MASTODON_USE_HTTPS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def get_data_dir() -> Path:
    """Return the crash-log directory, creating it on first use."""
    if _is_xdg_platform():
        base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Replace *path* with *data* in a single ``os.replace``.

    The temp file lives next to *path* so the rename stays on one
    filesystem. *mode*, when given, is set before the first byte is written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if mode is not None:
            os.chmod(tmp_name, mode)
        with os.fdopen(handle, "w", encoding="utf-8") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./tfmastodon.json`` if present.

    The file uses the provider block's keys: ``domain``, ``use_https``,
    ``timeout`` and ``verify_ssl``.

    Raises:
        ConfigError: The file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {value!r}")


def resolve_provider_config(
    cli_domain: Optional[str] = None,
    cli_use_https: Optional[bool] = None,
) -> ProviderConfig:
    """Merge every configuration source into a validated provider block.

    CLI flags beat environment variables, which beat ``./tfmastodon.json``.
    Anything still unset takes the model default.

    Raises:
        ConfigError: No source names a domain, or the merged values fail
            validation.
    """
    merged: dict[str, Any] = dict(load_project_config() or {})

    env_domain = os.environ.get(ENV_DOMAIN)
    if env_domain:
        merged["domain"] = env_domain
    env_use_https = os.environ.get(ENV_USE_HTTPS)
    if env_use_https:
        merged["use_https"] = _parse_bool(env_use_https, ENV_USE_HTTPS)

    if cli_domain is not None:
        merged["domain"] = cli_domain
    if cli_use_https is not None:
        merged["use_https"] = cli_use_https

    if not merged.get("domain"):
        raise ConfigError(
            f"No Mastodon domain configured. Pass --domain, set {ENV_DOMAIN}, "
            f"or add \"domain\" to ./{_PROJECT_CONFIG_FILENAME}"
        )

    try:
        return ProviderConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid provider configuration: {exc}") from exc


def resolve_credential(source: str) -> str:
    """Return the secret named by *source*.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (surrounding whitespace stripped), and anything else is the value itself.

    Raises:
        ConfigError: The variable is unset or the file cannot be read.
    """
    kind, sep, target = source.partition(":")
    if not sep or kind not in ("env", "file"):
        return source

    if kind == "env":
        if target not in os.environ:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return os.environ[target]

    path = Path(target).expanduser()
    if not path.is_file():
        raise ConfigError(f"Credential file not found: {path} (source: {source})")
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc
