"""Local state file for managed resources.

The CLI stands in for Terraform's state handling: every resource it
creates is recorded in a JSON file (``./tfmastodon.state.json`` by default)
under a user-chosen name, so later ``read``/``update``/``delete`` calls can
find it again.

Layout::

    {
      "version": 1,
      "resources": {
        "mastodon_register_app.bot": { ...RegisterAppState... }
      }
    }

The file contains client secrets, so it is written atomically with
``0o600`` permissions via :func:`~tfmastodon.config.atomic_write`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tfmastodon.config import atomic_write
from tfmastodon.exceptions import ConfigError
from tfmastodon.models import RegisterAppState

DEFAULT_STATE_FILENAME = "tfmastodon.state.json"
STATE_VERSION = 1


class StateStore:
    """Read/write resource state entries in one JSON file.

    Args:
        path: Location of the state file. It need not exist yet.

    Example::

        store = StateStore(Path("tfmastodon.state.json"))
        store.put("mastodon_register_app", "bot", state)
        state = store.get("mastodon_register_app", "bot")
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, type_name: str, name: str) -> Optional[RegisterAppState]:
        """Return the recorded state for ``type_name.name``, or ``None``."""
        raw = self._load().get(_key(type_name, name))
        if raw is None:
            return None
        try:
            return RegisterAppState.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid state for {_key(type_name, name)} in {self._path}: {exc}"
            ) from exc

    def put(self, type_name: str, name: str, state: RegisterAppState) -> None:
        """Record *state* as ``type_name.name``, replacing any previous entry."""
        resources = self._load()
        resources[_key(type_name, name)] = state.model_dump(mode="json")
        self._save(resources)

    def remove(self, type_name: str, name: str) -> bool:
        """Drop ``type_name.name``. Returns ``False`` if it was not recorded."""
        resources = self._load()
        if resources.pop(_key(type_name, name), None) is None:
            return False
        self._save(resources)
        return True

    def names(self) -> list[str]:
        """All recorded ``type_name.name`` keys, sorted."""
        return sorted(self._load())

    def _load(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError) as exc:
            raise ConfigError(f"Invalid state file {self._path}: {exc}") from exc
        resources = data.get("resources") if isinstance(data, dict) else None
        if not isinstance(resources, dict):
            raise ConfigError(f"Invalid state file {self._path}: missing 'resources' object")
        return resources

    def _save(self, resources: dict[str, Any]) -> None:
        payload = {"version": STATE_VERSION, "resources": resources}
        atomic_write(self._path, json.dumps(payload, indent=2) + "\n", mode=0o600)


def _key(type_name: str, name: str) -> str:
    return f"{type_name}.{name}"
