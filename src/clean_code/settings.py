"""Project-local configuration and state stores.

Layout under the project root::

    .clean_code/settings.yml   selected_packages, process_timeout, base_url
    .clean_code/state.json     flat key -> value preferences

``CLEAN_CODE_PROCESS_TIMEOUT`` overrides the stored process timeout.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

SETTINGS_DIR = ".clean_code"
SETTINGS_FILENAME = "settings.yml"
STATE_FILENAME = "state.json"

DEFAULT_PROCESS_TIMEOUT = 300
PROCESS_TIMEOUT_ENV = "CLEAN_CODE_PROCESS_TIMEOUT"

REMOVE_PACKAGES_KEY = "clean_code.remove_packages"


class SettingsError(RuntimeError):
    """Raised when a settings or state file is malformed."""


def settings_dir(project_root: Path) -> Path:
    return project_root / SETTINGS_DIR


class SettingsStore:
    """YAML backed configuration store."""

    def __init__(self, project_root: Path):
        self.path = settings_dir(project_root) / SETTINGS_FILENAME

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise SettingsError(f"Malformed YAML settings at {self.path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(f"Invalid settings structure in {self.path}: expected a mapping")
        return data

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(data, sort_keys=False, default_flow_style=False),
            encoding="utf-8",
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self.load()
        data[key] = value
        self.save(data)

    def selected_packages(self) -> list[str]:
        value = self.get("selected_packages", [])
        if not isinstance(value, list):
            raise SettingsError(f"Invalid selected_packages in {self.path}: expected a list")
        return [str(item) for item in value]

    def save_selected_packages(self, packages: list[str]) -> None:
        self.set("selected_packages", list(packages))

    def process_timeout(self) -> int:
        raw = os.getenv(PROCESS_TIMEOUT_ENV)
        source = PROCESS_TIMEOUT_ENV
        if raw is None:
            raw = self.get("process_timeout", DEFAULT_PROCESS_TIMEOUT)
            source = str(self.path)
        try:
            timeout = int(raw)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Invalid process_timeout from {source}: {raw!r}") from e
        if timeout <= 0:
            raise SettingsError(f"Invalid process_timeout from {source}: must be positive")
        return timeout

    def base_url(self) -> str | None:
        value = self.get("base_url")
        return str(value).rstrip("/") if value else None


class StateStore:
    """JSON backed key-value store for operator preferences."""

    def __init__(self, project_root: Path):
        self.path = settings_dir(project_root) / STATE_FILENAME

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SettingsError(f"Malformed JSON state at {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Invalid state structure in {self.path}: expected an object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
