"""Locate custom Drupal modules and themes inside a project."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml

from clean_code.prompts import PromptSession

logger = logging.getLogger(__name__)

ExtensionType = Literal["module", "theme"]

SEARCH_DIRS: dict[str, tuple[str, ...]] = {
    "module": ("modules", "profiles", "core/modules"),
    "theme": ("themes", "core/themes"),
}
SKIP_DIRS = frozenset({"node_modules", "vendor", ".git"})


@dataclass(frozen=True)
class ExtensionPaths:
    """Project-relative paths of the operator's custom module and theme."""

    module_path: str | None = None
    theme_path: str | None = None

    def patterns(self, suffix: str = "") -> list[str]:
        """Return ``#<path><suffix>#`` patterns for the paths that are set."""
        return [f"#{path}{suffix}#" for path in (self.module_path, self.theme_path) if path]

    def module_patterns(self, suffix: str = "") -> list[str]:
        return [f"#{self.module_path}{suffix}#"] if self.module_path else []


class ExtensionLocator:
    """Find extensions by machine name under the Drupal docroot."""

    def __init__(self, project_root: Path, docroot: str = "web"):
        self.project_root = project_root.resolve()
        self.docroot = self.project_root / docroot

    def find(self, kind: ExtensionType, machine_name: str) -> Path | None:
        """Return the directory holding ``<machine_name>.info.yml`` of the given type."""
        info_name = f"{machine_name}.info.yml"
        for rel in SEARCH_DIRS[kind]:
            base = self.docroot / rel
            if not base.is_dir():
                continue
            for info in sorted(base.rglob(info_name)):
                if SKIP_DIRS.intersection(info.relative_to(base).parts):
                    continue
                if _info_type(info) == kind:
                    return info.parent
        return None

    def exists(self, kind: ExtensionType, machine_name: str) -> bool:
        return self.find(kind, machine_name) is not None

    def base_path(self, kind: ExtensionType, machine_name: str) -> str | None:
        """Return the extension path relative to the project root (``web/...``).

        Falls back to the absolute path when the extension lives outside the project.
        """
        found = self.find(kind, machine_name)
        if found is None:
            return None
        resolved = found.resolve()
        try:
            return resolved.relative_to(self.project_root).as_posix()
        except ValueError:
            return resolved.as_posix()


def _info_type(info_file: Path) -> str | None:
    try:
        data = yaml.safe_load(info_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Unreadable info file %s: %s", info_file, exc)
        return None
    if not isinstance(data, dict):
        return None
    kind = data.get("type")
    return str(kind) if kind is not None else None


def prompt_for_extension(
    session: PromptSession,
    locator: ExtensionLocator,
    kind: ExtensionType,
) -> str | None:
    """Ask for a custom extension name until it exists or the answer is blank."""
    while True:
        name = session.ask_text(f"Enter your custom {kind} name, leave empty to skip")
        if not name:
            session.note(f"Skipping {kind} configuration.")
            return None
        if locator.exists(kind, name):
            return name
        session.error(f"The {kind} '{name}' does not exist.")


def collect_extension_paths(session: PromptSession, locator: ExtensionLocator) -> ExtensionPaths:
    """Prompt for the custom module and theme and resolve their paths."""
    module_name = prompt_for_extension(session, locator, "module")
    module_path = locator.base_path("module", module_name) if module_name else None

    theme_name = prompt_for_extension(session, locator, "theme")
    theme_path = locator.base_path("theme", theme_name) if theme_name else None

    return ExtensionPaths(module_path=module_path, theme_path=theme_path)
