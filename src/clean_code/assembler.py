"""Assemble the GrumPHP configuration document from operator answers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from clean_code import ui
from clean_code.builders import build_task
from clean_code.catalog import dedupe
from clean_code.extensions import ExtensionPaths
from clean_code.prompts import PromptSession

logger = logging.getLogger(__name__)

ROOT_KEY = "grumphp"


def initialize_base_config(session: PromptSession, *, ascii_dir: Path) -> dict[str, Any]:
    """Ask for the global GrumPHP settings and return the base document."""
    return {
        ROOT_KEY: {
            "hide_circumvention_tip": session.ask_bool("Hide circumvention tip?", True),
            "process_timeout": session.ask_int("Process timeout (in seconds)?", 170),
            "stop_on_failure": session.ask_bool("Stop on failure?", False),
            "ignore_unstaged_changes": session.ask_bool("Ignore unstaged changes?", False),
            "fixer": {
                "enabled": session.ask_bool("Enable fixer?", False),
            },
            "ascii": {
                "failed": (ascii_dir / "failed.txt").as_posix(),
                "succeeded": (ascii_dir / "succeeded.txt").as_posix(),
            },
            "tasks": {},
        },
    }


def configure_task(
    config: dict[str, Any],
    task_id: str,
    session: PromptSession,
    paths: ExtensionPaths,
) -> bool:
    """Insert the sections of ``task_id`` into ``config``; False when the task is unknown."""
    ui.section(f"Configuring task: {task_id}")
    sections = build_task(task_id, session, paths)
    if sections is None:
        logger.warning("Task configuration for %s not implemented.", task_id)
        session.warn(f"Task configuration for {task_id} not implemented.")
        return False
    config[ROOT_KEY]["tasks"].update(sections)
    return True


def assemble(
    session: PromptSession,
    selected_tasks: Iterable[str],
    *,
    ascii_dir: Path,
    paths: ExtensionPaths | None = None,
) -> dict[str, Any]:
    """Build the full document: base settings, then each selected task in order."""
    paths = paths or ExtensionPaths()
    config = initialize_base_config(session, ascii_dir=ascii_dir)
    for task_id in dedupe(selected_tasks):
        configure_task(config, task_id, session, paths)
    return config
