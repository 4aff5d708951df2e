"""YAML document writer with confirm-before-overwrite."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from clean_code.prompts import PromptSession

logger = logging.getLogger(__name__)

YAML_INDENT = 2


class GenerationAborted(RuntimeError):
    """Raised when the operator declines to overwrite an existing file."""


class PersistenceError(OSError):
    """Raised when the configuration file cannot be deleted or written."""


class _IndentedDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


def dump_config(document: dict[str, Any]) -> str:
    """Serialize keeping insertion order; empty lists render as ``[]``."""
    return yaml.dump(
        document,
        Dumper=_IndentedDumper,
        sort_keys=False,
        default_flow_style=False,
        indent=YAML_INDENT,
        allow_unicode=True,
        width=4096,
    )


def ask_overwrite(path: Path, session: PromptSession, *, assume_yes: bool = False) -> None:
    """Ask before replacing ``path``; raise GenerationAborted on decline."""
    if not path.exists():
        return

    session.warn("GrumPHP configuration file already exists.")
    if not assume_yes and not session.ask_bool("Do you want to overwrite the existing file?", False):
        session.warn("GrumPHP configuration file generation aborted.")
        raise GenerationAborted("GrumPHP configuration file generation aborted by user.")


def remove_existing(path: Path) -> None:
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as exc:
        raise PersistenceError(f"Failed to delete existing GrumPHP configuration file: {exc}") from exc
    logger.info("Deleted existing configuration file %s", path)


def confirm_overwrite(path: Path, session: PromptSession, *, assume_yes: bool = False) -> None:
    """Ask before replacing ``path``; delete it on accept, abort on decline."""
    ask_overwrite(path, session, assume_yes=assume_yes)
    remove_existing(path)


def write_config(path: Path, document: dict[str, Any]) -> Path:
    """Write the document as YAML, creating the parent directory when missing."""
    content = dump_config(document)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(
            f"Failed to prepare directory for GrumPHP configuration file: {exc}"
        ) from exc

    try:
        _atomic_write(path, content)
    except OSError as exc:
        raise PersistenceError(f"Failed to save the GrumPHP configuration file: {exc}") from exc
    logger.info("Wrote configuration file %s", path)
    return path


def _atomic_write(path: Path, content: str) -> None:
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp_file:
            tmp_file.write(content)
            tmp_path = Path(tmp_file.name)
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
