"""Tests for document validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from clean_code.assembler import assemble
from clean_code.catalog import TASK_CATALOG
from clean_code.schema import ConfigValidationError, validate_config
from tests.prompt_stub import ScriptedSession


def test_document_with_every_task_is_valid() -> None:
    validate_config(assemble(ScriptedSession(), list(TASK_CATALOG), ascii_dir=Path("/a")))


def test_unknown_section_is_rejected() -> None:
    document = assemble(ScriptedSession(), [], ascii_dir=Path("/a"))
    document["grumphp"]["tasks"]["security-checker"] = {"lockfile": "composer.lock"}

    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(document)
    assert any("security-checker" in msg for msg in excinfo.value.messages)


def test_wrong_global_type_is_reported_with_path() -> None:
    document = assemble(ScriptedSession(), [], ascii_dir=Path("/a"))
    document["grumphp"]["process_timeout"] = "soon"

    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(document)
    assert excinfo.value.messages[0].startswith("grumphp.process_timeout:")
