"""Pytest configuration and fixtures for clean-code tests."""
import logging
from pathlib import Path

import pytest

from clean_code.log import LOGGER_NAME


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'clean_code' (the package) not 'src/clean_code'.",
            returncode=1,
        )


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    """No progress bars and no environment overrides leaking in from the shell."""
    monkeypatch.setenv("CLEAN_CODE_PLAIN", "1")
    monkeypatch.delenv("CLEAN_CODE_PROCESS_TIMEOUT", raising=False)
    monkeypatch.delenv("CLEAN_CODE_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def _write_info(path: Path, name: str, kind: str) -> None:
    path.mkdir(parents=True, exist_ok=True)
    (path / f"{name}.info.yml").write_text(
        f"name: {name}\ntype: {kind}\ncore_version_requirement: ^10\n",
        encoding="utf-8",
    )


@pytest.fixture
def drupal_project(tmp_path: Path) -> Path:
    """Composer project with one custom module and one custom theme under ``web``."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "composer.json").write_text('{"name": "acme/site"}\n', encoding="utf-8")
    _write_info(root / "web" / "modules" / "custom" / "acme_core", "acme_core", "module")
    _write_info(root / "web" / "themes" / "custom" / "acme_theme", "acme_theme", "theme")
    return root
