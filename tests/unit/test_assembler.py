"""Tests for assembling the GrumPHP document."""

from __future__ import annotations

from pathlib import Path

from clean_code.assembler import ROOT_KEY, assemble, initialize_base_config
from clean_code.extensions import ExtensionPaths
from tests.prompt_stub import ScriptedSession

ASCII = Path("/opt/clean_code/ascii")


def test_base_config_defaults() -> None:
    config = initialize_base_config(ScriptedSession(), ascii_dir=ASCII)
    assert config == {
        "grumphp": {
            "hide_circumvention_tip": True,
            "process_timeout": 170,
            "stop_on_failure": False,
            "ignore_unstaged_changes": False,
            "fixer": {"enabled": False},
            "ascii": {
                "failed": "/opt/clean_code/ascii/failed.txt",
                "succeeded": "/opt/clean_code/ascii/succeeded.txt",
            },
            "tasks": {},
        }
    }


def test_base_config_asks_globals_in_order() -> None:
    session = ScriptedSession([False, 60, True, True, True])
    config = initialize_base_config(session, ascii_dir=ASCII)[ROOT_KEY]
    assert session.asked == [
        "Hide circumvention tip?",
        "Process timeout (in seconds)?",
        "Stop on failure?",
        "Ignore unstaged changes?",
        "Enable fixer?",
    ]
    assert config["process_timeout"] == 60
    assert config["fixer"] == {"enabled": True}


def test_phplint_and_phpcs_end_to_end() -> None:
    paths = ExtensionPaths(module_path="web/modules/custom/acme_core")
    config = assemble(ScriptedSession(), ["phplint", "phpcs"], ascii_dir=ASCII, paths=paths)

    tasks = config[ROOT_KEY]["tasks"]
    assert list(tasks) == ["phplint", "phpcs"]
    assert tasks["phplint"] == {
        "exclude": [],
        "jobs": 4,
        "short_open_tag": True,
        "ignore_patterns": ["#web/modules/custom/acme_core/tests#"],
        "triggered_by": ["php", "module", "theme", "inc", "phtml", "php3", "php4", "php5"],
    }
    assert tasks["phpcs"]["standard"] == ["Drupal", "DrupalPractice"]
    assert tasks["phpcs"]["whitelist_patterns"] == ["#web/modules/custom/acme_core#"]


def test_unknown_task_is_skipped_with_warning() -> None:
    session = ScriptedSession()
    config = assemble(session, ["bogus", "jsonlint"], ascii_dir=ASCII)
    assert list(config[ROOT_KEY]["tasks"]) == ["jsonlint"]
    assert session.warnings == ["Task configuration for bogus not implemented."]


def test_repeated_task_is_configured_once() -> None:
    session = ScriptedSession()
    assemble(session, ["security-checker", "security-checker"], ascii_dir=ASCII)
    assert session.asked.count("Path to composer.lock file?") == 1


def test_no_tasks_yields_empty_task_map() -> None:
    config = assemble(ScriptedSession(), [], ascii_dir=ASCII)
    assert config[ROOT_KEY]["tasks"] == {}
