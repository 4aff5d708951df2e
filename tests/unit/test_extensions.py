"""Tests for locating custom modules and themes."""

from __future__ import annotations

from pathlib import Path

from clean_code.extensions import ExtensionLocator, ExtensionPaths, collect_extension_paths
from tests.prompt_stub import ScriptedSession


def test_find_module_and_theme(drupal_project: Path) -> None:
    locator = ExtensionLocator(drupal_project)
    assert locator.base_path("module", "acme_core") == "web/modules/custom/acme_core"
    assert locator.base_path("theme", "acme_theme") == "web/themes/custom/acme_theme"


def test_type_must_match(drupal_project: Path) -> None:
    locator = ExtensionLocator(drupal_project)
    assert not locator.exists("theme", "acme_core")
    assert not locator.exists("module", "acme_theme")
    assert locator.base_path("module", "missing") is None


def test_vendor_copies_are_ignored(drupal_project: Path) -> None:
    vendored = drupal_project / "web" / "modules" / "contrib" / "node_modules" / "pkg"
    vendored.mkdir(parents=True)
    (vendored / "hidden.info.yml").write_text("type: module\n", encoding="utf-8")
    assert not ExtensionLocator(drupal_project).exists("module", "hidden")


def test_custom_docroot(tmp_path: Path) -> None:
    module = tmp_path / "docroot" / "modules" / "custom" / "m"
    module.mkdir(parents=True)
    (module / "m.info.yml").write_text("type: module\n", encoding="utf-8")
    assert ExtensionLocator(tmp_path, "docroot").base_path("module", "m") == "docroot/modules/custom/m"


def test_unreadable_info_file_is_skipped(drupal_project: Path) -> None:
    broken = drupal_project / "web" / "modules" / "custom" / "broken"
    broken.mkdir(parents=True)
    (broken / "broken.info.yml").write_text("type: [module\n", encoding="utf-8")
    assert not ExtensionLocator(drupal_project).exists("module", "broken")


def test_collect_reprompts_until_existing_name(drupal_project: Path) -> None:
    session = ScriptedSession(["nope", "acme_core", ""])
    paths = collect_extension_paths(session, ExtensionLocator(drupal_project))

    assert paths == ExtensionPaths(module_path="web/modules/custom/acme_core", theme_path=None)
    assert session.errors == ["The module 'nope' does not exist."]
    assert session.notes == ["Skipping theme configuration."]


def test_collect_skips_both_on_blank_answers(drupal_project: Path) -> None:
    session = ScriptedSession()
    paths = collect_extension_paths(session, ExtensionLocator(drupal_project))
    assert paths == ExtensionPaths()
    assert paths.patterns() == []
    assert session.notes == ["Skipping module configuration.", "Skipping theme configuration."]
