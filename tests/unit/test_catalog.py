"""Tests for the task catalog."""

from __future__ import annotations

import pytest

from clean_code.catalog import TASK_CATALOG, dedupe, known_sections, packages_for, task_labels


def test_catalog_lists_twelve_tasks_in_order() -> None:
    assert list(task_labels()) == [
        "git_blacklist",
        "git_branch_name",
        "git_commit_message",
        "phpcs",
        "phplint",
        "phpmd",
        "phpstan",
        "phpunit",
        "twigcs",
        "yamllint",
        "jsonlint",
        "security-checker",
    ]
    assert task_labels()["phpcs"] == "PHP CodeSniffer"


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        TASK_CATALOG["new"] = TASK_CATALOG["phpcs"]  # type: ignore[index]


def test_twigcs_owns_two_sections_and_security_checker_is_renamed() -> None:
    assert TASK_CATALOG["twigcs"].config_keys == ("twigcs", "twigcsfixer")
    assert TASK_CATALOG["security-checker"].config_keys == ("securitychecker_enlightn",)
    assert TASK_CATALOG["phplint"].config_keys == ("phplint",)
    assert "security-checker" not in known_sections()


def test_packages_for_skips_tasks_without_packages() -> None:
    assert packages_for(["git_blacklist", "git_branch_name", "git_commit_message", "yamllint"]) == []


def test_packages_for_keeps_order_and_drops_duplicates_and_unknown() -> None:
    assert packages_for(["phpstan", "twigcs", "bogus", "phpstan", "phpcs"]) == [
        "phpstan/phpstan",
        "friendsoftwig/twigcs",
        "vincentlanglet/twig-cs-fixer",
        "drupal/coder",
    ]


def test_dedupe_keeps_first_occurrence() -> None:
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
