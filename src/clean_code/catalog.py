"""Catalog of supported GrumPHP tasks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class TaskSpec:
    """A selectable code quality check."""

    task_id: str
    label: str
    packages: tuple[str, ...] = ()
    sections: tuple[str, ...] = ()

    @property
    def config_keys(self) -> tuple[str, ...]:
        """Keys written under ``grumphp.tasks`` for this task."""
        return self.sections or (self.task_id,)


_TASKS: tuple[TaskSpec, ...] = (
    TaskSpec("git_blacklist", "Git Blacklist"),
    TaskSpec("git_branch_name", "Git Branch Name"),
    TaskSpec("git_commit_message", "Git Commit Message"),
    TaskSpec("phpcs", "PHP CodeSniffer", packages=("drupal/coder",)),
    TaskSpec("phplint", "PHP Lint", packages=("php-parallel-lint/php-parallel-lint",)),
    TaskSpec("phpmd", "PHP Mess Detector", packages=("phpmd/phpmd",)),
    TaskSpec("phpstan", "PHPStan", packages=("phpstan/phpstan",)),
    TaskSpec("phpunit", "PHPUnit", packages=("phpunit/phpunit",)),
    TaskSpec(
        "twigcs",
        "Twig CodeSniffer",
        packages=("friendsoftwig/twigcs", "vincentlanglet/twig-cs-fixer"),
        sections=("twigcs", "twigcsfixer"),
    ),
    TaskSpec("yamllint", "YAML Lint"),
    TaskSpec("jsonlint", "JSON Lint", packages=("seld/jsonlint",)),
    TaskSpec(
        "security-checker",
        "Security Checker",
        packages=("enlightn/security-checker",),
        sections=("securitychecker_enlightn",),
    ),
)

TASK_CATALOG: MappingProxyType[str, TaskSpec] = MappingProxyType({spec.task_id: spec for spec in _TASKS})


def task_labels() -> dict[str, str]:
    """Return task id -> label in catalog order."""
    return {task_id: spec.label for task_id, spec in TASK_CATALOG.items()}


def known_sections() -> tuple[str, ...]:
    """Return every config key any catalog task may write."""
    return tuple(key for spec in TASK_CATALOG.values() for key in spec.config_keys)


def dedupe(values: Iterable[str]) -> list[str]:
    """Drop repeated values, keeping first occurrences in order."""
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def packages_for(task_ids: Iterable[str]) -> list[str]:
    """Map selected task ids to their ordered, distinct Composer packages.

    Tasks without packages (the git guards, yamllint) and unknown ids contribute nothing.
    """
    packages: list[str] = []
    for task_id in dedupe(task_ids):
        spec = TASK_CATALOG.get(task_id)
        if spec is None:
            continue
        packages.extend(spec.packages)
    return dedupe(packages)
