"""Per-task option builders.

Each builder asks its fixed sequence of questions and returns the sub-document
GrumPHP expects under ``grumphp.tasks.<section>``. Builders are registered by
section key; a catalog task may own more than one section.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from clean_code.catalog import TASK_CATALOG
from clean_code.extensions import ExtensionPaths
from clean_code.prompts import PromptSession

Builder = Callable[[PromptSession, ExtensionPaths], dict[str, Any]]

BUILDERS: dict[str, Builder] = {}

PHP_EXTENSIONS = ["php", "module", "theme", "inc", "phtml", "php3", "php4", "php5"]
DRUPAL_PHP_EXTENSIONS = ["php", "module", "theme", "inc"]

DEFAULT_KEYWORDS = ["die(", "var_dump(", "exit;", "dd(", "kint(", "print_r(", "debug("]
DEFAULT_BRANCH_WHITELIST = [
    r"/^(feature|bugfix|hotfix|release|support|task|chore|improvement|refactor)\/([a-z0-9\-]+)$/",
]
PROTECTED_BRANCHES = ["master", "develop", "production", "staging"]
DEFAULT_COMMIT_MATCHER = (
    r"/^(feat|fix|refactor|style|test|docs|build|ops|chore)\([a-z0-9_-]+\): [a-zA-Z0-9 _()\-]+$"
    r'|^Merge branch .+$|^Revert "[^"]+"$/'
)
MATCHER_CHOICES = {
    "default": "<type>(<scope>): <subject> (JIRA-<issue>) || Merge branch <branch-name> || Revert <commit-message>",
    "custom": "Type custom matchers",
    "none": "None",
}
PHPSTAN_IGNORES = [
    ".github",
    ".gitlab",
    "/config",
    "/drush",
    "/web/robots.txt",
    "/web/sites/default",
    "bower_components",
    "node_modules",
    "/vendor",
]
TWIG_EXCLUDES = ["#web/core#", "#web/modules/contrib#", "#web/themes/contrib#", "#web/libraries#"]
PHPMD_RULESETS = ["cleancode", "codesize", "naming", "controversial", "design", "unusedcode"]


def builder(section: str) -> Callable[[Builder], Builder]:
    """Register ``fn`` as the builder for ``section``."""

    def register(fn: Builder) -> Builder:
        BUILDERS[section] = fn
        return fn

    return register


def build_task(task_id: str, session: PromptSession, paths: ExtensionPaths) -> dict[str, dict[str, Any]] | None:
    """Run every builder of a catalog task; return None for unknown task ids."""
    spec = TASK_CATALOG.get(task_id)
    if spec is None or not all(key in BUILDERS for key in spec.config_keys):
        return None
    return {key: BUILDERS[key](session, paths) for key in spec.config_keys}


def _ask_whitelist(session: PromptSession, default: list[str]) -> list[str]:
    return session.ask_list("Enter whitelist patterns", default)


def _ask_ignore(session: PromptSession, default: list[str]) -> list[str]:
    return session.ask_list("Enter ignore patterns", default)


def _ask_triggered_by(session: PromptSession, default: list[str]) -> list[str]:
    return session.ask_list("Files to trigger this task?", default)


@builder("git_blacklist")
def build_git_blacklist(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "keywords": session.ask_list("Enter keywords", DEFAULT_KEYWORDS),
        "whitelist_patterns": _ask_whitelist(session, paths.patterns()),
        "triggered_by": _ask_triggered_by(session, PHP_EXTENSIONS),
        "regexp_type": "G",
        "match_word": False,
        "ignore_patterns": _ask_ignore(session, paths.module_patterns("/tests")),
    }


@builder("git_branch_name")
def build_git_branch_name(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "whitelist": _ask_whitelist(session, DEFAULT_BRANCH_WHITELIST),
        "blacklist": list(PROTECTED_BRANCHES),
        "allow_detached_head": False,
    }


@builder("git_commit_message")
def build_git_commit_message(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "allow_empty_message": False,
        "enforce_capitalized_subject": False,
        "enforce_no_subject_punctuations": True,
        "enforce_no_subject_trailing_period": True,
        "enforce_single_lined_subject": True,
        "max_body_width": 72,
        "max_subject_width": 60,
        "matchers": _ask_matchers(session),
        "case_insensitive": False,
        "multiline": True,
        "skip_on_merge_commit": True,
    }


def _ask_matchers(session: PromptSession) -> list[str]:
    choice = session.ask_choice(
        "Please select the matchers you want to include:",
        MATCHER_CHOICES,
        default="none",
    )
    if choice == "custom":
        return _ask_custom_matchers(session)
    if choice == "default":
        return [DEFAULT_COMMIT_MATCHER]
    return []


def _ask_custom_matchers(session: PromptSession) -> list[str]:
    # One regex per answer, commas included.
    matchers: list[str] = []
    while True:
        matcher = session.ask_text("Enter a custom matcher, leave empty to finish")
        if not matcher:
            return matchers
        matchers.append(matcher)


@builder("phplint")
def build_phplint(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "exclude": [],
        "jobs": session.ask_int("Number of parallel jobs?", 4),
        "short_open_tag": session.ask_bool("Allow short open tag?", True),
        "ignore_patterns": _ask_ignore(session, paths.module_patterns("/tests")),
        "triggered_by": _ask_triggered_by(session, PHP_EXTENSIONS),
    }


@builder("phpcs")
def build_phpcs(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "standard": session.ask_list("PHP CodeSniffer standard(s) to use?", ["Drupal", "DrupalPractice"]),
        "severity": session.ask_int("Severity level?", 5),
        "error_severity": session.ask_int("Error severity level?", 5),
        "warning_severity": session.ask_int("Warning severity level?", 5),
        "tab_width": None,
        "report": session.ask_text("Report format?", "full"),
        "report_width": session.ask_int("Report width?", 80),
        "whitelist_patterns": _ask_whitelist(session, paths.patterns()),
        "encoding": session.ask_text("File encoding?", "utf-8"),
        "ignore_patterns": _ask_ignore(session, paths.module_patterns("/tests")),
        "sniffs": [],
        "triggered_by": ["php"],
        "exclude": [],
        "show_sniffs_error_path": True,
    }


@builder("phpmd")
def build_phpmd(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "whitelist_patterns": _ask_whitelist(session, paths.patterns()),
        "exclude": [],
        "report_format": session.ask_text("Report format?", "text"),
        "ruleset": session.ask_list("Rulesets to apply?", PHPMD_RULESETS),
        "triggered_by": _ask_triggered_by(session, DRUPAL_PHP_EXTENSIONS),
    }


@builder("phpstan")
def build_phpstan(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "autoload_file": None,
        "level": session.ask_int("Level of rule strictness?", 4),
        "force_patterns": [],
        "ignore_patterns": _ask_ignore(session, [*paths.module_patterns("/tests"), *PHPSTAN_IGNORES]),
        "triggered_by": list(DRUPAL_PHP_EXTENSIONS),
        "memory_limit": session.ask_text("Memory limit?", "-1"),
        "use_grumphp_paths": True,
    }


@builder("phpunit")
def build_phpunit(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "config_file": session.ask_text("Path to PHPUnit config file?", "phpunit.xml.dist"),
        "testsuite": None,
        "group": [],
        "exclude_group": [],
        "always_execute": False,
        "order": None,
    }


@builder("twigcs")
def build_twigcs(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "path": session.ask_text("Path to twig files?", "."),
        "severity": session.ask_text("Severity level?", "warning"),
        "display": session.ask_text("Violations to display (all/blocking)?", "all"),
        "ruleset": session.ask_text("Ruleset to use?", "FriendsOfTwig\\Twigcs\\Ruleset\\Official"),
        "triggered_by": ["twig"],
        "exclude": session.ask_list("Enter exclude patterns", TWIG_EXCLUDES),
    }


@builder("twigcsfixer")
def build_twigcsfixer(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "paths": [],
        "level": None,
        "config": None,
        "report": "text",
        "no-cache": True,
        "verbose": False,
        "triggered_by": ["twig"],
    }


@builder("yamllint")
def build_yamllint(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "whitelist_patterns": _ask_whitelist(session, paths.patterns()),
        "ignore_patterns": _ask_ignore(session, paths.module_patterns("/tests")),
        "object_support": session.ask_bool("Enable object support?", False),
        "exception_on_invalid_type": session.ask_bool("Throw exception on invalid type?", False),
        "parse_constant": session.ask_bool("Enable parsing constants?", False),
        "parse_custom_tags": session.ask_bool("Enable custom tags?", False),
    }


@builder("jsonlint")
def build_jsonlint(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "ignore_patterns": _ask_ignore(session, paths.module_patterns("/tests")),
        "detect_key_conflicts": session.ask_bool("Detect key conflicts?", False),
    }


@builder("securitychecker_enlightn")
def build_securitychecker_enlightn(session: PromptSession, paths: ExtensionPaths) -> dict[str, Any]:
    return {
        "lockfile": session.ask_text("Path to composer.lock file?", "composer.lock"),
        "run_always": session.ask_bool("Run always?", False),
    }
