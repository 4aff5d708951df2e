"""Composer package installation and removal."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from clean_code import ui
from clean_code.catalog import dedupe
from clean_code.exec import ExecError, run_composer
from clean_code.settings import SettingsStore

logger = logging.getLogger(__name__)


class PackageAction(str, Enum):
    """Composer subcommand applied to each package."""

    REQUIRE = "require"
    REMOVE = "remove"


class PackageStatus(str, Enum):
    """Per-package lifecycle; see ``TERMINAL_STATUSES`` for end states."""

    PENDING = "pending"
    CHECKING = "checking"
    ALREADY_INSTALLED = "already_installed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    NOT_INSTALLED = "not_installed"
    REMOVING = "removing"
    REMOVED = "removed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {
        PackageStatus.ALREADY_INSTALLED,
        PackageStatus.INSTALLED,
        PackageStatus.NOT_INSTALLED,
        PackageStatus.REMOVED,
        PackageStatus.FAILED,
    }
)


class WorkingDirectoryError(RuntimeError):
    """Raised when the project directory Composer should run in does not exist."""


@dataclass(frozen=True)
class PackageOutcome:
    package: str
    status: PackageStatus
    detail: str = ""


@dataclass(frozen=True)
class InstallReport:
    """Aggregate result of one install or removal batch."""

    action: PackageAction
    outcomes: tuple[PackageOutcome, ...]

    @property
    def failed(self) -> list[str]:
        return [o.package for o in self.outcomes if o.status is PackageStatus.FAILED]

    @property
    def all_success(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        return "success" if self.all_success else "partial_failure"


class PackageManager:
    """Run ``composer require|remove --dev`` for each package, one at a time."""

    def __init__(
        self,
        project_root: Path,
        settings: SettingsStore,
        *,
        timeout: int | None = None,
        show_progress: bool = True,
    ):
        self.project_root = project_root
        self.settings = settings
        self.timeout = timeout
        self.show_progress = show_progress

    def install_packages(self, packages: Sequence[str]) -> InstallReport:
        return self._manage(packages, PackageAction.REQUIRE)

    def remove_packages(self, packages: Sequence[str]) -> InstallReport:
        return self._manage(packages, PackageAction.REMOVE)

    def resolve_working_dir(self) -> Path:
        root = self.project_root.resolve()
        if not root.is_dir():
            logger.error("Invalid path: %s", root)
            raise WorkingDirectoryError(f"Invalid path: {root}")
        return root

    def is_installed(self, package: str, working_dir: Path) -> bool:
        """Ask ``composer show`` whether the package is already part of the project."""
        result = run_composer(
            ["show", package],
            project_root=working_dir,
            timeout=self._timeout(),
            check=False,
        )
        return result.ok

    def _timeout(self) -> int:
        if self.timeout is None:
            self.timeout = self.settings.process_timeout()
        return self.timeout

    def _manage(self, packages: Sequence[str], action: PackageAction) -> InstallReport:
        working_dir = self.resolve_working_dir()
        self._timeout()
        requested = dedupe(packages)

        verb = "Requiring" if action is PackageAction.REQUIRE else "Removing"
        ui.section(f"{verb} packages...")
        ui.console.print(f"Preparing to {action.value} the following packages:")
        ui.listing(requested)
        logger.info("%s packages: %s", verb, ", ".join(requested))

        outcomes: list[PackageOutcome] = []
        with ui.progress_bar(len(requested) if self.show_progress else 0, f"{verb} packages") as advance:
            for package in requested:
                outcome = self._process(package, working_dir, action)
                outcomes.append(outcome)
                if outcome.status is PackageStatus.FAILED:
                    ui.error(f"Failed to process package: {package}")
                advance()

        if action is PackageAction.REQUIRE:
            self.settings.save_selected_packages(requested)
            ui.success("Selected packages saved to configuration.")
        else:
            removed = {o.package for o in outcomes if o.status is not PackageStatus.FAILED}
            remaining = [p for p in self.settings.selected_packages() if p not in removed]
            self.settings.save_selected_packages(remaining)

        report = InstallReport(action=action, outcomes=tuple(outcomes))
        past = "required" if action is PackageAction.REQUIRE else "removed"
        if report.all_success:
            ui.success(f"Packages {past} successfully.")
            logger.info("Packages %s successfully.", past)
        else:
            ui.warning(f"Some packages failed to {action.value}. Please check the logs for details.")
            logger.warning("Packages failed to %s: %s", action.value, ", ".join(report.failed))
        return report

    def _process(self, package: str, working_dir: Path, action: PackageAction) -> PackageOutcome:
        status = PackageStatus.PENDING
        try:
            status = self._advance(package, status, PackageStatus.CHECKING)
            installed = self.is_installed(package, working_dir)

            if action is PackageAction.REQUIRE and installed:
                ui.warning(f"{package} is already installed, skipping.")
                return self._finish(package, status, PackageStatus.ALREADY_INSTALLED)
            if action is PackageAction.REMOVE and not installed:
                ui.warning(f"{package} is not installed, skipping.")
                return self._finish(package, status, PackageStatus.NOT_INSTALLED)

            running = PackageStatus.INSTALLING if action is PackageAction.REQUIRE else PackageStatus.REMOVING
            status = self._advance(package, status, running)
            run_composer(
                [action.value, package],
                project_root=working_dir,
                dev=True,
                timeout=self._timeout(),
            )
        except ExecError as exc:
            failed = exc.result
            detail = "timed out" if failed.timed_out else (failed.stderr or failed.stdout).strip()
            logger.error("Failed to process %s: %s", package, detail)
            return self._finish(package, status, PackageStatus.FAILED, detail)
        except OSError as exc:
            logger.error("Failed to process %s: %s", package, exc)
            return self._finish(package, status, PackageStatus.FAILED, str(exc))

        ui.console.print(f"[green]{package} processed successfully.[/green]")
        done = PackageStatus.INSTALLED if action is PackageAction.REQUIRE else PackageStatus.REMOVED
        return self._finish(package, status, done)

    def _advance(self, package: str, current: PackageStatus, new: PackageStatus) -> PackageStatus:
        logger.debug("%s: %s -> %s", package, current.value, new.value)
        return new

    def _finish(
        self,
        package: str,
        current: PackageStatus,
        final: PackageStatus,
        detail: str = "",
    ) -> PackageOutcome:
        if final not in TERMINAL_STATUSES:
            raise ValueError(f"{final.value} is not a terminal package status")
        self._advance(package, current, final)
        logger.info("%s: %s", package, final.value)
        return PackageOutcome(package=package, status=final, detail=detail)
