"""GrumPHP configuration file generation flow."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from importlib.resources import files
from pathlib import Path

from clean_code import ui
from clean_code.assembler import assemble
from clean_code.extensions import ExtensionLocator, collect_extension_paths
from clean_code.prompts import PromptSession
from clean_code.schema import validate_config
from clean_code.writer import (
    GenerationAborted,
    ask_overwrite,
    confirm_overwrite,
    remove_existing,
    write_config,
)

logger = logging.getLogger(__name__)

GRUMPHP_FILENAME = "grumphp.yml"


class GenerationError(RuntimeError):
    """Raised when the configuration file could not be generated."""


def default_ascii_dir() -> Path:
    """Directory of the pass/fail banners shipped with this package."""
    return Path(str(files("clean_code") / "ascii"))


class GrumGenerator:
    """Ask the operator for task options and write ``grumphp.yml``."""

    def __init__(
        self,
        session: PromptSession,
        locator: ExtensionLocator,
        *,
        ascii_dir: Path | None = None,
        assume_overwrite: bool = False,
    ):
        self.session = session
        self.locator = locator
        self.ascii_dir = ascii_dir or default_ascii_dir()
        self.assume_overwrite = assume_overwrite

    def target_for(self, project_root: Path) -> Path:
        return project_root / GRUMPHP_FILENAME

    def confirm_target(self, project_root: Path) -> Path:
        """Settle the overwrite question up front, before anything else touches the project.

        Raises:
            GenerationAborted: the operator declined to overwrite an existing file.
        """
        target = self.target_for(project_root)
        ask_overwrite(target, self.session, assume_yes=self.assume_overwrite)
        return target

    def generate(
        self,
        project_root: Path,
        selected_tasks: Sequence[str],
        *,
        target_confirmed: bool = False,
    ) -> Path:
        """Run the whole flow and return the written file.

        With ``target_confirmed`` the overwrite question was already answered
        through ``confirm_target`` and is not asked again.

        Raises:
            GenerationAborted: the operator declined to overwrite an existing file.
            GenerationError: anything else went wrong; the cause is chained.
        """
        ui.section("Generating GrumPHP configuration file")
        target = self.target_for(project_root)

        try:
            if target_confirmed:
                remove_existing(target)
            else:
                confirm_overwrite(target, self.session, assume_yes=self.assume_overwrite)

            paths = collect_extension_paths(self.session, self.locator)
            config = assemble(self.session, selected_tasks, ascii_dir=self.ascii_dir, paths=paths)
            validate_config(config)

            ui.console.print("Finalizing GrumPHP configuration...")
            written = write_config(target, config)
        except GenerationAborted:
            raise
        except Exception as exc:
            logger.exception("GrumPHP configuration generation failed")
            self.session.error(f"An error occurred while generating the GrumPHP configuration: {exc}")
            raise GenerationError("GrumPHP configuration file generation failed.") from exc

        ui.success("GrumPHP configuration file generated successfully.")
        return written
