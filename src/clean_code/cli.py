"""clean-code CLI - GrumPHP configuration, package and check commands."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from clean_code import __version__, ui
from clean_code.catalog import packages_for, task_labels
from clean_code.check import ToolNotFoundError, run_check
from clean_code.extensions import ExtensionLocator
from clean_code.generator import GenerationError, GrumGenerator
from clean_code.log import LOG_FILENAME, setup_logging
from clean_code.packages import PackageManager, WorkingDirectoryError
from clean_code.prompts import (
    ConsolePromptSession,
    DefaultsPromptSession,
    NoInputError,
    PromptSession,
)
from clean_code.settings import (
    REMOVE_PACKAGES_KEY,
    SettingsError,
    SettingsStore,
    StateStore,
    settings_dir,
)
from clean_code.writer import GenerationAborted

logger = logging.getLogger(__name__)

console = ui.console

cli = typer.Typer(
    name="clean-code",
    help="Generate GrumPHP configuration for Drupal projects and run its checks.",
    no_args_is_help=True,
    add_completion=False,
)

TASK_PROMPT = "Please select the tasks you want to include (comma-separated):"
REMOVE_PROMPT = "Do you want the packages to be removed when the module is uninstalled?"

EXIT_FAILURE = 1


@dataclass(frozen=True)
class AppContext:
    project_root: Path
    docroot: str


def build_session(defaults: bool = False) -> PromptSession:
    """Session used to ask the operator; ``defaults`` answers everything unattended."""
    if defaults:
        return DefaultsPromptSession()
    return ConsolePromptSession()


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    ctx: typer.Context,
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        help="Composer project root (where composer.json and grumphp.yml live).",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    docroot: str = typer.Option(
        "web",
        "--docroot",
        help="Drupal web root, relative to the project root.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo debug logs to stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show clean-code version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Configure logging and remember where the project lives."""
    _ = version
    setup_logging(settings_dir(project_root) / LOG_FILENAME, verbose=verbose)
    ctx.obj = AppContext(project_root=project_root, docroot=docroot)


def _app(ctx: typer.Context) -> AppContext:
    obj = ctx.find_root().obj
    if not isinstance(obj, AppContext):
        obj = AppContext(project_root=Path.cwd(), docroot="web")
    return obj


def _fail(message: str, exc: BaseException) -> NoReturn:
    logger.error("%s: %s", message, exc, exc_info=exc)
    console.print(f"[bold red]Error:[/bold red] {message}")
    console.print(f"[dim]{exc}[/dim]")
    raise typer.Exit(EXIT_FAILURE) from exc


def _aborted(exc: GenerationAborted) -> NoReturn:
    logger.warning("Generation aborted: %s", exc)
    console.print(f"[yellow]{exc}[/yellow]")
    raise typer.Exit(EXIT_FAILURE) from exc


def select_tasks(session: PromptSession) -> list[str]:
    """Ask which tasks to configure; returns catalog ids in the order chosen."""
    selected = session.ask_choice(TASK_PROMPT, task_labels(), default=0, allow_multiple=True)
    return list(selected) if isinstance(selected, list) else [selected]


def _generator(app: AppContext, session: PromptSession, overwrite: bool) -> GrumGenerator:
    locator = ExtensionLocator(app.project_root, app.docroot)
    return GrumGenerator(session, locator, assume_overwrite=overwrite)


_DEFAULTS_HELP = "Answer every question with its default value."
_OVERWRITE_HELP = "Replace an existing grumphp.yml without asking."


@cli.command("generate-install")
def generate_install(
    ctx: typer.Context,
    defaults: bool = typer.Option(False, "--defaults", help=_DEFAULTS_HELP),
    overwrite: bool = typer.Option(False, "--overwrite", help=_OVERWRITE_HELP),
) -> None:
    """Generate GrumPHP configuration and install required packages."""
    app = _app(ctx)
    session = build_session(defaults)
    try:
        tasks = select_tasks(session)
        generator = _generator(app, session, overwrite)
        generator.confirm_target(app.project_root)

        packages = packages_for(tasks)
        if packages:
            console.print("[cyan]Installing Composer packages...[/cyan]")
            PackageManager(app.project_root, SettingsStore(app.project_root)).install_packages(packages)

        remove = session.ask_bool(REMOVE_PROMPT, False)
        StateStore(app.project_root).set(REMOVE_PACKAGES_KEY, remove)

        generator.generate(app.project_root, tasks, target_confirmed=True)
    except GenerationAborted as exc:
        _aborted(exc)
    except GenerationError as exc:
        _fail("GrumPHP configuration file generation failed.", exc.__cause__ or exc)
    except (WorkingDirectoryError, SettingsError, NoInputError, OSError) as exc:
        _fail("Could not install packages and generate configuration.", exc)

    console.print("[green]GrumPHP configuration generated and packages installed successfully.[/green]")


@cli.command("generate-no-install")
def generate_no_install(
    ctx: typer.Context,
    defaults: bool = typer.Option(False, "--defaults", help=_DEFAULTS_HELP),
    overwrite: bool = typer.Option(False, "--overwrite", help=_OVERWRITE_HELP),
) -> None:
    """Generate GrumPHP configuration without installing packages."""
    app = _app(ctx)
    session = build_session(defaults)
    try:
        tasks = select_tasks(session)
        _generator(app, session, overwrite).generate(app.project_root, tasks)
    except GenerationAborted as exc:
        _aborted(exc)
    except GenerationError as exc:
        _fail("GrumPHP configuration file generation failed.", exc.__cause__ or exc)
    except NoInputError as exc:
        _fail("Could not generate configuration.", exc)

    console.print("[green]GrumPHP configuration generated successfully.[/green]")


@cli.command("check")
def check(
    ctx: typer.Context,
    tasks: str = typer.Option(
        "",
        "--tasks",
        help="Comma-separated list of specific tasks to run, e.g. phpcs,phplint.",
    ),
) -> None:
    """Run GrumPHP checks and save the results to a public file."""
    app = _app(ctx)
    console.print("[cyan]Running GrumPHP checks...[/cyan]")
    settings = SettingsStore(app.project_root)
    try:
        result = run_check(
            app.project_root,
            tasks,
            docroot=app.docroot,
            base_url=settings.base_url(),
            timeout=settings.process_timeout(),
        )
    except ToolNotFoundError as exc:
        _fail("GrumPHP executable not found.", exc)
    except (SettingsError, OSError) as exc:
        _fail("An error occurred while running GrumPHP checks.", exc)

    if result.success:
        ui.success(f"GrumPHP checks passed. Results saved to: {result.url}")
        return
    ui.error(f"GrumPHP checks failed. Results saved to: {result.url}")
    raise typer.Exit(EXIT_FAILURE)


@cli.command("remove-packages")
def remove_packages(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Remove even if the stored preference says no."),
) -> None:
    """Remove the Composer packages installed by generate-install."""
    app = _app(ctx)
    settings = SettingsStore(app.project_root)
    try:
        allowed = force or bool(StateStore(app.project_root).get(REMOVE_PACKAGES_KEY, False))
        if not allowed:
            console.print(
                "[yellow]Package removal was not requested during setup. "
                "Use --force to remove them anyway.[/yellow]"
            )
            return

        packages = settings.selected_packages()
        if not packages:
            console.print("[dim]No packages recorded; nothing to remove.[/dim]")
            return
        PackageManager(app.project_root, settings).remove_packages(packages)
    except (WorkingDirectoryError, SettingsError, OSError) as exc:
        _fail("Could not remove packages.", exc)


cli.command("ccgi", hidden=True)(generate_install)
cli.command("ccgni", hidden=True)(generate_no_install)
cli.command("clc-check", hidden=True)(check)
