"""Run GrumPHP and keep its output in a public result file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from clean_code.exec import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)

GRUMPHP_CANDIDATES = (
    "vendor/bin/grumphp",
    "vendor/phpro/grumphp/bin/grumphp",
)
PUBLIC_FILES_DIR = "sites/default/files"
RESULTS_DIRNAME = "grumphp_results"
RESULT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class ToolNotFoundError(FileNotFoundError):
    """Raised when the GrumPHP executable is not in any expected location."""

    def __init__(self, tried: list[Path]):
        listed = ", ".join(str(path) for path in tried)
        super().__init__(f"GrumPHP executable not found. Tried: {listed}")
        self.tried = tried


@dataclass(frozen=True)
class CheckResult:
    success: bool
    file_path: Path
    url: str
    returncode: int


def find_grumphp(project_root: Path) -> Path:
    """Return the first GrumPHP binary present under the project's vendor dir."""
    tried = [project_root / candidate for candidate in GRUMPHP_CANDIDATES]
    for path in tried:
        if path.exists():
            return path
    raise ToolNotFoundError(tried)


def parse_tasks(tasks: str | None) -> list[str]:
    """Split ``--tasks`` into trimmed, non-empty names."""
    if not tasks:
        return []
    return [name.strip() for name in tasks.split(",") if name.strip()]


def build_check_command(binary: Path, tasks: str | None) -> list[str]:
    command = [str(binary), "run", "--no-interaction"]
    command.extend(f"--tasks={name}" for name in parse_tasks(tasks))
    return command


def results_dir_for(project_root: Path, docroot: str) -> Path:
    return project_root / docroot / PUBLIC_FILES_DIR / RESULTS_DIRNAME


def result_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime(RESULT_TIMESTAMP_FORMAT)
    return f"grumphp_result_{stamp}.txt"


def public_url(file_path: Path, base_url: str | None) -> str:
    """URL the web server exposes the result file at; ``file://`` without a base URL."""
    if base_url:
        return f"{base_url.rstrip('/')}/{PUBLIC_FILES_DIR}/{RESULTS_DIRNAME}/{file_path.name}"
    return file_path.resolve().as_uri()


def save_result(content: str, results_dir: Path, *, now: datetime | None = None) -> Path:
    try:
        results_dir.mkdir(parents=True, exist_ok=True)
        path = results_dir / result_filename(now)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Failed to save GrumPHP check results to file: {exc}") from exc
    return path


def run_check(
    project_root: Path,
    tasks: str | None = None,
    *,
    docroot: str = "web",
    base_url: str | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> CheckResult:
    """Run ``grumphp run`` in the project root and save combined output."""
    binary = find_grumphp(project_root)
    command = build_check_command(binary, tasks)
    logger.info("Running GrumPHP: %s", " ".join(command))

    result = run_command(command, cwd=project_root, timeout=timeout, check=False)
    if result.timed_out:
        logger.warning("GrumPHP run timed out after %s seconds", timeout)

    path = save_result(result.combined_output, results_dir_for(project_root, docroot))
    url = public_url(path, base_url)
    logger.info("GrumPHP exited with %s; results saved to %s", result.returncode, path)
    return CheckResult(success=result.ok, file_path=path, url=url, returncode=result.returncode)
