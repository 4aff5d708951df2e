"""Command runners for external binaries (composer, grumphp)."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def combined_output(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


class ExecError(RuntimeError):
    """Raised when a command returns non-zero (or times out) in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        if result.timed_out:
            detail = "timed out"
        else:
            detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_command(
    argv: list[str],
    *,
    cwd: Path,
    timeout: float | None = DEFAULT_TIMEOUT,
    check: bool = True,
) -> ExecResult:
    """Run command and return structured result.

    A timeout is reported as a failed result (returncode -1, ``timed_out``)
    rather than raised, so callers decide whether it is fatal.
    """
    logger.debug("exec: %s (cwd=%s, timeout=%s)", " ".join(argv), cwd, timeout)
    try:
        completed = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        result = ExecResult(
            argv=tuple(argv),
            cwd=cwd.resolve(),
            returncode=-1,
            stdout=_decode(exc.stdout),
            stderr=_decode(exc.stderr),
            timed_out=True,
        )
    else:
        result = ExecResult(
            argv=tuple(argv),
            cwd=cwd.resolve(),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
    if check and not result.ok:
        raise ExecError(result)
    return result


def run_composer(
    args: list[str],
    *,
    project_root: Path,
    dev: bool = False,
    timeout: float | None = DEFAULT_TIMEOUT,
    check: bool = True,
) -> ExecResult:
    """Run composer non-interactively against the project root."""
    argv = ["composer", *args, f"--working-dir={project_root}", "--no-interaction"]
    if dev:
        argv.append("--dev")
    return run_command(argv, cwd=project_root, timeout=timeout, check=check)


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
