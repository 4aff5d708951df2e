"""Tests for running GrumPHP and saving its results."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from clean_code.check import (
    ToolNotFoundError,
    build_check_command,
    find_grumphp,
    public_url,
    result_filename,
    run_check,
)
from clean_code.exec import ExecResult


def _install_grumphp(root: Path, rel: str = "vendor/bin/grumphp") -> Path:
    binary = root / rel
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    return binary


class _RunStub:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "", timed_out: bool = False):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.timed_out = timed_out
        self.calls: list[dict] = []

    def __call__(self, argv, *, cwd: Path, timeout=None, check: bool = True) -> ExecResult:
        self.calls.append({"argv": argv, "cwd": cwd, "timeout": timeout, "check": check})
        return ExecResult(
            argv=tuple(argv),
            cwd=cwd,
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
            timed_out=self.timed_out,
        )


def test_build_command_trims_task_names(tmp_path: Path) -> None:
    command = build_check_command(tmp_path / "grumphp", "phpcs, phplint")
    assert command[1:] == ["run", "--no-interaction", "--tasks=phpcs", "--tasks=phplint"]


def test_build_command_without_tasks_runs_everything(tmp_path: Path) -> None:
    assert build_check_command(tmp_path / "grumphp", " , ") == [str(tmp_path / "grumphp"), "run", "--no-interaction"]


def test_find_grumphp_falls_back_to_package_bin(tmp_path: Path) -> None:
    binary = _install_grumphp(tmp_path, "vendor/phpro/grumphp/bin/grumphp")
    assert find_grumphp(tmp_path) == binary


def test_find_grumphp_lists_tried_paths(tmp_path: Path) -> None:
    with pytest.raises(ToolNotFoundError) as excinfo:
        find_grumphp(tmp_path)
    assert excinfo.value.tried == [tmp_path / "vendor/bin/grumphp", tmp_path / "vendor/phpro/grumphp/bin/grumphp"]
    assert "vendor/bin/grumphp" in str(excinfo.value)


def test_result_filename_uses_timestamp() -> None:
    assert result_filename(datetime(2024, 3, 5, 14, 7, 9)) == "grumphp_result_2024-03-05_14-07-09.txt"


def test_public_url_with_and_without_base(tmp_path: Path) -> None:
    path = tmp_path / "grumphp_result_x.txt"
    assert public_url(path, "https://example.com/") == (
        "https://example.com/sites/default/files/grumphp_results/grumphp_result_x.txt"
    )
    assert public_url(path, None).startswith("file://")


def test_run_check_saves_combined_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_grumphp(tmp_path)
    stub = _RunStub(returncode=0, stdout="All good", stderr="")
    monkeypatch.setattr("clean_code.check.run_command", stub)

    result = run_check(tmp_path, "phpcs, phplint", base_url="https://site.test", timeout=60)

    assert result.success
    assert stub.calls[0]["argv"][-2:] == ["--tasks=phpcs", "--tasks=phplint"]
    assert stub.calls[0]["cwd"] == tmp_path
    assert stub.calls[0]["timeout"] == 60
    assert result.file_path.parent == tmp_path / "web" / "sites" / "default" / "files" / "grumphp_results"
    assert result.file_path.read_text(encoding="utf-8") == "All good\n"
    assert result.url.startswith("https://site.test/sites/default/files/grumphp_results/grumphp_result_")


def test_run_check_failure_still_saves_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_grumphp(tmp_path)
    monkeypatch.setattr("clean_code.check.run_command", _RunStub(returncode=1, stdout="phpcs", stderr="3 errors"))

    result = run_check(tmp_path, docroot="docroot")

    assert not result.success
    assert result.returncode == 1
    assert "3 errors" in result.file_path.read_text(encoding="utf-8")
    assert "docroot" in result.file_path.parts


def test_run_check_timeout_is_a_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_grumphp(tmp_path)
    monkeypatch.setattr("clean_code.check.run_command", _RunStub(returncode=-1, timed_out=True))
    assert not run_check(tmp_path).success
