"""Question-asking capability used by the configuration builders.

Builders depend on the ``PromptSession`` protocol only, so they can be driven
by the interactive console session below or by a scripted session in tests.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from clean_code import ui

Options = Mapping[str, str] | Sequence[str]


class NoInputError(RuntimeError):
    """Raised when a question is asked but no interactive input is available."""


class PromptSession(Protocol):
    """Typed questions with defaults."""

    def ask_text(self, prompt: str, default: str | None = None) -> str: ...

    def ask_int(self, prompt: str, default: int) -> int: ...

    def ask_bool(self, prompt: str, default: bool) -> bool: ...

    def ask_list(self, prompt: str, default: Sequence[str]) -> list[str]: ...

    def ask_choice(
        self,
        prompt: str,
        options: Options,
        *,
        default: str | int | None = None,
        allow_multiple: bool = False,
    ) -> str | list[str]: ...

    def note(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


def option_pairs(options: Options) -> list[tuple[str, str]]:
    """Normalize options to ``(key, label)`` pairs; plain sequences use the label as key."""
    if isinstance(options, Mapping):
        return [(str(key), str(label)) for key, label in options.items()]
    return [(str(label), str(label)) for label in options]


def split_list(value: str | None) -> list[str]:
    """Split a comma separated answer into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_choices(
    raw: str,
    options: Options,
    *,
    allow_multiple: bool,
) -> list[str] | None:
    """Map an answer (keys, labels or indexes) to option keys.

    Returns None when any entry does not match an option, or when several
    entries are given for a single choice.
    """
    pairs = option_pairs(options)
    entries = split_list(raw) if allow_multiple else [raw.strip()]
    if not entries or (not allow_multiple and len(entries) != 1):
        return None

    picked: list[str] = []
    for entry in entries:
        key = _match_option(entry, pairs)
        if key is None:
            return None
        if key not in picked:
            picked.append(key)
    return picked


def _match_option(entry: str, pairs: list[tuple[str, str]]) -> str | None:
    for key, label in pairs:
        if entry in (key, label):
            return key
    if entry.isdigit():
        index = int(entry)
        if 0 <= index < len(pairs):
            return pairs[index][0]
    return None


class ConsolePromptSession:
    """Prompt session backed by ``rich.prompt`` on the shared console."""

    def __init__(self, console: Console | None = None, *, interactive: bool | None = None):
        self.console = console or ui.console
        if interactive is None:
            interactive = bool(sys.stdin and sys.stdin.isatty())
        self.interactive = interactive

    def _require_input(self, prompt: str) -> None:
        if not self.interactive:
            raise NoInputError(f"No input available to answer: {prompt}")

    def ask_text(self, prompt: str, default: str | None = None) -> str:
        self._require_input(prompt)
        answer = Prompt.ask(
            f"[cyan]{prompt}[/cyan]",
            console=self.console,
            default=default if default is not None else "",
            show_default=bool(default),
        )
        return answer.strip()

    def ask_int(self, prompt: str, default: int) -> int:
        self._require_input(prompt)
        return IntPrompt.ask(f"[cyan]{prompt}[/cyan]", console=self.console, default=default)

    def ask_bool(self, prompt: str, default: bool) -> bool:
        self._require_input(prompt)
        return Confirm.ask(f"[cyan]{prompt}[/cyan]", console=self.console, default=default)

    def ask_list(self, prompt: str, default: Sequence[str]) -> list[str]:
        return split_list(self.ask_text(f"{prompt} (comma separated)", ",".join(default)))

    def ask_choice(
        self,
        prompt: str,
        options: Options,
        *,
        default: str | int | None = None,
        allow_multiple: bool = False,
    ) -> str | list[str]:
        self._require_input(prompt)
        pairs = option_pairs(options)
        self.console.print(f"[cyan]{prompt}[/cyan]")
        for index, (key, label) in enumerate(pairs):
            suffix = f" [dim]({key})[/dim]" if key != label else ""
            self.console.print(f"  [[yellow]{index}[/yellow]] {label}{suffix}")

        default_text = "" if default is None else str(default)
        while True:
            raw = Prompt.ask(
                "[cyan]>[/cyan]",
                console=self.console,
                default=default_text,
                show_default=bool(default_text),
            )
            picked = resolve_choices(raw, options, allow_multiple=allow_multiple)
            if picked is not None:
                return picked if allow_multiple else picked[0]
            self.console.print(f'[prompt.invalid]Value "{raw}" is invalid')

    def note(self, message: str) -> None:
        ui.note(message)

    def warn(self, message: str) -> None:
        ui.warning(message)

    def error(self, message: str) -> None:
        ui.error(message)


class DefaultsPromptSession:
    """Answer every question with its default, for unattended runs."""

    def ask_text(self, prompt: str, default: str | None = None) -> str:
        return default or ""

    def ask_int(self, prompt: str, default: int) -> int:
        return default

    def ask_bool(self, prompt: str, default: bool) -> bool:
        return default

    def ask_list(self, prompt: str, default: Sequence[str]) -> list[str]:
        return list(default)

    def ask_choice(
        self,
        prompt: str,
        options: Options,
        *,
        default: str | int | None = None,
        allow_multiple: bool = False,
    ) -> str | list[str]:
        if default is None:
            raise NoInputError(f"No default available to answer: {prompt}")
        picked = resolve_choices(str(default), options, allow_multiple=allow_multiple)
        if picked is None:
            raise NoInputError(f"Default {default!r} is not an option for: {prompt}")
        return picked if allow_multiple else picked[0]

    def note(self, message: str) -> None:
        ui.note(message)

    def warn(self, message: str) -> None:
        ui.warning(message)

    def error(self, message: str) -> None:
        ui.error(message)
