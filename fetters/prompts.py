"""Interactive prompts on stdin.

Every helper returns None when the user skips: empty input where a value is
required, EOF, or Ctrl-C. Callers treat None as "stop, change nothing".
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import TypeVar

from .db.errors import PromptError
from .display import bold

T = TypeVar("T")


def _read(prompt: str) -> str | None:
    try:
        return input(f"  {prompt} ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return None
    except OSError as exc:
        raise PromptError(exc) from exc


def ask_text(prompt: str, default: str = "") -> str | None:
    """Required free text; the default (if any) is used on empty input."""
    hint = f" [{default}]" if default else ""
    val = _read(f"{prompt}{hint}")
    if val is None:
        return None
    return val or default or None


def ask_optional(prompt: str, current: str | None = None) -> str | None:
    """Optional free text. Empty input returns "" (no value), a skip None.

    When *current* is given it is shown, and empty input clears it.
    """
    hint = f" (currently: {current}; leave empty to clear)" if current else ""
    return _read(f"[OPTIONAL] {prompt}{hint}")


def ask_select(
    prompt: str,
    options: Sequence[T],
    default: int | None = None,
    fmt: Callable[[T], str] = str,
) -> T | None:
    """Numbered single choice. *default* is a zero-based index."""
    if not options:
        return None
    print(f"\n{bold(prompt)}")
    for i, option in enumerate(options, start=1):
        print(f"  {i:>3}. {fmt(option)}")
    hint = f" [{default + 1}]" if default is not None else ""
    while True:
        val = _read(f"Choice [1-{len(options)}]{hint}:")
        if val is None:
            return None
        if not val:
            return options[default] if default is not None else None
        if val.isdigit() and 1 <= int(val) <= len(options):
            return options[int(val) - 1]
        print(f"  Please enter a number between 1 and {len(options)}.")


def ask_multi_select(prompt: str, options: Sequence[T]) -> list[T] | None:
    """Comma-separated numbered choices, e.g. ``1,3``."""
    if not options:
        return None
    print(f"\n{bold(prompt)}")
    for i, option in enumerate(options, start=1):
        print(f"  {i:>3}. {option}")
    while True:
        val = _read(f"Choices (comma-separated, 1-{len(options)}):")
        if not val:
            return None
        picks = [p.strip() for p in val.split(",") if p.strip()]
        if all(p.isdigit() and 1 <= int(p) <= len(options) for p in picks):
            seen: list[T] = []
            for p in picks:
                option = options[int(p) - 1]
                if option not in seen:
                    seen.append(option)
            return seen
        print(f"  Please enter numbers between 1 and {len(options)}.")


def ask_date(prompt: str, fmt: str, default: date | None = None) -> date | None:
    """Date typed in *fmt* (e.g. ``%Y/%m/%d``); empty input takes *default*."""
    default = default or date.today()
    shown = default.strftime(fmt)
    while True:
        val = _read(f"{prompt} [{shown}]")
        if val is None:
            return None
        if not val:
            return default
        try:
            return datetime.strptime(val, fmt).date()
        except ValueError:
            print(f"  Dates look like {shown}.")


def ask_confirm(prompt: str, default: bool = True) -> bool | None:
    hint = "Y/n" if default else "y/N"
    val = _read(f"{prompt} ({hint})")
    if val is None:
        return None
    if not val:
        return default
    return val.lower() in ("y", "yes")
