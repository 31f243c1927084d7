"""Reusable status vocabulary, monitoring states and list primitives."""

from enum import IntEnum
from typing import Any, Iterable

# vSphere ManagedEntityStatus values
STATUS_GREEN = "green"
STATUS_YELLOW = "yellow"
STATUS_RED = "red"
STATUS_GRAY = "gray"

# Keywords accepted from operators, mapped onto ManagedEntityStatus values.
_STATUS_KEYWORDS = {
    "red": STATUS_RED,
    "critical": STATUS_RED,
    "yellow": STATUS_YELLOW,
    "warning": STATUS_YELLOW,
    "green": STATUS_GREEN,
    "ok": STATUS_GREEN,
    "gray": STATUS_GRAY,
    "unknown": STATUS_GRAY,
}

STATUS_KEYWORDS = tuple(_STATUS_KEYWORDS)


class State(IntEnum):
    """Monitoring plugin service states, valued by their exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        return self.name

    @property
    def exit_code(self) -> int:
        return int(self)


def safe_list(value: Any) -> list[Any]:
    if isinstance(value, str):
        return []
    try:
        return list(value or [])
    except (TypeError, ValueError):
        return []


def split_csv(value: Any) -> list[str]:
    """
    Flatten comma-separated strings (or iterables of them) into a list of
    stripped, non-empty entries.
    """
    if value is None:
        return []
    raw = [value] if isinstance(value, str) else safe_list(value)
    out: list[str] = []
    for item in raw:
        if item is None:
            continue
        for part in str(item).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def dedupe_fold(values: Iterable[str]) -> tuple[str, ...]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        folded = v.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        out.append(v)
    return tuple(out)


def canonical_status(value: Any) -> str | None:
    """Map a status keyword or alias to its ManagedEntityStatus, or None."""
    return _STATUS_KEYWORDS.get(str(value or "").strip().lower())


def equal_fold(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def contains_fold(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def in_list(value: str, items: Iterable[str]) -> bool:
    return any(equal_fold(value, item) for item in items)
