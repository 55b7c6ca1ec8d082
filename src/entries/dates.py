"""Date labels for entry pages and the archive sidebar."""

from __future__ import annotations

from datetime import date


def _parse(value: str) -> date:
    return date.fromisoformat(value)


def format_date(value: str) -> str:
    """``2024-01-05`` → ``January 5, 2024``."""
    d = _parse(value)
    return f"{d:%B} {d.day}, {d.year}"


def format_date_short(value: str) -> str:
    """``2024-01-05`` → ``Jan 5``."""
    d = _parse(value)
    return f"{d:%b} {d.day}"


def month_year(value: str) -> str:
    """``2024-01-05`` → ``January 2024``."""
    d = _parse(value)
    return f"{d:%B} {d.year}"


def group_by_month(dates: list[str]) -> list[tuple[str, list[str]]]:
    """Group dates under their month label, keeping the input order.

    Args:
        dates: ISO dates, typically newest first.

    Returns:
        ``(month label, dates)`` pairs in order of first appearance.
    """
    grouped: dict[str, list[str]] = {}
    for value in dates:
        grouped.setdefault(month_year(value), []).append(value)
    return list(grouped.items())
