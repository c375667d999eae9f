"""Text formatting for stamped values."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Literal

MonthStyle = Literal["genitive", "numeric"]

# Month names as printed after a day number: "15 октября".
MONTH_NAMES_GENITIVE = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)


def parse_iso_date(value: date | str | None) -> date | None:
    """Parse ``YYYY-MM-DD`` (time suffix tolerated); return ``None`` when unusable."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def split_date(value: date | None, month_style: MonthStyle) -> tuple[str, str, str]:
    """Split a date into day, month and two-digit year strings."""

    if value is None:
        return "", "", ""
    if month_style == "genitive":
        month = MONTH_NAMES_GENITIVE[value.month - 1]
    else:
        month = f"{value.month:02d}"
    return f"{value.day:02d}", month, f"{value.year % 100:02d}"


def format_short_date(value: date | None) -> str:
    """Format as ``dd.mm.yy``; empty for a missing date."""

    if value is None:
        return ""
    return f"{value.day:02d}.{value.month:02d}.{value.year % 100:02d}"


def abbreviate_full_name(full_name: str) -> str:
    """Shorten "Last First Middle" to "Last F.M."."""

    tokens = full_name.split()
    if len(tokens) < 2:
        return full_name
    initials = "".join(f"{token[0]}." for token in tokens[1:3])
    return f"{tokens[0]} {initials}"


def date_span(
    starts: Iterable[date | str | None], ends: Iterable[date | str | None]
) -> tuple[date | None, date | None]:
    """Return the earliest start and the latest end, ignoring unusable dates."""

    parsed_starts = [item for item in (parse_iso_date(value) for value in starts) if item]
    parsed_ends = [item for item in (parse_iso_date(value) for value in ends) if item]
    earliest = min(parsed_starts) if parsed_starts else None
    latest = max(parsed_ends) if parsed_ends else None
    return earliest, latest
