"""Expand a saved group name or a typed species list into resource rows."""

from __future__ import annotations

import re
from collections.abc import Sequence

from huntprint.forms.models import ResourceRow
from huntprint.groups.models import ResourceSelection, SavedGroup
from huntprint.layout.constants import (
    DEFAULT_SEASON_DATE_FROM,
    DEFAULT_SEASON_DATE_TO,
    MAX_RESOURCES,
    UNLIMITED_LIMIT,
)
from huntprint.layout.models import BlankVariant
from huntprint.utils.errors import EmptyResourceInputError, TruncationConfirmationRequired

_ANIMAL_DELIMITERS = re.compile(r"[,;\n]")


def split_animals(text: str) -> list[str]:
    """Split a comma, semicolon or newline separated species list."""

    return [token.strip() for token in _ANIMAL_DELIMITERS.split(text) if token.strip()]


def find_group(name: str, groups: Sequence[SavedGroup]) -> SavedGroup | None:
    """Return the first group whose name matches case-insensitively."""

    wanted = name.strip().lower()
    for group in groups:
        if group.name.strip().lower() == wanted:
            return group
    return None


def group_to_rows(group: SavedGroup) -> tuple[ResourceRow, ...]:
    """Build one row per animal in group order, capped at ``MAX_RESOURCES``."""

    return tuple(
        ResourceRow(
            resource=animal,
            date_from=group.date_from,
            date_to=group.date_to,
            daily_limit=group.daily_limit or UNLIMITED_LIMIT,
            season_limit=group.season_limit or UNLIMITED_LIMIT,
        )
        for animal in group.animals[:MAX_RESOURCES]
    )


def expand(
    text: str,
    groups: Sequence[SavedGroup],
    current: ResourceSelection | None = None,
    *,
    confirm_truncation: bool = False,
    season: tuple[str, str] = (DEFAULT_SEASON_DATE_FROM, DEFAULT_SEASON_DATE_TO),
) -> ResourceSelection:
    """Resolve user input into a complete replacement row selection.

    A saved group name wins over list parsing and brings its own blank type.
    Typed lists reset the blank type to yellow and use the ``season`` window.
    Nothing is mutated: the caller swaps in the returned selection or, on an
    exception, keeps what it had.
    """

    current = current if current is not None else ResourceSelection()
    stripped = text.strip()
    if not stripped:
        return current

    group = find_group(stripped, groups)
    if group is not None:
        return ResourceSelection(rows=group_to_rows(group), variant=group.blank_type)

    animals = split_animals(stripped)
    if not animals:
        raise EmptyResourceInputError(
            "Nothing recognized in the input. Enter species separated by commas "
            "or pick a saved group.",
            text=text,
        )
    if len(animals) > MAX_RESOURCES and not confirm_truncation:
        raise TruncationConfirmationRequired(
            f"Input lists {len(animals)} species, at most {MAX_RESOURCES} fit on a blank. "
            f"Truncate to {MAX_RESOURCES}?",
            total=len(animals),
            limit=MAX_RESOURCES,
        )

    date_from, date_to = season
    rows = tuple(
        ResourceRow(
            resource=animal,
            date_from=date_from,
            date_to=date_to,
            daily_limit=UNLIMITED_LIMIT,
            season_limit=UNLIMITED_LIMIT,
        )
        for animal in animals[:MAX_RESOURCES]
    )
    return ResourceSelection(rows=rows, variant=BlankVariant.YELLOW)


def initial_variant(groups: Sequence[SavedGroup]) -> BlankVariant:
    """Blank type preselected when the print form opens.

    Takes the first saved group in listing order; there is no tie-break
    beyond that.
    """

    if not groups:
        return BlankVariant.YELLOW
    return groups[0].blank_type
