"""Coordinate registry resolving a blank variant to its field table."""

from __future__ import annotations

from dataclasses import replace

from huntprint.layout.constants import MAX_RESOURCES
from huntprint.layout.models import (
    BlankVariant,
    FieldCoordinateSet,
    RangeResources,
    RowListResources,
)
from huntprint.layout.tables import LAYOUTS


def resolve(variant: BlankVariant | str | None) -> FieldCoordinateSet:
    """Return the full coordinate table for a variant.

    Unknown values resolve to the yellow table so a render always has geometry.
    """

    return LAYOUTS[BlankVariant.parse(variant)]


def coordinates_for(variant: BlankVariant | str | None, resource_count: int) -> FieldCoordinateSet:
    """Return the variant table with row coordinates for ``resource_count`` rows."""

    layout = resolve(variant)
    count = max(0, min(resource_count, MAX_RESOURCES))
    resources = layout.resources
    if resources is None or isinstance(resources, RangeResources):
        return layout
    if isinstance(resources, RowListResources):
        return replace(layout, resources=RowListResources(rows=resources.rows[:count]))
    raise TypeError(f"Unsupported resource layout: {resources!r}")


def list_supported_variants() -> list[str]:
    """Return supported variant names in declaration order."""

    return [variant.value for variant in BlankVariant]


def _assert_tables_complete() -> None:
    """Fail fast when a variant has no table or a permit table is short of rows."""

    missing = [variant.value for variant in BlankVariant if variant not in LAYOUTS]
    if missing:
        raise RuntimeError(f"Coordinate tables missing for variants: {missing}")
    for variant, layout in LAYOUTS.items():
        if layout.variant is not variant:
            raise RuntimeError(
                f"Coordinate table registered under {variant.value} is {layout.variant.value}"
            )
        resources = layout.resources
        if isinstance(resources, RowListResources) and len(resources.rows) < MAX_RESOURCES:
            raise RuntimeError(
                f"{variant.value} table defines {len(resources.rows)} resource rows, "
                f"expected {MAX_RESOURCES}"
            )


_assert_tables_complete()
