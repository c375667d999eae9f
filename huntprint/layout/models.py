"""Data models for blank variants and field coordinate tables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

FULL_NAME = "full_name"
TICKET_SERIES = "ticket_series"
TICKET_NUMBER = "ticket_number"
TICKET_ISSUE_DATE = "ticket_issue_date"
ISSUE_DATE = "issue_date"
ISSUED_BY = "issued_by"
JOB_TITLE = "job_title"
ORGANIZATION_NAME = "organization_name"
HUNTING_PLACE = "hunting_place"
HUNT_TYPE = "hunt_type"
BACK_ISSUE_DATE = "back_issue_date"
VOUCHER_NUMBER = "voucher_number"
VOUCHER_PERMISSION_NUMBER = "voucher_permission_number"

REQUIRED_PERMIT_FIELDS: tuple[str, ...] = (FULL_NAME, TICKET_SERIES, TICKET_NUMBER)


class BlankVariant(str, Enum):
    """Physical paper stock a document is printed on."""

    YELLOW = "Yellow"
    PINK = "Pink"
    BLUE = "Blue"
    VOUCHER = "Voucher"

    @classmethod
    def parse(cls, value: object) -> BlankVariant:
        """Parse a variant name, falling back to ``YELLOW`` for unknown input."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return cls.YELLOW

    @property
    def is_voucher(self) -> bool:
        return self is BlankVariant.VOUCHER


@dataclass(frozen=True)
class Point:
    """Single anchor for one piece of text."""

    x: float
    y: float


@dataclass(frozen=True)
class DatePoint:
    """Day, month and year anchors sharing one vertical line."""

    x: float
    y_day: float | None = None
    y_month: float | None = None
    y_year: float | None = None


Placement = Union[Point, DatePoint]


@dataclass(frozen=True)
class ResourceRowCoords:
    """Coordinates of one resource row on permit stock."""

    resource: Point | None = None
    date_from: Point | None = None
    date_to: Point | None = None
    daily_limit: Point | None = None
    season_limit: Point | None = None


@dataclass(frozen=True)
class RowListResources:
    """Per-row resource placement used by permit stock."""

    rows: tuple[ResourceRowCoords, ...] = ()


@dataclass(frozen=True)
class RangeResources:
    """Earliest-start / latest-end placement used by vouchers."""

    min_date_from: Point | None = None
    max_date_to: Point | None = None
    special_mark: Point | None = None


ResourceLayout = Union[RowListResources, RangeResources]


@dataclass(frozen=True)
class FieldCoordinateSet:
    """Where every field of one blank variant is stamped."""

    variant: BlankVariant
    fields: Mapping[str, Placement] = field(default_factory=lambda: MappingProxyType({}))
    resources: ResourceLayout | None = None

    def get(self, name: str) -> Placement | None:
        return self.fields.get(name)

    def missing_required(self) -> list[str]:
        """Return required field names absent from a permit table."""

        if self.variant.is_voucher:
            return []
        return [name for name in REQUIRED_PERMIT_FIELDS if name not in self.fields]


def layout_to_payload(coordinates: FieldCoordinateSet) -> dict[str, Any]:
    """Serialize a coordinate set into a JSON-compatible mapping."""

    fields = {
        name: _placement_payload(coordinates.fields[name]) for name in sorted(coordinates.fields)
    }
    return {
        "variant": coordinates.variant.value,
        "fields": fields,
        "resources": _resources_payload(coordinates.resources),
    }


def _placement_payload(placement: Placement | None) -> dict[str, Any] | None:
    if placement is None:
        return None
    if isinstance(placement, Point):
        return {"kind": "point", "x": placement.x, "y": placement.y}
    if isinstance(placement, DatePoint):
        return {
            "kind": "date",
            "x": placement.x,
            "y_day": placement.y_day,
            "y_month": placement.y_month,
            "y_year": placement.y_year,
        }
    raise TypeError(f"Unsupported placement: {placement!r}")


def _resources_payload(resources: ResourceLayout | None) -> dict[str, Any] | None:
    if resources is None:
        return None
    if isinstance(resources, RowListResources):
        return {
            "kind": "rows",
            "rows": [
                {
                    "resource": _placement_payload(row.resource),
                    "date_from": _placement_payload(row.date_from),
                    "date_to": _placement_payload(row.date_to),
                    "daily_limit": _placement_payload(row.daily_limit),
                    "season_limit": _placement_payload(row.season_limit),
                }
                for row in resources.rows
            ],
        }
    if isinstance(resources, RangeResources):
        return {
            "kind": "range",
            "min_date_from": _placement_payload(resources.min_date_from),
            "max_date_to": _placement_payload(resources.max_date_to),
            "special_mark": _placement_payload(resources.special_mark),
        }
    raise TypeError(f"Unsupported resource layout: {resources!r}")
