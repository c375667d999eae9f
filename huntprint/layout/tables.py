"""Literal coordinate tables for every blank variant.

Each table is measured against its own paper stock. Tables are deliberately
written out in full: stocks differ by a few points per field and row, so no
table is derived from another.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from huntprint.layout.models import (
    BACK_ISSUE_DATE,
    FULL_NAME,
    HUNT_TYPE,
    HUNTING_PLACE,
    ISSUE_DATE,
    ISSUED_BY,
    JOB_TITLE,
    ORGANIZATION_NAME,
    TICKET_ISSUE_DATE,
    TICKET_NUMBER,
    TICKET_SERIES,
    VOUCHER_NUMBER,
    VOUCHER_PERMISSION_NUMBER,
    BlankVariant,
    DatePoint,
    FieldCoordinateSet,
    Point,
    RangeResources,
    ResourceRowCoords,
    RowListResources,
)

YELLOW_LAYOUT = FieldCoordinateSet(
    variant=BlankVariant.YELLOW,
    fields=MappingProxyType(
        {
            FULL_NAME: Point(455, 95),
            TICKET_SERIES: Point(498, 115),
            TICKET_NUMBER: Point(498, 165),
            TICKET_ISSUE_DATE: DatePoint(521, y_day=120, y_month=150, y_year=255),
            ISSUE_DATE: DatePoint(120, y_day=660, y_month=680, y_year=700),
            ISSUED_BY: Point(31, 245),
            ORGANIZATION_NAME: Point(45, 20),
            HUNTING_PLACE: Point(346, 70),
            BACK_ISSUE_DATE: DatePoint(60, y_day=262, y_month=285, y_year=393),
            HUNT_TYPE: Point(540, 55),
        }
    ),
    resources=RowListResources(
        rows=(
            ResourceRowCoords(
                resource=Point(171, 40),
                date_from=Point(173, 143),
                date_to=Point(173, 190),
                daily_limit=Point(173, 250),
                season_limit=Point(173, 295),
            ),
            ResourceRowCoords(
                resource=Point(188, 40),
                date_from=Point(190, 143),
                date_to=Point(190, 190),
                daily_limit=Point(190, 250),
                season_limit=Point(190, 295),
            ),
            ResourceRowCoords(
                resource=Point(205, 40),
                date_from=Point(207, 143),
                date_to=Point(207, 190),
                daily_limit=Point(207, 250),
                season_limit=Point(207, 295),
            ),
            ResourceRowCoords(
                resource=Point(222, 40),
                date_from=Point(224, 143),
                date_to=Point(224, 190),
                daily_limit=Point(224, 250),
                season_limit=Point(224, 295),
            ),
            ResourceRowCoords(
                resource=Point(239, 40),
                date_from=Point(241, 143),
                date_to=Point(241, 190),
                daily_limit=Point(241, 250),
                season_limit=Point(241, 295),
            ),
            ResourceRowCoords(
                resource=Point(256, 40),
                date_from=Point(258, 143),
                date_to=Point(258, 190),
                daily_limit=Point(258, 250),
                season_limit=Point(258, 295),
            ),
            ResourceRowCoords(
                resource=Point(273, 40),
                date_from=Point(275, 143),
                date_to=Point(275, 190),
                daily_limit=Point(275, 250),
                season_limit=Point(275, 295),
            ),
            ResourceRowCoords(
                resource=Point(290, 40),
                date_from=Point(292, 143),
                date_to=Point(292, 190),
                daily_limit=Point(292, 250),
                season_limit=Point(292, 295),
            ),
            ResourceRowCoords(
                resource=Point(307, 40),
                date_from=Point(309, 143),
                date_to=Point(309, 190),
                daily_limit=Point(309, 250),
                season_limit=Point(309, 295),
            ),
            ResourceRowCoords(
                resource=Point(324, 40),
                date_from=Point(326, 143),
                date_to=Point(326, 190),
                daily_limit=Point(326, 250),
                season_limit=Point(326, 295),
            ),
        )
    ),
)

PINK_LAYOUT = FieldCoordinateSet(
    variant=BlankVariant.PINK,
    fields=MappingProxyType(
        {
            FULL_NAME: Point(457, 95),
            TICKET_SERIES: Point(501, 115),
            TICKET_NUMBER: Point(501, 165),
            TICKET_ISSUE_DATE: DatePoint(523, y_day=120, y_month=150, y_year=255),
            ISSUE_DATE: DatePoint(120, y_day=660, y_month=680, y_year=700),
            ISSUED_BY: Point(120, 245),
            ORGANIZATION_NAME: Point(45, 20),
            HUNTING_PLACE: Point(348, 70),
            BACK_ISSUE_DATE: DatePoint(146, y_day=262, y_month=285, y_year=393),
            HUNT_TYPE: Point(542, 55),
        }
    ),
    resources=RowListResources(
        rows=(
            ResourceRowCoords(
                resource=Point(187, 40),
                date_from=Point(189, 143),
                date_to=Point(189, 190),
                daily_limit=Point(189, 250),
                season_limit=Point(189, 295),
            ),
            ResourceRowCoords(
                resource=Point(203, 40),
                date_from=Point(205, 143),
                date_to=Point(205, 190),
                daily_limit=Point(205, 250),
                season_limit=Point(205, 295),
            ),
            ResourceRowCoords(
                resource=Point(219, 40),
                date_from=Point(221, 143),
                date_to=Point(221, 190),
                daily_limit=Point(221, 250),
                season_limit=Point(221, 295),
            ),
            ResourceRowCoords(
                resource=Point(235, 40),
                date_from=Point(237, 143),
                date_to=Point(237, 190),
                daily_limit=Point(237, 250),
                season_limit=Point(237, 295),
            ),
            ResourceRowCoords(
                resource=Point(251, 40),
                date_from=Point(253, 143),
                date_to=Point(253, 190),
                daily_limit=Point(253, 250),
                season_limit=Point(253, 295),
            ),
            ResourceRowCoords(
                resource=Point(267, 40),
                date_from=Point(269, 143),
                date_to=Point(269, 190),
                daily_limit=Point(269, 250),
                season_limit=Point(269, 295),
            ),
            ResourceRowCoords(
                resource=Point(283, 40),
                date_from=Point(285, 143),
                date_to=Point(285, 190),
                daily_limit=Point(285, 250),
                season_limit=Point(285, 295),
            ),
            ResourceRowCoords(
                resource=Point(299, 40),
                date_from=Point(301, 143),
                date_to=Point(301, 190),
                daily_limit=Point(301, 250),
                season_limit=Point(301, 295),
            ),
            ResourceRowCoords(
                resource=Point(315, 40),
                date_from=Point(317, 143),
                date_to=Point(317, 190),
                daily_limit=Point(317, 250),
                season_limit=Point(317, 295),
            ),
            ResourceRowCoords(
                resource=Point(331, 40),
                date_from=Point(333, 143),
                date_to=Point(333, 190),
                daily_limit=Point(333, 250),
                season_limit=Point(333, 295),
            ),
        )
    ),
)

# Blue stock is printed from the same plates as yellow today; it keeps its own
# table so a future plate change touches only this block.
BLUE_LAYOUT = FieldCoordinateSet(
    variant=BlankVariant.BLUE,
    fields=MappingProxyType(
        {
            FULL_NAME: Point(455, 95),
            TICKET_SERIES: Point(498, 115),
            TICKET_NUMBER: Point(498, 165),
            TICKET_ISSUE_DATE: DatePoint(521, y_day=120, y_month=150, y_year=255),
            ISSUE_DATE: DatePoint(120, y_day=660, y_month=680, y_year=700),
            ISSUED_BY: Point(31, 245),
            ORGANIZATION_NAME: Point(45, 20),
            HUNTING_PLACE: Point(346, 70),
            BACK_ISSUE_DATE: DatePoint(60, y_day=262, y_month=285, y_year=393),
            HUNT_TYPE: Point(540, 55),
        }
    ),
    resources=RowListResources(
        rows=(
            ResourceRowCoords(
                resource=Point(171, 40),
                date_from=Point(173, 143),
                date_to=Point(173, 190),
                daily_limit=Point(173, 250),
                season_limit=Point(173, 295),
            ),
            ResourceRowCoords(
                resource=Point(188, 40),
                date_from=Point(190, 143),
                date_to=Point(190, 190),
                daily_limit=Point(190, 250),
                season_limit=Point(190, 295),
            ),
            ResourceRowCoords(
                resource=Point(205, 40),
                date_from=Point(207, 143),
                date_to=Point(207, 190),
                daily_limit=Point(207, 250),
                season_limit=Point(207, 295),
            ),
            ResourceRowCoords(
                resource=Point(222, 40),
                date_from=Point(224, 143),
                date_to=Point(224, 190),
                daily_limit=Point(224, 250),
                season_limit=Point(224, 295),
            ),
            ResourceRowCoords(
                resource=Point(239, 40),
                date_from=Point(241, 143),
                date_to=Point(241, 190),
                daily_limit=Point(241, 250),
                season_limit=Point(241, 295),
            ),
            ResourceRowCoords(
                resource=Point(256, 40),
                date_from=Point(258, 143),
                date_to=Point(258, 190),
                daily_limit=Point(258, 250),
                season_limit=Point(258, 295),
            ),
            ResourceRowCoords(
                resource=Point(273, 40),
                date_from=Point(275, 143),
                date_to=Point(275, 190),
                daily_limit=Point(275, 250),
                season_limit=Point(275, 295),
            ),
            ResourceRowCoords(
                resource=Point(290, 40),
                date_from=Point(292, 143),
                date_to=Point(292, 190),
                daily_limit=Point(292, 250),
                season_limit=Point(292, 295),
            ),
            ResourceRowCoords(
                resource=Point(307, 40),
                date_from=Point(309, 143),
                date_to=Point(309, 190),
                daily_limit=Point(309, 250),
                season_limit=Point(309, 295),
            ),
            ResourceRowCoords(
                resource=Point(324, 40),
                date_from=Point(326, 143),
                date_to=Point(326, 190),
                daily_limit=Point(326, 250),
                season_limit=Point(326, 295),
            ),
        )
    ),
)

# A4 landscape voucher; the right-hand copy is the left one shifted by
# VOUCHER_DUPLICATE_OFFSET_X.
VOUCHER_LAYOUT = FieldCoordinateSet(
    variant=BlankVariant.VOUCHER,
    fields=MappingProxyType(
        {
            VOUCHER_NUMBER: Point(300, 555),
            FULL_NAME: Point(90, 520),
            TICKET_SERIES: Point(90, 498),
            TICKET_NUMBER: Point(150, 498),
            TICKET_ISSUE_DATE: Point(250, 498),
            ORGANIZATION_NAME: Point(90, 476),
            HUNTING_PLACE: Point(90, 454),
            HUNT_TYPE: Point(90, 432),
            VOUCHER_PERMISSION_NUMBER: Point(250, 410),
            JOB_TITLE: Point(40, 120),
            ISSUED_BY: Point(200, 120),
            ISSUE_DATE: Point(300, 95),
        }
    ),
    resources=RangeResources(
        min_date_from=Point(110, 388),
        max_date_to=Point(230, 388),
        special_mark=Point(90, 366),
    ),
)

LAYOUTS: Mapping[BlankVariant, FieldCoordinateSet] = MappingProxyType(
    {
        BlankVariant.YELLOW: YELLOW_LAYOUT,
        BlankVariant.PINK: PINK_LAYOUT,
        BlankVariant.BLUE: BLUE_LAYOUT,
        BlankVariant.VOUCHER: VOUCHER_LAYOUT,
    }
)
