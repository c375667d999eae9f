"""PDF renderer stamping form data onto permit and voucher stock."""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.pdfgen.canvas import Canvas

from huntprint.config.models import RenderSettings
from huntprint.forms.models import FormValues, HunterRecord
from huntprint.layout.constants import PERMIT_PAGE_SIZE
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
    Placement,
    Point,
    RangeResources,
    ResourceLayout,
    RowListResources,
)
from huntprint.render.formatting import (
    MonthStyle,
    abbreviate_full_name,
    date_span,
    format_short_date,
    parse_iso_date,
    split_date,
)
from huntprint.render.models import RenderOutput, StampLogEntry, build_stamp_report
from huntprint.render.stamper import DuplicateStamper, register_font
from huntprint.utils.errors import BackgroundTemplateError, LayoutDefectError

logger = logging.getLogger("huntprint.render")

_PERMIT_ROTATION = 90.0

# Month rendering is a property of the field role, not of the date.
_DATE_FIELD_MONTH_STYLES: Mapping[str, MonthStyle] = {
    TICKET_ISSUE_DATE: "genitive",
    ISSUE_DATE: "genitive",
    BACK_ISSUE_DATE: "numeric",
}

_PERMIT_FRONT_FIELDS = (
    FULL_NAME,
    TICKET_SERIES,
    TICKET_NUMBER,
    TICKET_ISSUE_DATE,
    ISSUE_DATE,
    ORGANIZATION_NAME,
    HUNTING_PLACE,
    HUNT_TYPE,
    JOB_TITLE,
)
_PERMIT_BACK_FIELDS = (ISSUED_BY, BACK_ISSUE_DATE)
_VOUCHER_FIELDS = (
    VOUCHER_NUMBER,
    FULL_NAME,
    TICKET_SERIES,
    TICKET_NUMBER,
    TICKET_ISSUE_DATE,
    ORGANIZATION_NAME,
    HUNTING_PLACE,
    HUNT_TYPE,
    VOUCHER_PERMISSION_NUMBER,
    JOB_TITLE,
    ISSUED_BY,
    ISSUE_DATE,
    BACK_ISSUE_DATE,
)


@dataclass(frozen=True)
class _FieldValues:
    texts: Mapping[str, str]
    dates: Mapping[str, date | None]
    special_mark: str


def render_permit(
    variant: BlankVariant | str,
    coordinates: FieldCoordinateSet,
    hunter: HunterRecord,
    form: FormValues,
    *,
    settings: RenderSettings | None = None,
    today: date | None = None,
) -> RenderOutput:
    """Render front and back of a permit blank onto two empty A4 pages."""

    resolved_variant = BlankVariant.parse(variant)
    if resolved_variant.is_voucher or coordinates.variant.is_voucher:
        raise ValueError("Voucher blanks are rendered with render_voucher")
    check_layout(coordinates)

    settings = settings or RenderSettings()
    font_name = register_font(settings)
    values = _collect_values(hunter, form, today=today or date.today(), abbreviate=False)

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=PERMIT_PAGE_SIZE)
    entries: list[StampLogEntry] = []

    front = DuplicateStamper(
        canvas,
        page="front",
        font_name=font_name,
        font_size=settings.font_size,
        offset=(0.0, settings.permit_offset_y),
        rotation=_PERMIT_ROTATION,
        entries=entries,
    )
    for field_name in _PERMIT_FRONT_FIELDS:
        _stamp_field(front, coordinates, field_name, values)
    _stamp_resources(front, coordinates.resources, form, values)
    canvas.showPage()

    back = DuplicateStamper(
        canvas,
        page="back",
        font_name=font_name,
        font_size=settings.font_size,
        offset=(0.0, settings.permit_offset_y),
        rotation=_PERMIT_ROTATION,
        entries=entries,
    )
    for field_name in _PERMIT_BACK_FIELDS:
        _stamp_field(back, coordinates, field_name, values)
    canvas.showPage()
    canvas.save()

    output = RenderOutput(
        variant=resolved_variant,
        pdf_bytes=buffer.getvalue(),
        page_count=2,
        report=build_stamp_report(entries, page_count=2),
    )
    _log_render_done(output)
    return output


def render_voucher(
    coordinates: FieldCoordinateSet,
    hunter: HunterRecord,
    form: FormValues,
    background: bytes,
    *,
    settings: RenderSettings | None = None,
    today: date | None = None,
) -> RenderOutput:
    """Render a voucher over the first page of its background template."""

    check_layout(coordinates)
    background_page = _load_background_page(background)
    width = float(background_page.mediabox.width)
    height = float(background_page.mediabox.height)

    settings = settings or RenderSettings()
    font_name = register_font(settings)
    values = _collect_values(hunter, form, today=today or date.today(), abbreviate=True)

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=(width, height))
    entries: list[StampLogEntry] = []
    stamper = DuplicateStamper(
        canvas,
        page="voucher",
        font_name=font_name,
        font_size=settings.font_size,
        offset=(settings.voucher_offset_x, 0.0),
        rotation=0.0,
        entries=entries,
    )
    for field_name in _VOUCHER_FIELDS:
        _stamp_field(stamper, coordinates, field_name, values)
    _stamp_resources(stamper, coordinates.resources, form, values)
    canvas.showPage()
    canvas.save()

    writer = PdfWriter()
    writer.add_page(background_page)
    writer.pages[0].merge_page(PdfReader(io.BytesIO(buffer.getvalue())).pages[0])
    merged = io.BytesIO()
    writer.write(merged)

    output = RenderOutput(
        variant=BlankVariant.VOUCHER,
        pdf_bytes=merged.getvalue(),
        page_count=1,
        report=build_stamp_report(entries, page_count=1),
    )
    _log_render_done(output)
    return output


def check_layout(coordinates: FieldCoordinateSet) -> None:
    """Reject a coordinate table that cannot be rendered, before any drawing."""

    missing = coordinates.missing_required()
    misplaced = sorted(
        name
        for name, placement in coordinates.fields.items()
        if name not in _DATE_FIELD_MONTH_STYLES and not isinstance(placement, Point)
    )
    if missing or misplaced:
        details = []
        if missing:
            details.append(f"missing required fields {missing}")
        if misplaced:
            details.append(f"text fields without a point anchor {misplaced}")
        raise LayoutDefectError(
            f"{coordinates.variant.value} coordinate table is broken: " + "; ".join(details),
            variant=coordinates.variant,
            missing_fields=missing,
            misplaced_fields=misplaced,
        )


def _collect_values(
    hunter: HunterRecord, form: FormValues, *, today: date, abbreviate: bool
) -> _FieldValues:
    full_name = abbreviate_full_name(hunter.full_name) if abbreviate else hunter.full_name
    issue_date = form.issue_date or today
    return _FieldValues(
        texts={
            FULL_NAME: full_name,
            TICKET_SERIES: hunter.series,
            TICKET_NUMBER: hunter.number,
            ORGANIZATION_NAME: form.organization_name,
            HUNTING_PLACE: form.hunting_place,
            HUNT_TYPE: form.hunt_type,
            JOB_TITLE: form.job_title,
            ISSUED_BY: form.issued_by_name,
            VOUCHER_NUMBER: form.voucher_number,
            VOUCHER_PERMISSION_NUMBER: form.voucher_permission_number,
        },
        dates={
            TICKET_ISSUE_DATE: hunter.issue_date,
            ISSUE_DATE: issue_date,
            BACK_ISSUE_DATE: issue_date,
        },
        special_mark=form.special_mark,
    )


def _stamp_field(
    stamper: DuplicateStamper,
    coordinates: FieldCoordinateSet,
    field_name: str,
    values: _FieldValues,
) -> None:
    placement = coordinates.get(field_name)
    if placement is None:
        return
    month_style = _DATE_FIELD_MONTH_STYLES.get(field_name)
    if month_style is not None:
        _stamp_date(stamper, field_name, values.dates.get(field_name), placement, month_style)
        return
    if not isinstance(placement, Point):
        raise TypeError(f"Field {field_name} needs a point anchor, got {placement!r}")
    stamper.stamp(field_name, values.texts.get(field_name, ""), placement.x, placement.y)


def _stamp_date(
    stamper: DuplicateStamper,
    field_name: str,
    value: date | None,
    placement: Placement,
    month_style: MonthStyle,
) -> None:
    if isinstance(placement, DatePoint):
        day, month, year = split_date(value, month_style)
        for suffix, text, y in (
            ("day", day, placement.y_day),
            ("month", month, placement.y_month),
            ("year", year, placement.y_year),
        ):
            if y is None:
                continue
            stamper.stamp(f"{field_name}.{suffix}", text, placement.x, y)
    elif isinstance(placement, Point):
        stamper.stamp(field_name, format_short_date(value), placement.x, placement.y)
    else:
        raise TypeError(f"Unsupported placement for {field_name}: {placement!r}")


def _stamp_resources(
    stamper: DuplicateStamper,
    layout: ResourceLayout | None,
    form: FormValues,
    values: _FieldValues,
) -> None:
    if layout is None:
        return
    if isinstance(layout, RowListResources):
        for index, (row, coords) in enumerate(zip(form.resources, layout.rows)):
            prefix = f"resources[{index}]"
            for suffix, text, point in (
                ("resource", row.resource, coords.resource),
                ("date_from", format_short_date(parse_iso_date(row.date_from)), coords.date_from),
                ("date_to", format_short_date(parse_iso_date(row.date_to)), coords.date_to),
                ("daily_limit", row.daily_limit, coords.daily_limit),
                ("season_limit", row.season_limit, coords.season_limit),
            ):
                if point is not None:
                    stamper.stamp(f"{prefix}.{suffix}", text, point.x, point.y)
        if len(form.resources) > len(layout.rows):
            logger.warning(
                "resource rows without coordinates: rows=%d anchors=%d",
                len(form.resources),
                len(layout.rows),
            )
    elif isinstance(layout, RangeResources):
        earliest, latest = date_span(
            (row.date_from for row in form.resources),
            (row.date_to for row in form.resources),
        )
        for name, text, point in (
            ("resources.min_date_from", format_short_date(earliest), layout.min_date_from),
            ("resources.max_date_to", format_short_date(latest), layout.max_date_to),
            ("resources.special_mark", values.special_mark, layout.special_mark),
        ):
            if point is not None:
                stamper.stamp(name, text, point.x, point.y)
    else:
        raise TypeError(f"Unsupported resource layout: {layout!r}")


def _load_background_page(background: bytes):
    if not background:
        raise BackgroundTemplateError("Voucher background template is empty")
    try:
        reader = PdfReader(io.BytesIO(background))
        return reader.pages[0]
    except (PdfReadError, IndexError, ValueError) as exc:
        raise BackgroundTemplateError(
            f"Voucher background template is not a readable PDF: {exc}"
        ) from exc


def _log_render_done(output: RenderOutput) -> None:
    summary = output.report.summary
    logger.info(
        "render done: variant=%s pages=%d drawn=%d skipped=%d bytes=%d",
        output.variant.value,
        summary.page_count,
        summary.drawn_count,
        summary.skipped_count,
        len(output.pdf_bytes),
    )
