from __future__ import annotations

import io
from dataclasses import replace
from datetime import date
from types import MappingProxyType

import pytest
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen.canvas import Canvas
from reportlab.pdfgen.textobject import PDFTextObject

from huntprint.config.models import RenderSettings
from huntprint.forms.models import FormValues, HunterRecord, ResourceRow
from huntprint.layout.models import (
    FULL_NAME,
    TICKET_NUMBER,
    BlankVariant,
    DatePoint,
    RangeResources,
)
from huntprint.layout.registry import coordinates_for, resolve
from huntprint.render.pdf_renderer import check_layout, render_permit, render_voucher
from huntprint.utils.errors import BackgroundTemplateError, LayoutDefectError

TODAY = date(2025, 11, 5)


def _hunter() -> HunterRecord:
    return HunterRecord.model_validate(
        {
            "fullName": "Иванов Иван Иванович",
            "series": "78",
            "number": "014843",
            "issueDate": "2022-03-01",
        }
    )


def _rows(count: int) -> list[ResourceRow]:
    return [
        ResourceRow(
            resource=f"Вид {index}",
            date_from=f"2025-09-{10 + index:02d}",
            date_to=f"2026-01-{10 + index:02d}",
            daily_limit="б/о",
            season_limit="б/о",
        )
        for index in range(count)
    ]


def _form(row_count: int = 2, **overrides: object) -> FormValues:
    values: dict[str, object] = {
        "organization_name": "ООО Охотхозяйство",
        "hunting_place": "Угодье Северное",
        "issued_by_name": "Петров П.П.",
        "hunt_type": "Любительская",
        "job_title": "Егерь",
        "resources": _rows(row_count),
    }
    values.update(overrides)
    return FormValues(**values)


def _background_pdf() -> bytes:
    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=landscape(A4))
    canvas.drawString(40, 40, "voucher stock")
    canvas.showPage()
    canvas.save()
    return buffer.getvalue()


def _permit(variant: str = "Yellow", row_count: int = 2, **form_overrides: object):
    return render_permit(
        variant,
        coordinates_for(variant, row_count),
        _hunter(),
        _form(row_count, **form_overrides),
        today=TODAY,
    )


def test_permit_renders_two_a4_pages() -> None:
    output = _permit()

    reader = PdfReader(io.BytesIO(output.pdf_bytes))
    assert output.page_count == 2
    assert len(reader.pages) == 2
    for page in reader.pages:
        assert float(page.mediabox.width) == pytest.approx(595.28)
        assert float(page.mediabox.height) == pytest.approx(841.89)


def test_permit_duplicates_every_stamp_355_points_up() -> None:
    output = _permit(row_count=3)

    assert output.report.summary.skipped_count == 0
    for entry in output.report.entries:
        (x1, y1), (x2, y2) = entry.positions
        assert x2 == x1
        assert y2 - y1 == pytest.approx(355)


def test_permit_uses_configured_offset() -> None:
    output = render_permit(
        "Pink",
        coordinates_for("Pink", 0),
        _hunter(),
        _form(0),
        settings=RenderSettings(permit_offset_y=350),
        today=TODAY,
    )

    entry = output.report.for_field(FULL_NAME)[0]
    assert entry.positions == [(457.0, 95.0), (457.0, 445.0)]


def test_permit_places_front_and_back_fields() -> None:
    output = _permit()

    front = {entry.field_name for entry in output.report.for_page("front")}
    back = {entry.field_name for entry in output.report.for_page("back")}
    assert {"full_name", "ticket_series", "ticket_number", "hunting_place"} <= front
    assert back == {
        "issued_by",
        "back_issue_date.day",
        "back_issue_date.month",
        "back_issue_date.year",
    }
    assert output.report.for_field("full_name")[0].text == "Иванов Иван Иванович"


def test_permit_dates_use_genitive_front_and_numeric_back() -> None:
    output = _permit()

    texts = {entry.field_name: entry.text for entry in output.report.entries}
    assert texts["ticket_issue_date.day"] == "01"
    assert texts["ticket_issue_date.month"] == "марта"
    assert texts["ticket_issue_date.year"] == "22"
    assert texts["issue_date.month"] == "ноября"
    assert texts["back_issue_date.day"] == "05"
    assert texts["back_issue_date.month"] == "11"
    assert texts["back_issue_date.year"] == "25"


def test_permit_form_issue_date_overrides_today() -> None:
    output = _permit(issue_date=date(2025, 9, 1))

    texts = {entry.field_name: entry.text for entry in output.report.entries}
    assert texts["issue_date.month"] == "сентября"
    assert texts["back_issue_date.month"] == "09"


def test_permit_stamps_each_row_at_literal_coordinates() -> None:
    output = _permit(row_count=4)

    resource_entries = [
        entry for entry in output.report.entries if entry.field_name.endswith(".resource")
    ]
    assert [entry.text for entry in resource_entries] == ["Вид 0", "Вид 1", "Вид 2", "Вид 3"]
    assert [entry.positions[0] for entry in resource_entries] == [
        (171.0, 40.0),
        (188.0, 40.0),
        (205.0, 40.0),
        (222.0, 40.0),
    ]
    date_from = output.report.for_field("resources[2].date_from")[0]
    assert date_from.text == "12.09.25"
    assert date_from.positions[0] == (207.0, 143.0)


def test_permit_without_rows_stamps_no_resources() -> None:
    output = _permit(row_count=0)

    assert not [entry for entry in output.report.entries if entry.field_name.startswith("res")]


def test_missing_required_field_raises_before_drawing() -> None:
    layout = resolve("Yellow")
    fields = {name: value for name, value in layout.fields.items() if name != TICKET_NUMBER}
    broken = replace(layout, fields=MappingProxyType(fields))

    with pytest.raises(LayoutDefectError) as exc_info:
        render_permit("Yellow", broken, _hunter(), _form(), today=TODAY)

    assert exc_info.value.missing_fields == [TICKET_NUMBER]
    assert exc_info.value.variant is BlankVariant.YELLOW


def test_text_field_with_date_anchor_is_a_layout_defect() -> None:
    layout = resolve("Blue")
    fields = dict(layout.fields)
    fields[FULL_NAME] = DatePoint(455, y_day=95)

    with pytest.raises(LayoutDefectError) as exc_info:
        check_layout(replace(layout, fields=MappingProxyType(fields)))

    assert exc_info.value.misplaced_fields == [FULL_NAME]


def test_failing_field_is_skipped_and_others_are_drawn(monkeypatch: pytest.MonkeyPatch) -> None:
    real_text_out = PDFTextObject.textOut

    def failing_text_out(self: PDFTextObject, text: str) -> None:
        if text == "Угодье Северное":
            raise ValueError("glyph missing")
        real_text_out(self, text)

    monkeypatch.setattr(PDFTextObject, "textOut", failing_text_out)

    output = _permit()

    skipped = [entry for entry in output.report.entries if entry.status == "skipped"]
    assert [entry.field_name for entry in skipped] == ["hunting_place"]
    assert "glyph missing" in (skipped[0].reason or "")
    assert output.report.for_field("full_name")[0].status == "drawn"
    assert output.report.summary.skipped_count == 1
    assert output.page_count == 2


def test_permit_prints_cyrillic_with_default_font() -> None:
    output = _permit(issue_date=date(2025, 10, 3))

    reader = PdfReader(io.BytesIO(output.pdf_bytes))
    front_text = reader.pages[0].extract_text()
    assert "Иванов" in front_text
    assert "октября" in front_text
    assert "б/о" in front_text
    assert output.report.summary.skipped_count == 0


def test_character_missing_from_font_is_skipped() -> None:
    output = _permit(hunting_place="Угодье 漢")

    skipped = [entry for entry in output.report.entries if entry.status == "skipped"]
    assert [entry.field_name for entry in skipped] == ["hunting_place"]
    assert "no glyph" in (skipped[0].reason or "")
    assert output.report.for_field("full_name")[0].status == "drawn"
    text = PdfReader(io.BytesIO(output.pdf_bytes)).pages[0].extract_text()
    assert "Угодье" not in text
    assert "Иванов" in text


def test_builtin_font_skips_cyrillic_and_keeps_digits() -> None:
    output = render_permit(
        "Yellow",
        coordinates_for("Yellow", 1),
        _hunter(),
        _form(1),
        settings=RenderSettings(font_name="Helvetica", font_path=None),
        today=TODAY,
    )

    assert output.report.for_field(FULL_NAME)[0].status == "skipped"
    assert output.report.for_field(TICKET_NUMBER)[0].status == "drawn"
    assert output.report.for_field("resources[0].date_from")[0].status == "drawn"
    text = PdfReader(io.BytesIO(output.pdf_bytes)).pages[0].extract_text()
    assert "014843" in text
    assert "■" not in text


def test_permit_renderer_rejects_voucher_variant() -> None:
    with pytest.raises(ValueError, match="render_voucher"):
        render_permit("Voucher", resolve("Voucher"), _hunter(), _form(), today=TODAY)


def test_voucher_merges_over_background_page() -> None:
    background = _background_pdf()

    output = render_voucher(
        resolve("Voucher"),
        _hunter(),
        _form(voucher_number="0012"),
        background,
        today=TODAY,
    )

    reader = PdfReader(io.BytesIO(output.pdf_bytes))
    width, height = landscape(A4)
    assert output.page_count == 1
    assert len(reader.pages) == 1
    assert float(reader.pages[0].mediabox.width) == pytest.approx(width)
    assert float(reader.pages[0].mediabox.height) == pytest.approx(height)
    text = reader.pages[0].extract_text()
    assert "voucher stock" in text
    assert "0012" in text
    assert "Иванов" in text


def test_voucher_duplicates_stamps_387_points_right_with_short_name() -> None:
    output = render_voucher(
        resolve("Voucher"), _hunter(), _form(), _background_pdf(), today=TODAY
    )

    name = output.report.for_field(FULL_NAME)[0]
    assert name.text == "Иванов И.И."
    assert name.positions == [(90.0, 520.0), (477.0, 520.0)]
    for entry in output.report.entries:
        (x1, y1), (x2, y2) = entry.positions
        assert x2 - x1 == pytest.approx(387)
        assert y2 == y1


def test_voucher_range_form_stamps_span_once() -> None:
    rows = [
        ResourceRow(resource="Гусь", date_from="2025-10-01", date_to="2025-12-31"),
        ResourceRow(resource="Утка", date_from="2025-09-15", date_to="2026-02-28"),
        ResourceRow(resource="Лысуха", date_from="", date_to="2025-11-30"),
    ]
    output = render_voucher(
        resolve("Voucher"),
        _hunter(),
        _form(resources=rows, special_mark="без собаки"),
        _background_pdf(),
        today=TODAY,
    )

    names = [entry.field_name for entry in output.report.entries]
    assert names.count("resources.min_date_from") == 1
    assert names.count("resources.max_date_to") == 1
    assert not [name for name in names if name.startswith("resources[")]
    assert output.report.for_field("resources.min_date_from")[0].text == "15.09.25"
    assert output.report.for_field("resources.max_date_to")[0].text == "28.02.26"
    assert output.report.for_field("resources.special_mark")[0].text == "без собаки"
    assert isinstance(resolve("Voucher").resources, RangeResources)


def test_voucher_issue_date_uses_short_format() -> None:
    output = render_voucher(
        resolve("Voucher"), _hunter(), _form(), _background_pdf(), today=TODAY
    )

    assert output.report.for_field("issue_date")[0].text == "05.11.25"
    assert output.report.for_field("ticket_issue_date")[0].text == "01.03.22"


@pytest.mark.parametrize("background", [b"", b"not a pdf at all"])
def test_voucher_rejects_unusable_background(background: bytes) -> None:
    with pytest.raises(BackgroundTemplateError):
        render_voucher(resolve("Voucher"), _hunter(), _form(), background, today=TODAY)
