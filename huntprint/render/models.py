"""Render output and stamp report models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from huntprint.layout.models import BlankVariant

PageName = Literal["front", "back", "voucher"]


class StampLogEntry(BaseModel):
    """One logical stamp and the positions of its printed copies."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["drawn", "skipped"]
    page: PageName
    field_name: str
    text: str
    positions: list[tuple[float, float]] = Field(default_factory=list)
    reason: str | None = None


class StampSummary(BaseModel):
    """Aggregate stamp counts for observability."""

    model_config = ConfigDict(extra="forbid")

    page_count: int
    drawn_count: int
    skipped_count: int


class StampReport(BaseModel):
    """Full stamp report for one render."""

    model_config = ConfigDict(extra="forbid")

    entries: list[StampLogEntry] = Field(default_factory=list)
    summary: StampSummary

    def for_field(self, field_name: str) -> list[StampLogEntry]:
        return [entry for entry in self.entries if entry.field_name == field_name]

    def for_page(self, page: PageName) -> list[StampLogEntry]:
        return [entry for entry in self.entries if entry.page == page]


class RenderOutput(BaseModel):
    """Rendered PDF bytes with the report describing what was stamped."""

    model_config = ConfigDict(extra="forbid")

    variant: BlankVariant
    pdf_bytes: bytes
    page_count: int
    report: StampReport


def build_stamp_report(entries: list[StampLogEntry], page_count: int) -> StampReport:
    drawn_count = sum(1 for entry in entries if entry.status == "drawn")
    return StampReport(
        entries=entries,
        summary=StampSummary(
            page_count=page_count,
            drawn_count=drawn_count,
            skipped_count=len(entries) - drawn_count,
        ),
    )
