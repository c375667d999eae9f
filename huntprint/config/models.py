"""Render settings loaded from YAML."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from huntprint.layout.constants import (
    DEFAULT_FONT_NAME,
    DEFAULT_FONT_SIZE,
    DEFAULT_SEASON_DATE_FROM,
    DEFAULT_SEASON_DATE_TO,
    PERMIT_DUPLICATE_OFFSET_Y,
    VOUCHER_DUPLICATE_OFFSET_X,
)

# DejaVu Sans covers Latin and Cyrillic.
BUNDLED_FONT_PATH = Path(__file__).with_name("fonts") / "DejaVuSans.ttf"


class SeasonWindow(BaseModel):
    """Season window assigned to typed species lists."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    date_from: str = DEFAULT_SEASON_DATE_FROM
    date_to: str = DEFAULT_SEASON_DATE_TO

    def as_tuple(self) -> tuple[str, str]:
        return self.date_from, self.date_to


class RenderSettings(BaseModel):
    """Font and geometry settings applied to every render."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    font_name: str = DEFAULT_FONT_NAME
    font_path: str | None = str(BUNDLED_FONT_PATH)
    font_size: float = Field(default=DEFAULT_FONT_SIZE, gt=0)
    permit_offset_y: float = PERMIT_DUPLICATE_OFFSET_Y
    voucher_offset_x: float = VOUCHER_DUPLICATE_OFFSET_X
    default_season: SeasonWindow = Field(default_factory=SeasonWindow)
