"""Duplicate stamping of text on two-copy paper stock."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas
from reportlab.pdfgen.textobject import PDFTextObject

from huntprint.config.models import RenderSettings
from huntprint.render.models import PageName, StampLogEntry

logger = logging.getLogger("huntprint.render")


def register_font(settings: RenderSettings) -> str:
    """Make the configured font available to reportlab and return its name."""

    if settings.font_path is None:
        return settings.font_name
    if settings.font_name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(settings.font_name, settings.font_path))
    return settings.font_name


def missing_glyphs(font_name: str, text: str) -> list[str]:
    """Return the characters of text that the font cannot print, in order."""

    font = pdfmetrics.getFont(font_name)
    if isinstance(font, TTFont):
        covered = font.face.charToGlyph
        return _unique(char for char in text if ord(char) not in covered)
    encoding = font.encName
    if "UCS-2" in encoding:
        return []
    missing: list[str] = []
    for char in text:
        try:
            char.encode(encoding)
        except UnicodeEncodeError:
            missing.append(char)
    return _unique(missing)


class DuplicateStamper:
    """Draw every stamp twice: at its anchor and shifted by a fixed offset.

    Both copies are built before either is committed to the canvas, so a text
    that cannot be set leaves the page without any copy of it.
    """

    def __init__(
        self,
        canvas: Canvas,
        *,
        page: PageName,
        font_name: str,
        font_size: float,
        offset: tuple[float, float],
        rotation: float,
        entries: list[StampLogEntry],
    ) -> None:
        self._canvas = canvas
        self._page = page
        self._font_name = font_name
        self._font_size = font_size
        self._offset = offset
        self._transform = _rotation_matrix(rotation)
        self._entries = entries

    def stamp(self, field_name: str, text: str, x: float, y: float) -> bool:
        dx, dy = self._offset
        positions = [(float(x), float(y)), (float(x + dx), float(y + dy))]
        try:
            text_objects = [self._build(text, px, py) for px, py in positions]
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "stamp skipped: page=%s field=%s error=%s", self._page, field_name, exc
            )
            self._entries.append(
                StampLogEntry(
                    status="skipped",
                    page=self._page,
                    field_name=field_name,
                    text=text,
                    positions=positions,
                    reason=f"{type(exc).__name__}: {exc}",
                )
            )
            return False

        for text_object in text_objects:
            self._canvas.drawText(text_object)
        self._entries.append(
            StampLogEntry(
                status="drawn",
                page=self._page,
                field_name=field_name,
                text=text,
                positions=positions,
            )
        )
        return True

    def _build(self, text: str, x: float, y: float) -> PDFTextObject:
        missing = missing_glyphs(self._font_name, text)
        if missing:
            raise ValueError(
                f"font '{self._font_name}' has no glyph for {''.join(missing)!r}"
            )
        text_object = self._canvas.beginText()
        text_object.setFont(self._font_name, self._font_size)
        a, b, c, d = self._transform
        text_object.setTextTransform(a, b, c, d, x, y)
        text_object.textOut(text)
        return text_object


def _rotation_matrix(degrees: float) -> tuple[float, float, float, float]:
    radians = math.radians(degrees)
    cos = round(math.cos(radians), 12)
    sin = round(math.sin(radians), 12)
    return cos, sin, -sin, cos


def _unique(chars: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(chars))
