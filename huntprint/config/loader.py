"""Render settings loading utilities."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError
from reportlab.pdfbase.pdfmetrics import standardFonts

from huntprint.config.models import RenderSettings
from huntprint.layout.constants import DEFAULT_FONT_NAME

DEFAULT_SETTINGS_PATH = Path(__file__).with_name("render_settings.yaml")


def load_render_settings(path: Path | None = None) -> RenderSettings:
    """Load and validate render settings from YAML."""

    settings_path = path or DEFAULT_SETTINGS_PATH

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Render settings file not found: {settings_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in render settings file: {settings_path}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Render settings file must contain a mapping: {settings_path}")

    normalized = _normalize_font(raw, settings_path)

    try:
        return RenderSettings.model_validate(normalized)
    except ValidationError as exc:
        raise ValueError(f"Invalid render settings schema: {settings_path}") from exc


def _normalize_font(raw: dict[object, object], settings_path: Path) -> dict[object, object]:
    normalized = dict(raw)
    font_path = normalized.get("font_path")
    font_name = normalized.get("font_name")

    if "font_path" not in normalized and font_name in (None, DEFAULT_FONT_NAME):
        normalized.pop("font_name", None)
        return normalized

    if isinstance(font_path, str) and font_path.strip():
        resolved = Path(font_path).expanduser()
        if not resolved.is_absolute():
            resolved = settings_path.parent / resolved
        if not resolved.is_file():
            raise ValueError(f"Font file not found: {resolved} (from {settings_path})")
        normalized["font_path"] = str(resolved)
        return normalized

    normalized["font_path"] = None
    if isinstance(font_name, str) and font_name not in standardFonts:
        raise ValueError(
            f"Font '{font_name}' in {settings_path} is not a built-in PDF font. "
            "Set font_path to its TrueType file."
        )
    return normalized
