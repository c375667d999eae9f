"""Local JSON store for print settings, saved groups and the voucher counter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from huntprint.forms.models import FormValues
from huntprint.groups.models import SavedGroup


class PrintSettings(BaseModel):
    """Print configuration as kept by the settings editor."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    organization_name: str = ""
    hunting_place: str = ""
    issued_by_name: str = ""
    hunt_type: str = ""
    job_title: str = ""
    saved_groups: list[SavedGroup] = Field(default_factory=list)
    voucher_number: str = ""


class SettingsStore:
    """Persist print settings in a JSON file, keeping unknown keys intact."""

    def __init__(self, store_path: Path) -> None:
        self._store_path = store_path

    def load(self) -> PrintSettings:
        raw = self._read_raw()
        try:
            return PrintSettings.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid settings store schema: {self._store_path}") from exc

    def save(self, settings: PrintSettings) -> None:
        raw = self._read_raw()
        raw.update(settings.model_dump(mode="json", by_alias=True))
        self._write_raw(raw)

    def saved_groups(self) -> list[SavedGroup]:
        return list(self.load().saved_groups)

    def voucher_number(self) -> str:
        value = self._read_raw().get("voucherNumber")
        return "" if value is None else str(value)

    def set_voucher_number(self, value: str) -> None:
        raw = self._read_raw()
        raw["voucherNumber"] = value
        self._write_raw(raw)

    def form_defaults(self) -> FormValues:
        """Form values prefilled from the stored configuration."""

        settings = self.load()
        return FormValues(
            organization_name=settings.organization_name,
            hunting_place=settings.hunting_place,
            issued_by_name=settings.issued_by_name,
            hunt_type=settings.hunt_type,
            job_title=settings.job_title,
        )

    def _read_raw(self) -> dict[str, Any]:
        if not self._store_path.exists():
            return {}

        try:
            raw = json.loads(self._store_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid settings store JSON: {self._store_path}") from exc

        if not isinstance(raw, dict):
            raise ValueError(f"Settings store must contain a JSON object: {self._store_path}")
        return raw

    def _write_raw(self, raw: dict[str, Any]) -> None:
        self._store_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._store_path.with_suffix(f"{self._store_path.suffix}.tmp")
        temp_path.write_text(
            json.dumps(raw, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        temp_path.replace(self._store_path)
