"""Input records consumed by the renderer."""

from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from huntprint.layout.constants import MAX_RESOURCES

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    frozen=True,
    extra="ignore",
)


def _blank_date_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class HunterRecord(BaseModel):
    """Hunter identity as kept by the record store."""

    model_config = _RECORD_CONFIG

    id: int | None = None
    full_name: str = ""
    series: str = ""
    number: str = ""
    issue_date: date | None = None

    @field_validator("issue_date", mode="before")
    @classmethod
    def blank_issue_date(cls, value: object) -> object:
        return _blank_date_to_none(value)


class ResourceRow(BaseModel):
    """One hunted-species entry with its season window and take limits."""

    model_config = _RECORD_CONFIG

    resource: str = ""
    date_from: str = ""
    date_to: str = ""
    daily_limit: str = ""
    season_limit: str = ""


class FormValues(BaseModel):
    """Values entered on the print form for one render."""

    model_config = _RECORD_CONFIG

    organization_name: str = ""
    hunting_place: str = ""
    issued_by_name: str = ""
    hunt_type: str = ""
    job_title: str = ""
    issue_date: date | None = None
    resources: list[ResourceRow] = Field(default_factory=list, max_length=MAX_RESOURCES)
    voucher_number: str = ""
    special_mark: str = Field(
        default="",
        validation_alias=AliasChoices("specialMark", "voucherNote", "special_mark"),
    )
    voucher_permission_number: str = ""

    @field_validator("issue_date", mode="before")
    @classmethod
    def blank_issue_date(cls, value: object) -> object:
        return _blank_date_to_none(value)
