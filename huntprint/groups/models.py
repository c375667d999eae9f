"""Saved resource groups and the resolved row selection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from huntprint.forms.models import ResourceRow
from huntprint.layout.constants import MAX_RESOURCES
from huntprint.layout.models import BlankVariant


class SavedGroup(BaseModel):
    """Named, reusable set of species with a shared season window."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
        extra="ignore",
    )

    id: str = ""
    name: str
    animals: list[str] = Field(default_factory=list)
    date_from: str = ""
    date_to: str = ""
    daily_limit: str | None = None
    season_limit: str | None = None
    blank_type: BlankVariant = BlankVariant.YELLOW

    @field_validator("blank_type", mode="before")
    @classmethod
    def parse_blank_type(cls, value: object) -> BlankVariant:
        return BlankVariant.parse(value)


class ResourceSelection(BaseModel):
    """Resource rows on the form together with the paper stock they target."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rows: tuple[ResourceRow, ...] = Field(default=(), max_length=MAX_RESOURCES)
    variant: BlankVariant = BlankVariant.YELLOW

    @field_validator("variant", mode="before")
    @classmethod
    def parse_variant(cls, value: object) -> BlankVariant:
        return BlankVariant.parse(value)
