"""Custom exceptions for layout resolution and rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from huntprint.layout.models import BlankVariant


class LayoutDefectError(Exception):
    """Raised when a coordinate table is missing a required field or misshapes one."""

    def __init__(
        self,
        message: str,
        *,
        variant: BlankVariant | None = None,
        missing_fields: list[str],
        misplaced_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.variant = variant
        self.missing_fields = missing_fields
        self.misplaced_fields = misplaced_fields or []


class EmptyResourceInputError(ValueError):
    """Raised when freeform resource input yields no species names."""

    def __init__(self, message: str, *, text: str) -> None:
        super().__init__(message)
        self.text = text


class TruncationConfirmationRequired(Exception):
    """Raised when freeform input exceeds the row limit and was not confirmed."""

    def __init__(self, message: str, *, total: int, limit: int) -> None:
        super().__init__(message)
        self.total = total
        self.limit = limit

    @property
    def overflow(self) -> int:
        return self.total - self.limit


class BackgroundTemplateError(Exception):
    """Raised when the voucher background is missing or not a readable PDF."""
