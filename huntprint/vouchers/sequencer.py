"""Voucher number allocation."""

from __future__ import annotations

from dataclasses import dataclass

_NUMBER_WIDTH = 4
_FALLBACK_NUMBER = 1


@dataclass(frozen=True)
class VoucherAllocation:
    """Number to print now and the value to persist once printing succeeded."""

    use_number: str
    next_value: str


def format_voucher_number(value: int) -> str:
    return str(value).zfill(_NUMBER_WIDTH)


def parse_voucher_number(raw: object) -> int:
    """Parse a stored voucher number; anything unusable counts as 1."""

    if isinstance(raw, bool):
        return _FALLBACK_NUMBER
    if isinstance(raw, int):
        return raw if raw >= 0 else _FALLBACK_NUMBER
    if not isinstance(raw, str):
        return _FALLBACK_NUMBER
    try:
        number = int(raw.strip())
    except ValueError:
        return _FALLBACK_NUMBER
    return number if number >= 0 else _FALLBACK_NUMBER


def allocate(current: object) -> VoucherAllocation:
    """Allocate the number for the next voucher without persisting anything."""

    number = parse_voucher_number(current)
    return VoucherAllocation(
        use_number=format_voucher_number(number),
        next_value=format_voucher_number(number + 1),
    )
