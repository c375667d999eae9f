"""Orchestration of layout resolution, rendering and voucher numbering."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from huntprint.config.models import RenderSettings
from huntprint.forms.models import FormValues, HunterRecord
from huntprint.layout.models import BlankVariant
from huntprint.layout.registry import coordinates_for
from huntprint.render.models import RenderOutput
from huntprint.render.pdf_renderer import render_permit, render_voucher
from huntprint.store.settings_store import SettingsStore
from huntprint.utils.errors import BackgroundTemplateError
from huntprint.vouchers.sequencer import allocate

logger = logging.getLogger("huntprint.pipeline")


def render_document(
    variant: BlankVariant | str,
    hunter: HunterRecord,
    form: FormValues,
    *,
    background: bytes | None = None,
    settings: RenderSettings | None = None,
    today: date | None = None,
) -> RenderOutput:
    """Resolve the variant's coordinates once and render with them."""

    resolved = BlankVariant.parse(variant)
    coordinates = coordinates_for(resolved, len(form.resources))
    if resolved.is_voucher:
        if background is None:
            raise BackgroundTemplateError("Voucher rendering requires a background template")
        return render_voucher(
            coordinates, hunter, form, background, settings=settings, today=today
        )
    return render_permit(resolved, coordinates, hunter, form, settings=settings, today=today)


def print_voucher(
    hunter: HunterRecord,
    form: FormValues,
    store: SettingsStore,
    background: bytes,
    *,
    settings: RenderSettings | None = None,
    today: date | None = None,
    deliver: Callable[[RenderOutput], None] | None = None,
) -> RenderOutput:
    """Number, render and only then advance the stored voucher counter.

    ``deliver`` receives the output before the counter moves. Any exception
    raised while rendering or delivering leaves the stored number untouched.
    """

    stored = store.voucher_number()
    allocation = allocate(stored)
    numbered_form = form.model_copy(update={"voucher_number": allocation.use_number})

    output = render_document(
        BlankVariant.VOUCHER,
        hunter,
        numbered_form,
        background=background,
        settings=settings,
        today=today,
    )
    if deliver is not None:
        deliver(output)

    store.set_voucher_number(allocation.next_value)
    logger.info(
        "voucher numbered: used=%s next=%s stored=%r",
        allocation.use_number,
        allocation.next_value,
        stored,
    )
    return output
