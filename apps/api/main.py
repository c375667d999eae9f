"""FastAPI wrapper for huntprint layout, group expansion and rendering."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Annotated, Any

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from huntprint.config.loader import load_render_settings
from huntprint.forms.models import FormValues, HunterRecord, ResourceRow
from huntprint.groups.models import ResourceSelection, SavedGroup
from huntprint.groups.resolver import expand
from huntprint.layout.constants import MAX_RESOURCES
from huntprint.layout.models import BlankVariant, layout_to_payload
from huntprint.layout.registry import coordinates_for, list_supported_variants
from huntprint.orchestrator.pipeline import print_voucher, render_document
from huntprint.render.models import RenderOutput
from huntprint.store.settings_store import SettingsStore
from huntprint.utils.errors import (
    BackgroundTemplateError,
    EmptyResourceInputError,
    LayoutDefectError,
    TruncationConfirmationRequired,
)

app = FastAPI(title="huntprint API", version="0.1.0")
logger = logging.getLogger("huntprint.api")

REQUEST_ID_HEADER = "X-Huntprint-Request-Id"
_DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_voucher_lock = threading.Lock()


class ApiRequestError(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail or {}


class ExpandRequest(BaseModel):
    """Group expansion input; ``groups`` falls back to the configured store."""

    model_config = ConfigDict(extra="forbid")

    text: str
    groups: list[SavedGroup] | None = None
    current_rows: list[ResourceRow] = Field(default_factory=list, max_length=MAX_RESOURCES)
    current_variant: BlankVariant = BlankVariant.YELLOW
    confirm_truncation: bool = False

    @field_validator("current_variant", mode="before")
    @classmethod
    def parse_current_variant(cls, value: object) -> BlankVariant:
        return BlankVariant.parse(value)


class RenderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    variant: BlankVariant = BlankVariant.YELLOW
    hunter: HunterRecord
    form: FormValues

    @field_validator("variant", mode="before")
    @classmethod
    def parse_variant(cls, value: object) -> BlankVariant:
        return BlankVariant.parse(value)


class VoucherPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hunter: HunterRecord
    form: FormValues


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage="middleware",
        )
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.get("/v1/layouts/{variant}", response_model=None)
async def layout_v1(
    request: Request,
    variant: str,
    rows: Annotated[int, Query(ge=0, le=MAX_RESOURCES)] = MAX_RESOURCES,
) -> JSONResponse:
    """Return the coordinate table used for one blank variant."""

    request_id = _request_id_from_request(request)
    supported = list_supported_variants()
    matched = next((name for name in supported if name.lower() == variant.lower()), None)
    if matched is None:
        _log_event(
            logging.WARNING,
            "error",
            request_id,
            error_code="UNKNOWN_VARIANT",
            status_code=404,
            failure_stage="resolve_variant",
        )
        return _error_response(
            status_code=404,
            error_code="UNKNOWN_VARIANT",
            message=f"unknown blank variant: {variant}",
            request_id=request_id,
            detail={"supported": supported},
        )

    payload = layout_to_payload(coordinates_for(matched, rows))
    return JSONResponse(content=payload, headers={REQUEST_ID_HEADER: request_id})


@app.post("/v1/groups/expand", response_model=None)
async def expand_groups_v1(request: Request, body: ExpandRequest) -> JSONResponse:
    """Expand a saved group name or a typed species list into resource rows."""

    request_id = _request_id_from_request(request)
    failure_stage = "load_groups"
    try:
        groups = body.groups if body.groups is not None else _stored_groups()
        season = _load_render_settings_with_api_error().default_season.as_tuple()
        current = ResourceSelection(rows=tuple(body.current_rows), variant=body.current_variant)

        failure_stage = "expand"
        selection = expand(
            body.text,
            groups,
            current,
            confirm_truncation=body.confirm_truncation,
            season=season,
        )
    except EmptyResourceInputError as exc:
        return _logged_error(
            request_id,
            failure_stage,
            ApiRequestError(
                status_code=422,
                error_code="EMPTY_INPUT",
                message=str(exc),
                detail={"text": exc.text},
            ),
        )
    except TruncationConfirmationRequired as exc:
        return _logged_error(
            request_id,
            failure_stage,
            ApiRequestError(
                status_code=409,
                error_code="TRUNCATION_CONFIRMATION_REQUIRED",
                message=str(exc),
                detail={"total": exc.total, "limit": exc.limit, "overflow": exc.overflow},
            ),
        )
    except ApiRequestError as exc:
        return _logged_error(request_id, failure_stage, exc)

    _log_event(
        logging.INFO,
        "done",
        request_id,
        action="expand",
        rows=len(selection.rows),
        variant=selection.variant.value,
    )
    return JSONResponse(
        content=selection.model_dump(mode="json", by_alias=True),
        headers={REQUEST_ID_HEADER: request_id},
    )


@app.post("/v1/render", response_model=None)
def render_v1(request: Request, body: RenderRequest) -> Response:
    """Render a permit blank and return the PDF."""

    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "validate_inputs"
    _log_event(logging.INFO, "start", request_id, action="render", variant=body.variant.value)

    try:
        if body.variant.is_voucher:
            raise ApiRequestError(
                status_code=400,
                error_code="INVALID_ARGUMENT",
                message="voucher blanks are printed through /v1/voucher",
                detail={"field": "variant"},
            )
        failure_stage = "load_render_settings"
        settings = _load_render_settings_with_api_error()

        failure_stage = "render"
        output = render_document(body.variant, body.hunter, body.form, settings=settings)
    except ApiRequestError as exc:
        return _logged_error(request_id, failure_stage, exc)
    except LayoutDefectError as exc:
        return _logged_error(request_id, failure_stage, _layout_defect_error(exc))

    return _pdf_response(output, request_id, request_started)


@app.post("/v1/voucher", response_model=None)
def voucher_v1(
    request: Request,
    payload: Annotated[str, Form()],
    background: Annotated[UploadFile, File(...)],
) -> Response:
    """Number and render one voucher, advancing the stored counter on success."""

    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "validate_inputs"
    _log_event(logging.INFO, "start", request_id, action="voucher")

    try:
        store = SettingsStore(_store_path())
        voucher = _parse_voucher_payload(payload)

        failure_stage = "upload"
        background_bytes = _read_background_upload(background)

        failure_stage = "load_render_settings"
        settings = _load_render_settings_with_api_error()

        failure_stage = "render"
        with _voucher_lock:
            try:
                output = print_voucher(
                    voucher.hunter,
                    voucher.form,
                    store,
                    background_bytes,
                    settings=settings,
                )
            except ValueError as exc:
                raise ApiRequestError(
                    status_code=500,
                    error_code="STORE_UNREADABLE",
                    message="settings store could not be read",
                    detail={"error": str(exc)},
                ) from exc
    except ApiRequestError as exc:
        return _logged_error(request_id, failure_stage, exc)
    except LayoutDefectError as exc:
        return _logged_error(request_id, failure_stage, _layout_defect_error(exc))
    except BackgroundTemplateError as exc:
        return _logged_error(
            request_id,
            failure_stage,
            ApiRequestError(
                status_code=422,
                error_code="INVALID_BACKGROUND",
                message=str(exc),
                detail={"field": "background"},
            ),
        )

    return _pdf_response(output, request_id, request_started)


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _store_path() -> Path:
    raw = os.getenv("HUNTPRINT_STORE_PATH")
    if not raw:
        raise ApiRequestError(
            status_code=503,
            error_code="STORE_NOT_CONFIGURED",
            message="HUNTPRINT_STORE_PATH is not set",
        )
    return Path(raw)


def _stored_groups() -> list[SavedGroup]:
    raw = os.getenv("HUNTPRINT_STORE_PATH")
    if not raw:
        return []
    try:
        return SettingsStore(Path(raw)).saved_groups()
    except ValueError as exc:
        raise ApiRequestError(
            status_code=500,
            error_code="STORE_UNREADABLE",
            message="settings store could not be read",
            detail={"error": str(exc)},
        ) from exc


def _parse_voucher_payload(raw: str) -> VoucherPayload:
    try:
        return VoucherPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="invalid voucher payload",
            detail={"field": "payload", "errors": json.loads(exc.json())},
        ) from exc


def _read_background_upload(upload: UploadFile) -> bytes:
    filename = upload.filename
    if filename is None or not filename.lower().endswith(".pdf"):
        raise ApiRequestError(
            status_code=415,
            error_code="INVALID_MEDIA_TYPE",
            message="background must be a .pdf file",
            detail={"field": "background", "filename": filename},
        )

    data = upload.file.read(_DEFAULT_MAX_UPLOAD_BYTES + 1)
    upload.file.close()
    if len(data) > _DEFAULT_MAX_UPLOAD_BYTES:
        raise ApiRequestError(
            status_code=413,
            error_code="UPLOAD_TOO_LARGE",
            message="background exceeds upload size limit",
            detail={"field": "background", "max_bytes": _DEFAULT_MAX_UPLOAD_BYTES},
        )
    if not data.startswith(b"%PDF"):
        raise ApiRequestError(
            status_code=415,
            error_code="INVALID_MEDIA_TYPE",
            message="background must be a valid PDF file",
            detail={"field": "background"},
        )
    return data


def _load_render_settings_with_api_error():
    raw = os.getenv("HUNTPRINT_RENDER_SETTINGS")
    try:
        return load_render_settings(Path(raw) if raw else None)
    except ValueError as exc:
        raise ApiRequestError(
            status_code=500,
            error_code="INVALID_RENDER_SETTINGS",
            message="render settings could not be loaded",
            detail={"error": str(exc)},
        ) from exc


def _layout_defect_error(exc: LayoutDefectError) -> ApiRequestError:
    return ApiRequestError(
        status_code=500,
        error_code="LAYOUT_DEFECT",
        message=str(exc),
        detail={
            "variant": exc.variant.value if exc.variant is not None else None,
            "missing_fields": exc.missing_fields,
            "misplaced_fields": exc.misplaced_fields,
        },
    )


def _pdf_response(output: RenderOutput, request_id: str, request_started: float) -> Response:
    summary = output.report.summary
    skipped = [entry.field_name for entry in output.report.entries if entry.status == "skipped"]
    _log_event(
        logging.INFO,
        "done",
        request_id,
        variant=output.variant.value,
        page_count=summary.page_count,
        drawn_count=summary.drawn_count,
        skipped_count=summary.skipped_count,
        skipped_fields=skipped,
        total_ms=_elapsed_ms(request_started),
    )
    return Response(
        content=output.pdf_bytes,
        media_type="application/pdf",
        headers={
            REQUEST_ID_HEADER: request_id,
            "X-Huntprint-Page-Count": str(summary.page_count),
            "X-Huntprint-Skipped-Count": str(summary.skipped_count),
            "Content-Disposition": 'attachment; filename="out.pdf"',
        },
    )


def _logged_error(request_id: str, failure_stage: str, exc: ApiRequestError) -> JSONResponse:
    _log_event(
        logging.ERROR,
        "error",
        request_id,
        error_code=exc.error_code,
        status_code=exc.status_code,
        failure_stage=failure_stage,
    )
    return _error_response(
        status_code=exc.status_code,
        error_code=exc.error_code,
        message=exc.message,
        request_id=request_id,
        detail=exc.detail,
    )


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
