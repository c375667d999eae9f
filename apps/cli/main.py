"""Typer CLI entrypoint for huntprint."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from apps.cli.io import (
    OutputPaths,
    build_output_paths,
    existing_output_files,
    write_fallback_json_atomic,
    write_json_atomic,
    write_render_output_atomic,
)
from huntprint.config.loader import load_render_settings
from huntprint.forms.models import FormValues, HunterRecord
from huntprint.groups.models import ResourceSelection, SavedGroup
from huntprint.groups.resolver import expand, initial_variant
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

app = typer.Typer(help="Hunting permit and voucher printing CLI", rich_markup_mode=None)

EXIT_LAYOUT_DEFECT = 2
EXIT_NOTHING_RECOGNIZED = 3
EXIT_TRUNCATION_DECLINED = 4
EXIT_BAD_BACKGROUND = 5


@app.callback()
def cli_callback(
    log_level: Annotated[str, typer.Option(help="Python logging level.")] = "WARNING",
) -> None:
    """Configure logging for every subcommand."""

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command("render")
def render_command(
    hunter: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    form: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    variant: Annotated[
        str | None,
        typer.Option(help="Yellow, Pink, Blue or Voucher. Defaults to the form's blankType."),
    ] = None,
    out_dir: Annotated[Path, typer.Option()] = Path("."),
    store: Annotated[
        Path | None,
        typer.Option(help="Settings store JSON with defaults, groups and the voucher counter."),
    ] = None,
    background: Annotated[
        Path | None,
        typer.Option(exists=True, dir_okay=False, file_okay=True, help="Voucher background PDF."),
    ] = None,
    render_settings: Annotated[
        Path | None, typer.Option(exists=True, dir_okay=False, file_okay=True)
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite outputs when they already exist.")
    ] = False,
    no_overwrite: Annotated[
        bool,
        typer.Option(
            "--no-overwrite",
            help="Fail when outputs already exist.",
        ),
    ] = False,
) -> None:
    """Render one permit or voucher and write out.pdf with its stamp report."""

    paths = build_output_paths(out_dir)

    if force and no_overwrite:
        typer.echo("ERROR: --force and --no-overwrite cannot be used together.")
        _safe_write_fallback(paths, "ArgumentConflict", "conflicting overwrite flags", "args")
        raise typer.Exit(code=1)

    existing = existing_output_files(paths)
    if existing and no_overwrite:
        typer.echo("ERROR: outputs already exist and --no-overwrite is enabled.")
        raise typer.Exit(code=1)
    if existing:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}")

    exit_code = 1
    failure_stage = "unknown"
    output: RenderOutput | None = None
    settings_store = SettingsStore(store) if store is not None else None

    try:
        failure_stage = "load_hunter"
        hunter_record = HunterRecord.model_validate(_load_json_object(hunter, "Hunter"))
        failure_stage = "load_form"
        form_raw = _load_json_object(form, "Form")
        form_values = _build_form_values(form_raw, settings_store)
        failure_stage = "resolve_variant"
        resolved_variant = _resolve_variant(variant, form_raw, settings_store)
        typer.echo(f"INFO: variant={resolved_variant.value}")
        failure_stage = "load_render_settings"
        settings = load_render_settings(render_settings)

        failure_stage = "render"
        if resolved_variant.is_voucher:
            if background is None:
                raise BackgroundTemplateError("--background is required for Voucher blanks")
            if settings_store is None:
                typer.echo("ERROR: --store is required for Voucher blanks (voucher counter).")
                _safe_write_fallback(paths, "ArgumentValidationError", "missing store", "args")
                raise typer.Exit(code=1)
            output = print_voucher(
                hunter_record,
                form_values,
                settings_store,
                background.read_bytes(),
                settings=settings,
                deliver=lambda rendered: write_render_output_atomic(paths, rendered),
            )
            typer.echo(f"INFO: voucher number={_voucher_number(output)}")
        else:
            output = render_document(
                resolved_variant, hunter_record, form_values, settings=settings
            )
            failure_stage = "write_output"
            write_render_output_atomic(paths, output)
        exit_code = 0
    except typer.Exit:
        raise
    except LayoutDefectError as exc:
        exit_code = EXIT_LAYOUT_DEFECT
        typer.echo(f"ERROR: layout table defect: {exc}")
        _safe_write_fallback(
            paths,
            "LayoutDefectError",
            str(exc),
            failure_stage,
            detail={"missing_fields": exc.missing_fields, "misplaced_fields": exc.misplaced_fields},
        )
    except BackgroundTemplateError as exc:
        exit_code = EXIT_BAD_BACKGROUND
        typer.echo(f"ERROR: voucher background: {exc}")
        _safe_write_fallback(paths, "BackgroundTemplateError", str(exc), failure_stage)
    except (ValueError, ValidationError) as exc:
        exit_code = 1
        typer.echo(f"ERROR: invalid input at {failure_stage}: {exc}")
        _safe_write_fallback(paths, type(exc).__name__, str(exc), failure_stage)
    except Exception as exc:  # noqa: BLE001
        exit_code = 1
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")
        _safe_write_fallback(paths, type(exc).__name__, str(exc), failure_stage)

    if output is not None and output.report.summary.skipped_count:
        skipped = [entry.field_name for entry in output.report.entries if entry.status == "skipped"]
        typer.echo(f"WARNING: fields skipped while stamping: {', '.join(skipped)}")
    if exit_code == 0:
        typer.echo("INFO: success")
    raise typer.Exit(code=exit_code)


@app.command("apply-group")
def apply_group_command(
    form: Annotated[Path, typer.Option(dir_okay=False, file_okay=True)],
    store: Annotated[Path, typer.Option(dir_okay=False, file_okay=True)],
    input_text: Annotated[
        str, typer.Option("--input", help="Saved group name or species list.")
    ],
    yes: Annotated[
        bool, typer.Option("--yes", help="Truncate overlong lists without asking.")
    ] = False,
    render_settings: Annotated[
        Path | None, typer.Option(exists=True, dir_okay=False, file_okay=True)
    ] = None,
) -> None:
    """Replace the form's resource rows from a saved group or a typed list."""

    try:
        season = load_render_settings(render_settings).default_season.as_tuple()
        settings_store = SettingsStore(store)
        groups = settings_store.saved_groups()
        form_raw = _load_json_object(form, "Form") if form.exists() else {}
        form_values = FormValues.model_validate(form_raw)
    except (ValueError, ValidationError) as exc:
        typer.echo(f"ERROR: invalid input: {exc}")
        raise typer.Exit(code=1) from exc

    current = ResourceSelection(
        rows=tuple(form_values.resources),
        variant=_form_variant(form_raw, groups),
    )

    try:
        selection = _expand_with_confirmation(
            input_text, groups, current, season=season, confirmed=yes
        )
    except EmptyResourceInputError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_NOTHING_RECOGNIZED) from exc
    except TruncationConfirmationRequired as exc:
        typer.echo(
            f"INFO: truncation declined, form unchanged with {len(current.rows)} rows."
        )
        raise typer.Exit(code=EXIT_TRUNCATION_DECLINED) from exc

    updated = dict(form_raw)
    updated["resources"] = [row.model_dump(mode="json", by_alias=True) for row in selection.rows]
    updated["blankType"] = selection.variant.value
    write_json_atomic(form, updated)
    typer.echo(f"INFO: rows={len(selection.rows)} variant={selection.variant.value}")


@app.command("layout")
def layout_command(
    variant: Annotated[str, typer.Option(help="Yellow, Pink, Blue or Voucher.")] = "Yellow",
    rows: Annotated[int, typer.Option(help="Number of resource rows to include.")] = 10,
) -> None:
    """Print the coordinate table used for a variant as JSON."""

    resolved = BlankVariant.parse(variant)
    if resolved.value.lower() != variant.strip().lower():
        typer.echo(
            f"WARNING: unknown variant {variant!r}, using {resolved.value}. "
            f"Supported: {', '.join(list_supported_variants())}",
            err=True,
        )
    payload = layout_to_payload(coordinates_for(resolved, rows))
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _expand_with_confirmation(
    text: str,
    groups: list[SavedGroup],
    current: ResourceSelection,
    *,
    season: tuple[str, str],
    confirmed: bool,
) -> ResourceSelection:
    try:
        return expand(text, groups, current, confirm_truncation=confirmed, season=season)
    except TruncationConfirmationRequired as exc:
        if not typer.confirm(str(exc), default=False):
            raise
        return expand(text, groups, current, confirm_truncation=True, season=season)


def _load_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{label} file must be valid JSON: {path}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"{label} JSON must be an object: {path}")
    return raw


def _build_form_values(form_raw: dict[str, Any], store: SettingsStore | None) -> FormValues:
    if store is None:
        return FormValues.model_validate(form_raw)
    defaults = store.form_defaults().model_dump(mode="json", by_alias=True, exclude_defaults=True)
    return FormValues.model_validate({**defaults, **form_raw})


def _form_variant(form_raw: dict[str, Any], groups: list[SavedGroup]) -> BlankVariant:
    if "blankType" in form_raw:
        return BlankVariant.parse(form_raw["blankType"])
    return initial_variant(groups)


def _resolve_variant(
    variant: str | None, form_raw: dict[str, Any], store: SettingsStore | None
) -> BlankVariant:
    if variant is not None:
        return BlankVariant.parse(variant)
    groups = store.saved_groups() if store is not None else []
    return _form_variant(form_raw, groups)


def _voucher_number(output: RenderOutput) -> str:
    entries = output.report.for_field("voucher_number")
    return entries[0].text if entries else ""


def _safe_write_fallback(
    paths: OutputPaths,
    error_type: str,
    error_message: str,
    stage: str,
    detail: dict[str, Any] | None = None,
) -> None:
    try:
        write_fallback_json_atomic(
            paths,
            error_type=error_type,
            error_message=error_message,
            stage=stage,
            detail=detail,
        )
    except Exception:  # noqa: BLE001
        pass


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
