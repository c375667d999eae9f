"""CLI I/O helpers for atomic output writing."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from huntprint.render.models import RenderOutput


@dataclass(frozen=True)
class OutputPaths:
    """Fixed output artifact paths for single run."""

    pdf: Path
    stamp_report: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Build fixed output file paths under out_dir."""

    return OutputPaths(
        pdf=out_dir / "out.pdf",
        stamp_report=out_dir / "out.stamp_report.json",
    )


def existing_output_files(paths: OutputPaths) -> list[Path]:
    """Return existing output files among fixed artifact paths."""

    return [path for path in (paths.pdf, paths.stamp_report) if path.exists()]


def write_render_output_atomic(paths: OutputPaths, output: RenderOutput) -> None:
    """Write the PDF and its stamp report using temporary files + replace."""

    paths.pdf.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_bytes(paths.pdf, output.pdf_bytes)
    payload = output.report.model_dump(mode="json")
    payload["variant"] = output.variant.value
    _atomic_write_json(paths.stamp_report, payload)


def write_fallback_json_atomic(
    paths: OutputPaths,
    *,
    error_type: str,
    error_message: str,
    stage: str,
    detail: dict[str, Any] | None = None,
) -> None:
    """Write a stamp report carrying only the error block."""

    payload = {
        "entries": [],
        "summary": {"page_count": 0, "drawn_count": 0, "skipped_count": 0},
        "error": {
            "error_type": error_type,
            "error_message": error_message,
            "stage": stage,
            "detail": detail or {},
        },
    }
    paths.stamp_report.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(paths.stamp_report, payload)


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write a human-editable JSON document atomically."""

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(path, payload, indent=2)


def _atomic_write_json(path: Path, payload: dict[str, Any], indent: int | None = None) -> None:
    separators = None if indent else (",", ":")
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        json.dump(
            payload,
            tmp,
            ensure_ascii=False,
            sort_keys=True,
            indent=indent,
            separators=separators,
        )

    tmp_path.replace(path)


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        tmp_path.write_bytes(data)
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise
