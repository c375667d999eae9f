from __future__ import annotations

import io
import json
from pathlib import Path

from pypdf import PdfReader
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen.canvas import Canvas
from typer.testing import CliRunner

from apps.cli.main import app

runner = CliRunner()


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def _write_inputs(root: Path, **form_overrides: object) -> tuple[Path, Path]:
    hunter = root / "hunter.json"
    form = root / "form.json"
    _write_json(
        hunter,
        {
            "fullName": "Иванов Иван Иванович",
            "series": "78",
            "number": "014843",
            "issueDate": "2022-03-01",
        },
    )
    form_payload: dict[str, object] = {
        "huntingPlace": "Угодье Северное",
        "issueDate": "2025-11-05",
        "resources": [{"resource": "Гусь", "dateFrom": "2025-09-15", "dateTo": "2026-02-28"}],
    }
    form_payload.update(form_overrides)
    _write_json(form, form_payload)
    return hunter, form


def _write_background(path: Path) -> None:
    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=landscape(A4))
    canvas.showPage()
    canvas.save()
    path.write_bytes(buffer.getvalue())


def _render_args(hunter: Path, form: Path, out_dir: Path, *extra: str) -> list[str]:
    args = ["render", "--hunter", str(hunter), "--form", str(form), "--out-dir", str(out_dir)]
    return args + list(extra)


def test_cli_render_permit_writes_pdf_and_report(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _render_args(hunter, form, out_dir, "--variant", "Pink"))

    assert result.exit_code == 0, result.output
    assert "INFO: variant=Pink" in result.output
    assert "INFO: success" in result.output
    assert len(PdfReader(out_dir / "out.pdf").pages) == 2
    report = json.loads((out_dir / "out.stamp_report.json").read_text(encoding="utf-8"))
    assert report["variant"] == "Pink"
    assert report["summary"]["page_count"] == 2
    assert report["summary"]["skipped_count"] == 0


def test_cli_render_takes_variant_from_form_blank_type(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path, blankType="Blue")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _render_args(hunter, form, out_dir))

    assert result.exit_code == 0, result.output
    assert "INFO: variant=Blue" in result.output


def test_cli_render_defaults_to_first_saved_group_blank_type(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)
    store = tmp_path / "settings.json"
    _write_json(
        store,
        {
            "organizationName": "ООО Охотхозяйство",
            "savedGroups": [{"name": "Птица", "blankType": "Pink"}],
        },
    )
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _render_args(hunter, form, out_dir, "--store", str(store)))

    assert result.exit_code == 0, result.output
    assert "INFO: variant=Pink" in result.output
    report = json.loads((out_dir / "out.stamp_report.json").read_text(encoding="utf-8"))
    texts = {entry["field_name"]: entry["text"] for entry in report["entries"]}
    assert texts["organization_name"] == "ООО Охотхозяйство"


def test_cli_render_voucher_advances_store(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)
    store = tmp_path / "settings.json"
    _write_json(store, {"voucherNumber": "0012"})
    background = tmp_path / "voucher.pdf"
    _write_background(background)
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _render_args(
            hunter,
            form,
            out_dir,
            "--variant",
            "Voucher",
            "--store",
            str(store),
            "--background",
            str(background),
        ),
    )

    assert result.exit_code == 0, result.output
    assert "INFO: voucher number=0012" in result.output
    assert json.loads(store.read_text(encoding="utf-8"))["voucherNumber"] == "0013"
    assert len(PdfReader(out_dir / "out.pdf").pages) == 1


def test_cli_render_voucher_with_bad_background_returns_5(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)
    store = tmp_path / "settings.json"
    _write_json(store, {"voucherNumber": "0012"})
    background = tmp_path / "voucher.pdf"
    background.write_bytes(b"not a pdf")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _render_args(
            hunter,
            form,
            out_dir,
            "--variant",
            "Voucher",
            "--store",
            str(store),
            "--background",
            str(background),
        ),
    )

    assert result.exit_code == 5
    assert "ERROR: voucher background" in result.output
    assert json.loads(store.read_text(encoding="utf-8"))["voucherNumber"] == "0012"
    assert not (out_dir / "out.pdf").exists()
    report = json.loads((out_dir / "out.stamp_report.json").read_text(encoding="utf-8"))
    assert report["error"]["error_type"] == "BackgroundTemplateError"


def test_cli_render_voucher_without_background_returns_5(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)

    result = runner.invoke(
        app, _render_args(hunter, form, tmp_path / "out", "--variant", "Voucher")
    )

    assert result.exit_code == 5


def test_cli_render_invalid_form_json_returns_1(tmp_path: Path) -> None:
    hunter, _ = _write_inputs(tmp_path)
    form = tmp_path / "broken.json"
    form.write_text("{broken", encoding="utf-8")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _render_args(hunter, form, out_dir))

    assert result.exit_code == 1
    assert "invalid input at load_form" in result.output
    report = json.loads((out_dir / "out.stamp_report.json").read_text(encoding="utf-8"))
    assert report["error"]["stage"] == "load_form"


def test_cli_render_no_overwrite_refuses_existing_outputs(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "out.pdf").write_bytes(b"old")

    result = runner.invoke(app, _render_args(hunter, form, out_dir, "--no-overwrite"))

    assert result.exit_code == 1
    assert (out_dir / "out.pdf").read_bytes() == b"old"


def test_cli_render_conflicting_flags_return_1(tmp_path: Path) -> None:
    hunter, form = _write_inputs(tmp_path)

    result = runner.invoke(
        app, _render_args(hunter, form, tmp_path / "out", "--force", "--no-overwrite")
    )

    assert result.exit_code == 1
    assert "cannot be used together" in result.output


def test_cli_apply_group_rewrites_form_rows(tmp_path: Path) -> None:
    _, form = _write_inputs(tmp_path)
    store = tmp_path / "settings.json"
    _write_json(
        store,
        {
            "savedGroups": [
                {
                    "name": "Птица",
                    "animals": ["Гусь", "Утка", "Гусь"],
                    "dateFrom": "2025-09-15",
                    "dateTo": "2026-02-28",
                    "blankType": "Blue",
                }
            ]
        },
    )

    result = runner.invoke(
        app, ["apply-group", "--form", str(form), "--store", str(store), "--input", "птица"]
    )

    assert result.exit_code == 0, result.output
    assert "variant=Blue" in result.output
    updated = json.loads(form.read_text(encoding="utf-8"))
    assert [row["resource"] for row in updated["resources"]] == ["Гусь", "Утка", "Гусь"]
    assert updated["resources"][0]["dailyLimit"] == "б/о"
    assert updated["blankType"] == "Blue"
    assert updated["huntingPlace"] == "Угодье Северное"


def test_cli_apply_group_empty_list_returns_3(tmp_path: Path) -> None:
    _, form = _write_inputs(tmp_path)
    before = form.read_text(encoding="utf-8")

    result = runner.invoke(
        app,
        ["apply-group", "--form", str(form), "--store", str(tmp_path / "s.json"), "--input", ",;"],
    )

    assert result.exit_code == 3
    assert form.read_text(encoding="utf-8") == before


def test_cli_apply_group_declined_truncation_returns_4(tmp_path: Path) -> None:
    _, form = _write_inputs(tmp_path)
    before = form.read_text(encoding="utf-8")
    text = ",".join(f"Вид {index}" for index in range(12))

    result = runner.invoke(
        app,
        ["apply-group", "--form", str(form), "--store", str(tmp_path / "s.json"), "--input", text],
        input="n\n",
    )

    assert result.exit_code == 4
    assert "form unchanged with 1 rows" in result.output
    assert form.read_text(encoding="utf-8") == before


def test_cli_apply_group_confirmed_truncation_keeps_ten(tmp_path: Path) -> None:
    _, form = _write_inputs(tmp_path)
    text = ",".join(f"Вид {index}" for index in range(12))

    result = runner.invoke(
        app,
        ["apply-group", "--form", str(form), "--store", str(tmp_path / "s.json"), "--input", text],
        input="y\n",
    )

    assert result.exit_code == 0, result.output
    updated = json.loads(form.read_text(encoding="utf-8"))
    assert len(updated["resources"]) == 10
    assert updated["resources"][0]["dateFrom"] == "2025-09-15"
    assert updated["blankType"] == "Yellow"


def test_cli_layout_prints_coordinates(tmp_path: Path) -> None:
    result = runner.invoke(app, ["layout", "--variant", "Pink", "--rows", "2"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["variant"] == "Pink"
    assert len(payload["resources"]["rows"]) == 2
