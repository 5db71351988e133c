from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kavach.cli import app
from kavach.config import default_engine_config
from kavach.storage import read_json, write_json

runner = CliRunner()


@pytest.fixture(autouse=True)
def _workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _answers(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def test_wizard_list_and_show() -> None:
    listing = runner.invoke(app, ["wizard", "list"])
    assert listing.exit_code == 0
    assert "incident" in listing.output
    assert "family" in listing.output

    shown = runner.invoke(app, ["wizard", "show", "incident"])
    assert shown.exit_code == 0
    assert "Upload" in shown.output

    missing = runner.invoke(app, ["wizard", "show", "payroll"])
    assert missing.exit_code == 1


def test_config_init_refuses_overwrite(tmp_path: Path) -> None:
    target = tmp_path / "kavach.config.json"
    first = runner.invoke(app, ["config", "init", "--path", str(target)])
    assert first.exit_code == 0
    assert read_json(target) == default_engine_config()

    second = runner.invoke(app, ["config", "init", "--path", str(target)])
    assert second.exit_code == 1
    forced = runner.invoke(app, ["config", "init", "--path", str(target), "--force"])
    assert forced.exit_code == 0


def test_family_wizard_writes_receipt(tmp_path: Path) -> None:
    receipt = tmp_path / "receipt.json"
    answers = _answers(
        "3", "",
        "Paid a fee for a fake canteen card", "Yesterday", "",
        "normal", "Check whether this is a scam", "",
        "spouse@example.in", "",
    )
    result = runner.invoke(app, ["wizard", "run", "family", "--receipt", str(receipt)], input=answers)

    assert result.exit_code == 0, result.output
    assert "Don't worry" in result.output
    payload = json.loads(receipt.read_text(encoding="utf-8"))
    assert payload["wizard"] == "family"
    assert payload["record_id"].startswith("FAM-")
    assert payload["fields"]["issueType"] == "scam-attempt"
    assert payload["fields"]["urgency"] == "normal"
    assert payload["enrichment"] is None


def test_incident_wizard_enriches_attached_evidence(tmp_path: Path) -> None:
    config = default_engine_config()
    config["enrichment"]["delay_s"] = 0
    write_json(tmp_path / "kavach.config.json", config)
    screenshot = tmp_path / "whatsapp.png"
    screenshot.write_bytes(b"\x89PNG" + b"\x00" * 64)
    receipt = tmp_path / "receipt.json"
    answers = _answers(
        "honeytrap", "",
        "Profile claiming to be a nurse asked about postings", "high", "", "", "",
        str(screenshot), "",
        "", "y", "",
    )
    result = runner.invoke(
        app,
        ["wizard", "run", "incident", "--role", "serving", "--receipt", str(receipt)],
        input=answers,
    )

    assert result.exit_code == 0, result.output
    payload = read_json(receipt)
    assert payload["record_id"].startswith("RPT-")
    assert payload["fields"]["reporterRole"] == "serving"
    assert payload["fields"]["evidence"] == [{"name": "whatsapp.png", "size": 68, "kind": "image"}]
    assert 60 <= payload["enrichment"]["score"] <= 100
    assert payload["enrichment"]["evidence_count"] == 1


def test_incident_cancel_saves_nothing(tmp_path: Path) -> None:
    receipt = tmp_path / "receipt.json"
    result = runner.invoke(
        app,
        ["wizard", "run", "incident", "--receipt", str(receipt)],
        input=_answers("phishing", "cancel"),
    )
    assert result.exit_code == 0
    assert "cancelled" in result.output
    assert not receipt.exists()


def test_unknown_role_exits_with_error() -> None:
    result = runner.invoke(app, ["wizard", "run", "incident", "--role", "commander"])
    assert result.exit_code == 1
    assert "Unknown role" in result.output


def test_portal_signs_in_to_role_dashboard() -> None:
    answers = _answers(
        "", "IC-45678K", "",
        "officer@army.gov.in", "+91 98765 43210", "",
        "123456", "",
        "Kargil", "", "",
        "",
        "n",
    )
    result = runner.invoke(app, ["portal", "--role", "veteran"], input=answers)

    assert result.exit_code == 0, result.output
    assert "Veteran Dashboard" in result.output
    assert "No report filed" in result.output
