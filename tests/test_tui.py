from __future__ import annotations

from pathlib import Path

import pytest
from textual.widgets import Button, Input, Select

from kavach.config import EngineConfig, EnrichmentConfig, build_engine_config
from kavach.enrichment.types import TierThresholds
from kavach.ui.app import KavachApp
from kavach.ui.screens import RoleScreen, WizardScreen


def _app(config: EngineConfig | None = None) -> KavachApp:
    return KavachApp(config=config or build_engine_config({"enrichment": {"delay_s": 0}}))


@pytest.mark.asyncio
async def test_continue_button_follows_gate() -> None:
    app = _app()
    async with app.run_test() as pilot:
        app.show_wizard("incident", {"reporterRole": "serving"})
        await pilot.pause()
        screen = app.screen
        assert isinstance(screen, WizardScreen)
        button = screen.query_one("#wizard-continue", Button)
        assert button.disabled
        assert not screen.controller.can_advance()

        screen.query_one("#field-1-threatType", Select).value = "phishing"
        await pilot.pause()

        assert screen.controller.value("threatType") == "phishing"
        assert not button.disabled
        button.press()
        await pilot.pause()
        assert screen.controller.position == 2
        assert screen.query_one("#wizard-continue", Button).disabled


@pytest.mark.asyncio
async def test_attached_file_name_with_brackets_renders(tmp_path: Path) -> None:
    scan = tmp_path / "scan[red].png"
    scan.write_bytes(b"\x89PNG" + b"\x00" * 16)
    app = _app()
    async with app.run_test() as pilot:
        app.show_wizard("incident", {"reporterRole": "veteran"})
        await pilot.pause()
        screen = app.screen
        assert isinstance(screen, WizardScreen)

        screen.query_one("#field-1-threatType", Select).value = "phishing"
        await pilot.pause()
        screen.query_one("#wizard-continue", Button).press()
        await pilot.pause()
        screen.query_one("#field-2-description", Input).value = "Spoofed posting order"
        screen.query_one("#field-2-urgency", Select).value = "high"
        await pilot.pause()
        screen.query_one("#wizard-continue", Button).press()
        await pilot.pause()

        assert screen.controller.position == 3
        screen.query_one("#field-3-evidence", Input).value = str(scan)
        screen.query_one("#evidence-attach", Button).press()
        await pilot.pause()
        await screen.controller.wait_for_enrichment()
        await pilot.pause()

        evidence = screen.controller.value("evidence")
        assert [item.name for item in evidence] == ["scan[red].png"]


@pytest.mark.asyncio
async def test_bad_analyzer_settings_keep_current_screen(monkeypatch: pytest.MonkeyPatch) -> None:
    config = EngineConfig("1.0", EnrichmentConfig(mode="remote"), TierThresholds())
    app = _app(config)
    notes: list[tuple[str, str]] = []
    async with app.run_test() as pilot:
        monkeypatch.setattr(
            app,
            "notify",
            lambda message, *, severity="information", **kwargs: notes.append((message, severity)),
        )
        app.show_wizard("incident", {})
        await pilot.pause()

        assert isinstance(app.screen, RoleScreen)
        assert len(notes) == 1
        assert notes[0][1] == "error"
        assert "KAVACH_ANALYZER_URL" in notes[0][0]

        app.show_wizard("family", {})
        await pilot.pause()
        assert isinstance(app.screen, WizardScreen)
