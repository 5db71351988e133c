"""Textual TUI entrypoint for Kavach."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from rich.markup import escape
from textual.app import App

from kavach.config import EngineConfig, load_dotenv, load_engine_config
from kavach.routing import Dashboard, route_completion
from kavach.ui.screens import DashboardScreen, ReceiptScreen, RoleScreen, WizardScreen
from kavach.wizard.steps import get_wizard
from kavach.wizard.types import CompletionRecord


@dataclass
class PortalState:
    config: EngineConfig
    dashboard: Dashboard | None = None
    session_id: str | None = None


class KavachApp(App):
    CSS_PATH = "styles.tcss"
    TITLE = "KAVACH"
    BINDINGS = [("q", "quit", "Quit")]

    def __init__(self, config: EngineConfig | None = None) -> None:
        super().__init__()
        if config is None:
            load_dotenv()
            config = load_engine_config()
        self.state = PortalState(config=config)

    async def on_mount(self) -> None:
        await self.push_screen(RoleScreen(self.state))

    def show_wizard(self, kind: str, initial: Mapping[str, Any] | None = None) -> None:
        try:
            screen = WizardScreen(self.state, get_wizard(kind), initial=initial)
        except ValueError as exc:
            # Bad analyzer settings; keep the current screen.
            self.notify(escape(f"Cannot start {kind}: {exc}"), severity="error")
            return
        self.push_screen(screen)

    def show_dashboard(self, auth_record: CompletionRecord) -> None:
        self.state.dashboard = route_completion(auth_record)
        self.state.session_id = auth_record.record_id
        self.switch_screen(DashboardScreen(self.state))

    def show_receipt(self, record: CompletionRecord) -> None:
        self.switch_screen(ReceiptScreen(self.state, record))
