"""Textual screens for the Kavach portal."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import Button, Checkbox, Input, Label, OptionList, ProgressBar, Select, Static

from kavach.config import build_analyzer
from kavach.enrichment.client import EvidenceAnalyzer
from kavach.enrichment.task import EnrichmentState
from kavach.enrichment.types import EvidenceItem
from kavach.routing import Role
from kavach.storage import write_json
from kavach.wizard.controller import WorkflowController
from kavach.wizard.steps import FieldSpec, WizardDefinition
from kavach.wizard.types import Abandoned, Completed, CompletionRecord, EnrichmentUpdated, WizardEvent

_ROLE_LABELS = {
    Role.SERVING: "Serving Personnel · active duty",
    Role.VETERAN: "Veteran · retired service member",
    Role.FAMILY: "Family Member · spouse, child or parent",
}


class BaseScreen(Screen):
    """Base screen with a surface container."""

    def __init__(self, state) -> None:  # type: ignore[no-untyped-def]
        super().__init__()
        self.state = state


def _footer_hint() -> Static:
    return Static("tab move · enter confirm · q quit", id="key-hint")


class RoleScreen(BaseScreen):
    def compose(self) -> ComposeResult:
        surface = Container(id="role-surface", classes="surface")
        surface.border_title = "Who are you?"
        with surface:
            yield Label("Secure cyber incident reporting for the defence community", id="role-subtitle")
            self.roles = OptionList(*(_ROLE_LABELS[role] for role in Role), id="role-list")
            yield self.roles
            yield Static("Press Enter to sign in", id="role-hint")
        yield _footer_hint()

    def on_mount(self) -> None:
        self.roles.highlighted = 0
        self.roles.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        role = list(Role)[event.option_index]
        self.app.show_wizard("auth", {"role": role.value})


class WizardScreen(BaseScreen):
    """Renders any wizard definition; the Continue button follows the gate."""

    def __init__(
        self,
        state,  # type: ignore[no-untyped-def]
        definition: WizardDefinition,
        *,
        initial: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(state)
        self.definition = definition
        self.analyzer: EvidenceAnalyzer | None = None
        if definition.evidence_field is not None:
            self.analyzer = build_analyzer(state.config)
        self.controller = WorkflowController(
            definition,
            analyzer=self.analyzer,
            initial=initial,
            on_event=self._on_wizard_event,
        )
        self._field_ids: dict[str, str] = {}
        self._closing = False

    def compose(self) -> ComposeResult:
        self.surface = Container(id="wizard-surface", classes="surface")
        self.surface.border_title = self.definition.title
        with self.surface:
            self.progress = ProgressBar(total=self.controller.total, show_eta=False, id="wizard-progress")
            yield self.progress
            self.description = Static("", id="wizard-description")
            yield self.description
            self.fields = Vertical(id="wizard-fields")
            yield self.fields
            self.branches = Static("", id="wizard-branches")
            yield self.branches
            self.enrichment = Static("", id="wizard-enrichment")
            yield self.enrichment
            self.message = Static("", id="wizard-message")
            yield self.message
            with Horizontal(id="wizard-nav"):
                yield Button("Back", id="wizard-back")
                yield Button("Cancel", id="wizard-cancel", variant="error")
                self.continue_button = Button("Continue", id="wizard-continue", variant="primary")
                yield self.continue_button
        yield _footer_hint()

    async def on_mount(self) -> None:
        for note in self.definition.notes:
            self.notify(escape(note), severity="warning")
        await self._show_step()

    async def on_unmount(self) -> None:
        self._closing = True
        self.controller.cancel()
        if self.analyzer is not None:
            await self.analyzer.aclose()

    async def _show_step(self) -> None:
        step = self.controller.current_step
        self.surface.border_title = (
            f"{self.definition.title} · Step {self.controller.position}/{self.controller.total} · {step.title}"
        )
        self.progress.update(progress=self.controller.position)
        self.description.update(step.description)
        self.message.update("")
        self.continue_button.label = "Submit" if self.controller.position == self.controller.total else "Continue"
        await self.fields.remove_children()
        self._field_ids = {}
        widgets: list[Widget] = []
        for spec in step.fields:
            widgets.extend(self._field_widgets(spec))
        if widgets:
            await self.fields.mount_all(widgets)
        self._refresh()

    def _field_widgets(self, spec: FieldSpec) -> list[Widget]:
        widget_id = f"field-{self.controller.position}-{spec.name}"
        self._field_ids[widget_id] = spec.name
        current = self.controller.value(spec.name)
        label = spec.display_label if spec.required else f"{spec.display_label} (optional)"
        if spec.kind == "choice":
            options = [(item.name, item.value) for item in spec.choices]
            value = current if current in spec.choice_values else Select.BLANK
            return [Label(label), Select(options, prompt=spec.display_label, value=value, id=widget_id)]
        if spec.kind == "flag":
            return [Checkbox(spec.display_label, value=bool(current), id=widget_id)]
        if spec.kind == "evidence":
            return [
                Label(label),
                Input(placeholder=spec.hint or "Path to file", id=widget_id),
                Horizontal(
                    Button("Attach", id="evidence-attach"),
                    Button("Remove last", id="evidence-remove"),
                    id="evidence-actions",
                ),
                Static(_evidence_text(current or ()), id="evidence-list"),
            ]
        return [Label(label), Input(value=str(current or ""), placeholder=spec.hint, id=widget_id)]

    def on_input_changed(self, event: Input.Changed) -> None:
        name = self._field_ids.get(event.input.id or "")
        if name is None or name == self.definition.evidence_field or not self.controller.active:
            return
        self.controller.set_field(name, event.value)
        self._refresh()

    def on_select_changed(self, event: Select.Changed) -> None:
        name = self._field_ids.get(event.select.id or "")
        if name is None or not self.controller.active:
            return
        self.controller.set_field(name, event.value if isinstance(event.value, str) else "")
        self._refresh()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        name = self._field_ids.get(event.checkbox.id or "")
        if name is None or not self.controller.active:
            return
        self.controller.set_field(name, event.value)
        self._refresh()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "wizard-continue":
            outcome = self.controller.next()
            if outcome == "advanced":
                await self._show_step()
            elif outcome == "blocked":
                self.message.update(f"Check: {', '.join(self.controller.missing_fields())}")
        elif button_id == "wizard-back":
            if self.controller.back() == "retreated":
                await self._show_step()
        elif button_id == "wizard-cancel":
            self.controller.cancel()
        elif button_id == "evidence-attach":
            self._attach_from_input()
        elif button_id == "evidence-remove":
            if self.controller.value(self.definition.evidence_field or ""):
                self.controller.remove_evidence_item(-1)
                self._refresh()

    def _attach_from_input(self) -> None:
        widget_id = f"field-{self.controller.position}-{self.definition.evidence_field}"
        entry = self.query_one(f"#{widget_id}", Input)
        items: list[EvidenceItem] = []
        for raw in entry.value.split(","):
            raw = raw.strip()
            if not raw:
                continue
            try:
                items.append(EvidenceItem.from_path(Path(raw).expanduser()))
            except OSError as exc:
                self.message.update(Text(f"Skipping {raw}: {exc.strerror or exc}"))
        entry.value = ""
        self.controller.attach_evidence(items)
        self._refresh()

    def _refresh(self) -> None:
        if not self.controller.active:
            return
        self.continue_button.disabled = not self.controller.can_advance()
        branches = self.controller.visible_branches()
        self.branches.update(Text("\n\n".join(f"{branch.title}\n{branch.body}" for branch in branches)))
        if self.definition.evidence_field is not None:
            for widget in self.query("#evidence-list"):
                widget.update(_evidence_text(self.controller.value(self.definition.evidence_field) or ()))
        self._render_enrichment(self.controller.enrichment_state, self.controller.enrichment_error)

    def _render_enrichment(self, state: EnrichmentState, error: str | None) -> None:
        result = self.controller.enrichment
        if state is EnrichmentState.RUNNING:
            self.enrichment.update("Analyzing evidence...")
        elif state is EnrichmentState.COMPLETE and result is not None:
            self.enrichment.update(f"AI Threat Analysis: {result.label} · score {result.score}/100")
        elif state is EnrichmentState.FAILED:
            self.enrichment.update(f"Evidence analysis failed: {error}. You can still submit.")
        else:
            self.enrichment.update("")

    def _on_wizard_event(self, event: WizardEvent) -> None:
        if self._closing:
            return
        if isinstance(event, EnrichmentUpdated):
            self._render_enrichment(event.state, event.error)
        elif isinstance(event, Completed):
            self._closing = True
            if event.record.wizard == "auth":
                self.app.show_dashboard(event.record)
            else:
                self.app.show_receipt(event.record)
        elif isinstance(event, Abandoned):
            self._closing = True
            self.app.pop_screen()


class DashboardScreen(BaseScreen):
    def compose(self) -> ComposeResult:
        dashboard = self.state.dashboard
        surface = Container(id="dashboard-surface", classes="surface")
        surface.border_title = dashboard.title
        with surface:
            yield Static(f"Signed in as {dashboard.role.value} · session {self.state.session_id}", id="dashboard-status")
            with Horizontal(id="dashboard-actions"):
                yield Button("Report an incident", id="dashboard-report", variant="primary")
                yield Button("Sign out", id="dashboard-signout")
        yield _footer_hint()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        dashboard = self.state.dashboard
        if event.button.id == "dashboard-report":
            self.app.show_wizard(dashboard.report_wizard, dashboard.report_initial())
        elif event.button.id == "dashboard-signout":
            self.state.dashboard = None
            self.state.session_id = None
            self.app.pop_screen()


class ReceiptScreen(BaseScreen):
    def __init__(self, state, record: CompletionRecord) -> None:  # type: ignore[no-untyped-def]
        super().__init__(state)
        self.record = record

    def compose(self) -> ComposeResult:
        surface = Container(id="receipt-surface", classes="surface")
        surface.border_title = "Report Submitted"
        with surface:
            yield Static(_receipt_text(self.record), id="receipt")
            self.saved = Static("", id="receipt-saved")
            yield self.saved
            with Horizontal(id="receipt-actions"):
                yield Button("Save receipt", id="receipt-save")
                yield Button("Back to dashboard", id="receipt-back", variant="primary")
        yield _footer_hint()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "receipt-save":
            path = Path(f"{self.record.record_id}.json")
            write_json(path, self.record.to_dict())
            self.saved.update(f"Saved to {path}")
        elif event.button.id == "receipt-back":
            self.app.pop_screen()


def _evidence_text(items: tuple[EvidenceItem, ...]) -> Text:
    if not items:
        return Text("No files attached.")
    return Text(
        "\n".join(
            f"{index}. {item.name} · {item.kind.value} · {item.size_mb:.2f} MB" for index, item in enumerate(items, start=1)
        )
    )


def _receipt_text(record: CompletionRecord) -> Text:
    lines = [
        f"Reference: {record.record_id}",
        f"Submitted: {record.submitted_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
    ]
    role = record.fields.get("reporterRole")
    if role:
        lines.append(f"Reporter: {role}")
    if record.enrichment is not None:
        lines.append(f"Threat level: {record.enrichment.label} ({record.enrichment.score}/100)")
        lines.append(f"Evidence analyzed: {record.enrichment.evidence_count}")
    lines.append("")
    lines.append("Our team will review your report and contact you with guidance.")
    return Text("\n".join(lines))
