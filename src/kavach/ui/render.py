"""Render helpers for the kavach CLI."""

from __future__ import annotations

from typing import Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from kavach.enrichment.task import EnrichmentState
from kavach.enrichment.types import EnrichmentResult
from kavach.ui.console import get_console
from kavach.wizard.steps import BranchContent, FieldSpec, WizardDefinition
from kavach.wizard.types import CompletionRecord


def _panel(body, title: str, *, border_style: str = "border") -> Panel:
    return Panel(
        body,
        title=Text(title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style=border_style,
        padding=(0, 2),
        expand=True,
    )


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    console.print(_panel(Group(Text(subtitle, style="subtitle")), title))
    console.print()


def render_step_header(
    step_idx: int | None,
    step_total: int | None,
    title: str,
    description: str,
) -> None:
    console = get_console()
    content = []
    if step_idx is not None and step_total is not None:
        panel_title = f"Step {step_idx}/{step_total} · {title}"
        content.append(ProgressBar(total=step_total, completed=step_idx, complete_style="accent", style="border"))
    else:
        panel_title = title
    if description:
        content.append(Text(description, style="subtitle"))
    console.print(_panel(Group(*content), panel_title))


def render_info(text: str) -> None:
    console = get_console()
    console.print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    console = get_console()
    console.print(text, style="warning", markup=False)


def render_notice(text: str) -> None:
    console = get_console()
    panel = Panel(
        Text(text, style="warning"),
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_success(text: str) -> None:
    console = get_console()
    console.print(text, style="success", markup=False)


def render_error(text: str) -> None:
    console = get_console()
    panel = Panel(
        Text(text, style="error"),
        box=box.ROUNDED,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Summary") -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))

    console.print()
    console.print(_panel(table, title))


def render_validation_panel(title: str, issues: Sequence[str], *, style: str) -> None:
    console = get_console()
    lines = [Text(f"- {issue}", style=style) for issue in issues]
    console.print(_panel(Group(*lines), title))


def render_branch_content(branches: Sequence[BranchContent]) -> None:
    console = get_console()
    for branch in branches:
        console.print(_panel(Text(branch.body, style="value"), branch.title, border_style="accent"))


def render_choices(spec: FieldSpec) -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="accent", no_wrap=True, justify="right")
    table.add_column(style="value")
    table.add_column(style="subtitle")
    for index, item in enumerate(spec.choices, start=1):
        table.add_row(f"{index:>2}", item.name, item.description)
    console.print(Text(spec.display_label, style="label"))
    console.print(table)


def render_enrichment(state: EnrichmentState, result: EnrichmentResult | None, error: str | None) -> None:
    if state is EnrichmentState.RUNNING:
        render_info("Analyzing evidence in the background...")
    elif state is EnrichmentState.COMPLETE and result is not None:
        console = get_console()
        text = Text()
        text.append(f"{result.label}", style=f"tier.{result.tier}")
        text.append(f"  score {result.score}/100 · {result.evidence_count} file(s)", style="value")
        console.print(_panel(text, "AI Threat Analysis"))
    elif state is EnrichmentState.FAILED:
        render_warning(f"Evidence analysis failed: {error or 'unknown error'}. You can still submit.")


def render_wizard_outline(definition: WizardDefinition) -> None:
    console = get_console()
    table = Table(show_header=True, box=box.SIMPLE, pad_edge=False)
    table.add_column("Step", style="accent", no_wrap=True)
    table.add_column("Title", style="value")
    table.add_column("Fields", style="label")
    for step in definition.steps:
        names = []
        for spec in step.fields:
            names.append(f"{spec.name}*" if spec.required else spec.name)
        table.add_row(str(step.position), step.title, ", ".join(names) or "-")
    console.print(_panel(table, f"{definition.title} ({definition.kind}, {definition.id_prefix})"))


def render_receipt_panel(record: CompletionRecord, *, saved_to: str | None = None) -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")
    table.add_row("Reference", Text(record.record_id, style="accent"))
    table.add_row("Wizard", record.wizard)
    table.add_row("Submitted", record.submitted_at.strftime("%Y-%m-%d %H:%M:%S UTC"))
    role = record.fields.get("reporterRole") or record.fields.get("role")
    if role:
        table.add_row("Role", str(role))
    if record.enrichment is not None:
        table.add_row("Threat level", Text(record.enrichment.label, style=f"tier.{record.enrichment.tier}"))
        table.add_row("Score", f"{record.enrichment.score}/100")
        table.add_row("Evidence", str(record.enrichment.evidence_count))
    items = [table]
    if saved_to:
        items.extend([Text(""), Text(f"Saved: {saved_to}", style="path")])
    console.print()
    console.print(_panel(Group(*items), "Submitted", border_style="success"))
