"""Interactive console flow that drives a WorkflowController."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Mapping

import typer

from kavach.enrichment.client import EvidenceAnalyzer
from kavach.enrichment.task import EnrichmentState
from kavach.enrichment.types import EvidenceItem
from kavach.ui.progress import status_spinner
from kavach.ui.render import (
    render_branch_content,
    render_choices,
    render_enrichment,
    render_info,
    render_notice,
    render_step_header,
    render_success,
    render_warning,
)
from kavach.wizard.controller import WorkflowController
from kavach.wizard.steps import BranchContent, FieldSpec, WizardDefinition, describe_rules
from kavach.wizard.types import Abandoned, Completed, CompletionRecord, EnrichmentUpdated, WizardEvent


async def run_wizard(
    definition: WizardDefinition,
    *,
    analyzer: EvidenceAnalyzer | None = None,
    initial: Mapping[str, Any] | None = None,
) -> CompletionRecord | None:
    """Prompt through ``definition`` until the session is submitted or abandoned.

    Prompts block in a worker thread so a running enrichment keeps making
    progress on the event loop while the user types.
    """
    completed: list[CompletionRecord] = []

    def on_event(event: WizardEvent) -> None:
        if isinstance(event, Completed):
            completed.append(event.record)
        elif isinstance(event, Abandoned):
            render_warning(f"{definition.title} cancelled at step {event.position}. Nothing was saved.")
        elif isinstance(event, EnrichmentUpdated):
            render_enrichment(event.state, event.result, event.error)

    controller = WorkflowController(definition, analyzer=analyzer, initial=initial, on_event=on_event)
    for note in definition.notes:
        render_notice(note)

    while controller.active:
        step = controller.current_step
        render_step_header(controller.position, controller.total, step.title, step.description)
        shown = _show_new_branches(controller, [])
        for spec in step.fields:
            await _collect_field(controller, spec)
            shown = _show_new_branches(controller, shown)
        await _navigate(controller)

    if completed:
        render_success(f"{definition.title} submitted.")
        return completed[0]
    return None


async def _navigate(controller: WorkflowController) -> None:
    if not controller.can_advance():
        missing = ", ".join(controller.missing_fields())
        render_warning(f"Cannot continue yet. Check: {missing}.")
        for message in describe_rules(controller.current_step):
            render_info(message)
        action = await _prompt_choice("Action", ["retry", "back", "cancel"], "retry")
    else:
        last = controller.position == controller.total
        action = await _prompt_choice("Action", ["submit" if last else "next", "back", "cancel"], "submit" if last else "next")
        if action == "submit" and controller.enrichment_state is EnrichmentState.RUNNING:
            if await _prompt_yes_no("Evidence analysis is still running. Wait for it?", default=True):
                with status_spinner("Analyzing evidence..."):
                    await controller.wait_for_enrichment()

    if action in {"next", "submit"}:
        controller.next()
    elif action == "back":
        controller.back()
    elif action == "cancel":
        controller.cancel()


async def _collect_field(controller: WorkflowController, spec: FieldSpec) -> None:
    current = controller.value(spec.name)
    if spec.kind == "choice":
        render_choices(spec)
        value = await _prompt_catalog_choice(spec, current)
        controller.set_field(spec.name, value)
    elif spec.kind == "flag":
        controller.set_field(spec.name, await _prompt_yes_no(spec.display_label, default=bool(current)))
    elif spec.kind == "evidence":
        await _collect_evidence(controller, spec)
    else:
        suffix = "" if spec.required else " (optional)"
        label = f"{spec.display_label}{suffix}"
        if spec.hint:
            label = f"{label} [{spec.hint}]"
        response = await asyncio.to_thread(
            typer.prompt, label, default=current or "", show_default=bool(current)
        )
        controller.set_field(spec.name, response.strip())


async def _collect_evidence(controller: WorkflowController, spec: FieldSpec) -> None:
    attached = controller.value(spec.name) or ()
    for index, item in enumerate(attached, start=1):
        render_info(f"{index}. {item.name} ({item.kind.value}, {item.size_mb:.2f} MB)")
    if attached:
        response = await asyncio.to_thread(
            typer.prompt, "Remove file # (blank to keep all)", default="", show_default=False
        )
        if response.strip():
            try:
                removed = controller.remove_evidence_item(int(response) - 1)
            except (ValueError, IndexError):
                render_warning(f"No attached file numbered {response.strip()}.")
            else:
                render_info(f"Removed {removed.name}.")
    response = await asyncio.to_thread(
        typer.prompt, f"{spec.display_label} [{spec.hint}]", default="", show_default=False
    )
    items: list[EvidenceItem] = []
    for raw in response.split(","):
        raw = raw.strip()
        if not raw:
            continue
        path = Path(raw).expanduser()
        try:
            items.append(EvidenceItem.from_path(path))
        except OSError as exc:
            render_warning(f"Skipping {raw}: {exc.strerror or exc}")
    controller.attach_evidence(items)


async def _prompt_catalog_choice(spec: FieldSpec, current: Any) -> str:
    values = list(spec.choice_values)
    default = current if current in values else next(
        (item.value for item in spec.choices if item.is_default), ""
    )
    while True:
        response = await asyncio.to_thread(
            typer.prompt, f"{spec.display_label} (number or value)", default=default, show_default=bool(default)
        )
        normalized = response.strip().lower()
        if normalized.isdigit() and 1 <= int(normalized) <= len(values):
            return values[int(normalized) - 1]
        for value in values:
            if value.lower() == normalized:
                return value
        render_warning(f"Invalid choice: {response}. Choose 1-{len(values)} or one of {', '.join(values)}.")


async def _prompt_choice(prompt: str, choices: list[str], default: str) -> str:
    normalized_choices = {choice.lower(): choice for choice in choices}
    while True:
        response = await asyncio.to_thread(typer.prompt, f"{prompt} ({'/'.join(choices)})", default=default)
        normalized = response.strip().lower()
        if normalized in normalized_choices:
            return normalized_choices[normalized]
        render_warning(f"Invalid choice: {response}. Choose from {', '.join(choices)}.")


async def _prompt_yes_no(prompt: str, default: bool = False) -> bool:
    default_value = "y" if default else "n"
    while True:
        response = await asyncio.to_thread(typer.prompt, f"{prompt} (y/n)", default=default_value)
        normalized = response.strip().lower()
        if normalized in {"y", "yes"}:
            return True
        if normalized in {"n", "no"}:
            return False
        render_warning("Please enter y or n.")


def _show_new_branches(controller: WorkflowController, shown: list[BranchContent]) -> list[BranchContent]:
    visible = controller.visible_branches()
    fresh = [branch for branch in visible if branch not in shown]
    if fresh:
        render_branch_content(fresh)
    return visible
