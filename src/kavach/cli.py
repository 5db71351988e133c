"""CLI entrypoint for kavach."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Mapping

import typer

from kavach.config import (
    build_analyzer,
    default_engine_config,
    load_dotenv,
    load_engine_config,
    resolve_config_path,
)
from kavach.routing import Role, UnknownRole, parse_role, route_completion
from kavach.storage import write_json
from kavach.ui.render import (
    render_banner,
    render_error,
    render_info,
    render_receipt_panel,
    render_success,
    render_summary_table,
    render_validation_panel,
    render_warning,
    render_wizard_outline,
)
from kavach.validation import load_and_validate_config
from kavach.wizard.flow import run_wizard as run_wizard_flow
from kavach.wizard.steps import WizardDefinition, get_wizard, list_wizards
from kavach.wizard.types import CompletionRecord

app = typer.Typer(add_completion=False, help="Guided cyber incident reporting for defence personnel and families.")
wizard_app = typer.Typer(add_completion=False, help="Inspect and run individual wizards.")
config_app = typer.Typer(add_completion=False, help="Config helpers and validation.")
app.add_typer(wizard_app, name="wizard")
app.add_typer(config_app, name="config")


@app.callback(invoke_without_command=True)
def root(ctx: typer.Context) -> None:
    """Kavach portal CLI."""
    load_dotenv()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("portal")
def portal(role: str = typer.Option(None, "--role", "-r", help="serving, veteran or family.")) -> None:
    """Sign in, land on your dashboard and optionally file a report."""
    render_banner("KAVACH", "Secure cyber incident reporting")
    if role is None:
        role = typer.prompt(f"Who are you? ({'/'.join(item.value for item in Role)})", default=Role.SERVING.value)
    selected = _parse_role_or_exit(role)

    auth = _run_session(get_wizard("auth"), initial={"role": selected.value})
    if auth is None:
        raise typer.Exit(code=0)
    dashboard = route_completion(auth)
    render_summary_table(
        {"Role": dashboard.role.value, "Session": auth.record_id, "Report wizard": dashboard.report_wizard},
        title=dashboard.title,
    )
    if not typer.confirm("Start a new report now?", default=True):
        render_info("Signed in. No report filed.")
        return
    record = _run_session(get_wizard(dashboard.report_wizard), initial=dashboard.report_initial())
    if record is not None:
        render_receipt_panel(record)


@wizard_app.command("list")
def wizard_list() -> None:
    """List the available wizards."""
    rows = [(definition.kind, f"{definition.title} · {definition.total} steps · {definition.id_prefix}") for definition in list_wizards()]
    render_summary_table(rows, title="Wizards")


@wizard_app.command("show")
def wizard_show(kind: str = typer.Argument(..., help="Wizard kind, e.g. incident.")) -> None:
    """Show the step table of a wizard."""
    definition = _get_wizard_or_exit(kind)
    render_wizard_outline(definition)
    for note in definition.notes:
        render_warning(note)


@wizard_app.command("run")
def wizard_run(
    kind: str = typer.Argument(..., help="Wizard kind, e.g. incident."),
    role: str = typer.Option(None, "--role", "-r", help="Role to pre-seed (auth role or incident reporter)."),
    receipt: str = typer.Option(None, "--receipt", help="Write the completion record as JSON to this path."),
) -> None:
    """Run a single wizard and print its receipt."""
    definition = _get_wizard_or_exit(kind)
    initial: dict[str, Any] = {}
    if role is not None:
        selected = _parse_role_or_exit(role)
        initial["role" if definition.kind == "auth" else "reporterRole"] = selected.value
    render_banner("KAVACH", definition.title)
    record = _run_session(definition, initial=initial)
    if record is None:
        return
    saved_to = None
    if receipt:
        receipt_path = Path(receipt)
        write_json(receipt_path, record.to_dict())
        saved_to = str(receipt_path)
    render_receipt_panel(record, saved_to=saved_to)


@config_app.command("validate")
def config_validate(path: str = typer.Option(None, "--path", "-p")) -> None:
    """Validate an engine config file."""
    config_path = resolve_config_path(Path(path) if path else None)
    result = load_and_validate_config(config_path)

    errors = [f"{issue.path}: {issue.message}" for issue in result.errors]
    warnings = [f"{issue.path}: {issue.message}" for issue in result.warnings]

    if errors:
        render_validation_panel("INVALID", errors, style="error")
        raise typer.Exit(code=1)

    if warnings:
        render_validation_panel("VALID (with warnings)", warnings, style="warning")
    else:
        render_validation_panel("VALID", ["No issues found."], style="success")


@config_app.command("init")
def config_init(
    path: str = typer.Option(None, "--path", "-p"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a default engine config file."""
    config_path = resolve_config_path(Path(path) if path else None)
    if config_path.exists() and not force:
        render_error(f"{config_path} already exists. Use --force to overwrite.")
        raise typer.Exit(code=1)
    write_json(config_path, default_engine_config())
    render_success(f"Wrote {config_path}")


@app.command("tui")
def tui() -> None:
    """Launch the full-screen portal."""
    from kavach.ui.app import KavachApp

    config = _load_config_or_exit()
    KavachApp(config=config).run()


def _run_session(definition: WizardDefinition, *, initial: Mapping[str, Any]) -> CompletionRecord | None:
    config = _load_config_or_exit()

    async def session() -> CompletionRecord | None:
        analyzer = build_analyzer(config) if definition.evidence_field else None
        try:
            return await run_wizard_flow(definition, analyzer=analyzer, initial=initial)
        finally:
            if analyzer is not None:
                await analyzer.aclose()

    try:
        return asyncio.run(session())
    except ValueError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


def _load_config_or_exit():
    try:
        return load_engine_config()
    except ValueError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


def _get_wizard_or_exit(kind: str) -> WizardDefinition:
    try:
        return get_wizard(kind)
    except KeyError as exc:
        render_error(str(exc.args[0]))
        raise typer.Exit(code=1) from exc


def _parse_role_or_exit(value: str) -> Role:
    try:
        return parse_role(value)
    except UnknownRole as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
