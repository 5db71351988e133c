"""Forward-navigation gate shared by the controller and presentation layers."""

from __future__ import annotations

from typing import Any

from kavach.wizard.steps import FieldSpec, FormView, StepDefinition


def is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (tuple, list, set, frozenset, dict)):
        return len(value) > 0
    return True


def _choice_ok(spec: FieldSpec, value: Any) -> bool:
    if spec.kind != "choice" or not is_filled(value):
        return True
    return value in spec.choice_values


def missing_fields(step: StepDefinition, form: FormView) -> list[str]:
    """Names of the fields currently keeping ``step`` closed, in display order."""
    blocked: list[str] = []
    for spec in step.fields:
        value = form.get(spec.name)
        if spec.required and not is_filled(value):
            blocked.append(spec.name)
        elif not _choice_ok(spec, value):
            blocked.append(spec.name)
    for rule in step.rules:
        if not rule(form) and rule.field not in blocked:
            blocked.append(rule.field)
    return blocked


def can_advance(step: StepDefinition, form: FormView) -> bool:
    return not missing_fields(step, form)
