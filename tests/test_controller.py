from __future__ import annotations

import re

import pytest

from kavach.wizard.controller import WorkflowController, generate_record_id
from kavach.wizard.steps import WizardDefinition
from kavach.wizard.types import Abandoned, Completed, WizardStatus

RECORD_ID = re.compile(r"^AUTH-\d{6}-[0-9A-F]{6}$")


def _controller(definition: WizardDefinition, events: list) -> WorkflowController:
    return WorkflowController(definition, on_event=events.append)


def test_two_step_submission_end_to_end(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    controller = _controller(two_step_wizard, events)
    assert controller.position == 1
    assert controller.progress == 0.5

    controller.set_field("branch", "army")
    controller.set_field("serviceNumber", "IC-45678")
    assert controller.can_advance()
    assert controller.next() == "advanced"
    assert controller.position == 2
    assert controller.progress == 1.0

    assert controller.next() == "submitted"
    assert controller.status is WizardStatus.SUBMITTED
    assert len(events) == 1
    assert isinstance(events[0], Completed)
    record = events[0].record
    assert record.wizard == "signin"
    assert record.fields["branch"] == "army"
    assert record.fields["serviceNumber"] == "IC-45678"
    assert RECORD_ID.match(record.record_id)
    assert record.enrichment is None


def test_next_blocked_keeps_position(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    controller = _controller(two_step_wizard, events)
    controller.set_field("branch", "army")

    assert not controller.can_advance()
    assert controller.missing_fields() == ["serviceNumber"]
    assert controller.next() == "blocked"
    assert controller.position == 1
    assert events == []


def test_next_moves_one_step_at_a_time(two_step_wizard: WizardDefinition) -> None:
    controller = WorkflowController(two_step_wizard, initial={"branch": "navy", "serviceNumber": "N-1"})
    positions = []
    while controller.active:
        before = controller.position
        controller.next()
        positions.append(controller.position)
        assert controller.position - before in (0, 1)
        assert controller.position <= controller.total
    assert positions == [2, 2]


def test_second_next_after_submit_is_ignored(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    ids: list[str] = []

    def counting_id(prefix: str) -> str:
        ids.append(prefix)
        return f"{prefix}-000001-ABCDEF"

    controller = WorkflowController(
        two_step_wizard,
        initial={"branch": "army", "serviceNumber": "IC-1"},
        on_event=events.append,
        id_factory=counting_id,
    )
    controller.next()
    assert controller.next() == "submitted"
    assert controller.next() == "ignored"
    assert controller.back() == "ignored"
    assert len(events) == 1
    assert ids == ["AUTH"]


def test_back_retreats_without_validation(two_step_wizard: WizardDefinition) -> None:
    controller = WorkflowController(two_step_wizard, initial={"branch": "army", "serviceNumber": "IC-1"})
    controller.next()
    controller.set_field("serviceNumber", "")
    assert controller.back() == "retreated"
    assert controller.position == 1
    assert controller.value("branch") == "army"


def test_back_from_first_step_abandons_and_clears(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    controller = _controller(two_step_wizard, events)
    controller.set_field("branch", "army")

    assert controller.back() == "abandoned"
    assert controller.status is WizardStatus.ABANDONED
    assert events == [Abandoned(wizard="signin", position=1)]
    assert dict(controller.snapshot()) == {}
    assert controller.value("branch") is None
    with pytest.raises(RuntimeError):
        controller.set_field("branch", "navy")


def test_cancel_abandons_from_any_position(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    controller = WorkflowController(
        two_step_wizard,
        initial={"branch": "army", "serviceNumber": "IC-1"},
        on_event=events.append,
    )
    controller.next()
    assert controller.cancel() == "abandoned"
    assert events == [Abandoned(wizard="signin", position=2)]
    assert controller.cancel() == "ignored"


def test_initial_values_are_seeded(two_step_wizard: WizardDefinition) -> None:
    controller = WorkflowController(two_step_wizard, initial={"role": "veteran"})
    snapshot = controller.snapshot()
    assert snapshot["role"] == "veteran"
    assert snapshot["branch"] == ""


def test_record_to_dict_is_json_ready(two_step_wizard: WizardDefinition) -> None:
    events: list = []
    controller = WorkflowController(
        two_step_wizard,
        initial={"branch": "army", "serviceNumber": "IC-1"},
        on_event=events.append,
    )
    controller.next()
    controller.next()
    payload = events[0].record.to_dict()
    assert payload["wizard"] == "signin"
    assert payload["fields"]["branch"] == "army"
    assert payload["enrichment"] is None
    assert payload["submitted_at"].endswith("+00:00")


def test_generated_ids_are_distinct() -> None:
    ids = {generate_record_id("RPT") for _ in range(20)}
    assert len(ids) == 20
    assert all(re.match(r"^RPT-\d{6}-[0-9A-F]{6}$", value) for value in ids)
