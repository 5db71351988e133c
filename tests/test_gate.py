from __future__ import annotations

from kavach.catalog import CatalogItem
from kavach.enrichment.types import EvidenceItem
from kavach.wizard.gate import can_advance, is_filled, missing_fields
from kavach.wizard.state import FormState
from kavach.wizard.steps import ExactLength, FieldSpec, MustBeTrue, Predicate, StepDefinition

URGENCY = (CatalogItem("low", "Low"), CatalogItem("high", "High"))


def _details_step() -> StepDefinition:
    return StepDefinition(
        position=2,
        title="Details",
        fields=(
            FieldSpec("description", required=True),
            FieldSpec("urgency", kind="choice", required=True, choices=URGENCY),
            FieldSpec("location"),
        ),
    )


def test_is_filled_per_value_kind() -> None:
    assert not is_filled(None)
    assert not is_filled("   ")
    assert not is_filled(False)
    assert not is_filled(())
    assert is_filled("x")
    assert is_filled(True)
    assert is_filled((EvidenceItem("a.png", 1),))
    assert is_filled(0)


def test_required_fields_block_until_filled() -> None:
    step = _details_step()
    form = FormState({"description": "", "urgency": "", "location": ""})
    assert not can_advance(step, form)
    assert missing_fields(step, form) == ["description", "urgency"]

    form.set_field("description", "Fake recruiter asked for unit postings")
    assert missing_fields(step, form) == ["urgency"]

    form.set_field("urgency", "high")
    assert can_advance(step, form)
    assert missing_fields(step, form) == []


def test_optional_fields_never_block() -> None:
    step = _details_step()
    form = FormState({"description": "d", "urgency": "low"})
    assert can_advance(step, form)


def test_choice_outside_catalog_blocks() -> None:
    step = _details_step()
    form = FormState({"description": "d", "urgency": "urgent"})
    assert missing_fields(step, form) == ["urgency"]


def test_exact_length_rule() -> None:
    step = StepDefinition(
        position=3,
        title="OTP",
        fields=(FieldSpec("otp", required=True),),
        rules=(ExactLength("otp", 6),),
    )
    form = FormState({"otp": "12345"})
    assert missing_fields(step, form) == ["otp"]
    form.set_field("otp", "1234567")
    assert not can_advance(step, form)
    form.set_field("otp", "123456")
    assert can_advance(step, form)


def test_consent_rule_requires_true() -> None:
    step = StepDefinition(
        position=4,
        title="Review",
        fields=(FieldSpec("contactConsent", kind="flag"),),
        rules=(MustBeTrue("contactConsent"),),
    )
    form = FormState({"contactConsent": False})
    assert missing_fields(step, form) == ["contactConsent"]
    form.set_field("contactConsent", "yes")
    assert not can_advance(step, form)
    form.set_field("contactConsent", True)
    assert can_advance(step, form)


def test_predicate_rule_on_unlisted_field() -> None:
    step = StepDefinition(
        position=1,
        title="Contact",
        rules=(Predicate("email", lambda value: isinstance(value, str) and "@" in value, "Enter a valid email."),),
    )
    assert missing_fields(step, FormState({"email": "someone"})) == ["email"]
    assert can_advance(step, FormState({"email": "someone@example.in"}))


def test_step_without_fields_is_open() -> None:
    assert can_advance(StepDefinition(position=5, title="Complete"), FormState())
