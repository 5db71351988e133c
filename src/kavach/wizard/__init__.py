"""Wizard package."""

from kavach.wizard.controller import WorkflowController, generate_record_id
from kavach.wizard.state import FormState
from kavach.wizard.steps import get_wizard, list_wizards, register_wizard
from kavach.wizard.types import Abandoned, Completed, CompletionRecord, EnrichmentUpdated, WizardStatus

__all__ = [
    "Abandoned",
    "Completed",
    "CompletionRecord",
    "EnrichmentUpdated",
    "FormState",
    "WizardStatus",
    "WorkflowController",
    "generate_record_id",
    "get_wizard",
    "list_wizards",
    "register_wizard",
]
