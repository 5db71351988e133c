from __future__ import annotations

import pytest

from kavach.catalog import CatalogItem
from kavach.enrichment.types import EvidenceItem, MediaKind
from kavach.wizard.steps import FieldSpec, StepDefinition, WizardDefinition


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "KAVACH_CONFIG_PATH",
        "KAVACH_ENRICHMENT_MODE",
        "KAVACH_ANALYZER_URL",
        "KAVACH_ANALYZER_API_KEY",
        "KAVACH_BRANCH_CATALOG_PATH",
        "KAVACH_THREAT_CATALOG_PATH",
        "KAVACH_ISSUE_CATALOG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def photo() -> EvidenceItem:
    return EvidenceItem(name="chat.png", size=204_800, kind=MediaKind.IMAGE)


@pytest.fixture
def recording() -> EvidenceItem:
    return EvidenceItem(name="call.mp3", size=1_048_576, kind=MediaKind.AUDIO)


@pytest.fixture
def two_step_wizard() -> WizardDefinition:
    branches = (CatalogItem("army", "Indian Army"), CatalogItem("navy", "Indian Navy"))
    return WizardDefinition(
        kind="signin",
        title="Sign in",
        id_prefix="AUTH",
        steps=(
            StepDefinition(
                position=1,
                title="Branch & ID",
                fields=(
                    FieldSpec("branch", kind="choice", required=True, choices=branches),
                    FieldSpec("serviceNumber", required=True),
                ),
            ),
            StepDefinition(position=2, title="Done"),
        ),
    )


@pytest.fixture
def evidence_wizard() -> WizardDefinition:
    return WizardDefinition(
        kind="report",
        title="Report",
        id_prefix="RPT",
        evidence_field="evidence",
        steps=(
            StepDefinition(position=1, title="Details", fields=(FieldSpec("description", required=True),)),
            StepDefinition(position=2, title="Evidence", fields=(FieldSpec("evidence", kind="evidence"),)),
        ),
    )
