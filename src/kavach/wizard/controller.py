"""Step sequencing for a single wizard session."""

from __future__ import annotations

from datetime import datetime, timezone
import time
from typing import Any, Callable, Iterable, Mapping
import uuid

from kavach.enrichment.client import EvidenceAnalyzer
from kavach.enrichment.task import EnrichmentState, EnrichmentTask
from kavach.enrichment.types import EnrichmentResult, EvidenceItem
from kavach.wizard import gate
from kavach.wizard.state import FormState
from kavach.wizard.steps import BranchContent, StepDefinition, WizardDefinition
from kavach.wizard.types import (
    Abandoned,
    Completed,
    CompletionRecord,
    EnrichmentUpdated,
    WizardEvent,
    WizardStatus,
)


def generate_record_id(prefix: str) -> str:
    suffix = int(time.time() * 1000) % 1_000_000
    return f"{prefix}-{suffix:06d}-{uuid.uuid4().hex[:6].upper()}"


class WorkflowController:
    """Drives one session through a wizard's steps.

    ``next()`` and ``back()`` return a short outcome string instead of raising:
    ``"advanced"``, ``"blocked"``, ``"submitted"``, ``"retreated"``,
    ``"abandoned"`` or ``"ignored"`` once the session has ended.
    """

    def __init__(
        self,
        definition: WizardDefinition,
        *,
        analyzer: EvidenceAnalyzer | None = None,
        initial: Mapping[str, Any] | None = None,
        on_event: Callable[[WizardEvent], None] | None = None,
        id_factory: Callable[[str], str] = generate_record_id,
    ) -> None:
        self.definition = definition
        self._on_event = on_event
        self._id_factory = id_factory
        self._position = 1
        self._status = WizardStatus.ACTIVE
        self._enrichment: EnrichmentTask | None = None
        if analyzer is not None and definition.evidence_field is not None:
            self._enrichment = EnrichmentTask(analyzer, on_update=self._on_enrichment_update)
        values = definition.initial_values()
        values.update(initial or {})
        self._form: FormState | None = FormState(
            values,
            evidence_field=definition.evidence_field,
            on_evidence_attached=self._on_evidence_attached,
        )

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return self.definition.total

    @property
    def progress(self) -> float:
        return self._position / self.total

    @property
    def status(self) -> WizardStatus:
        return self._status

    @property
    def active(self) -> bool:
        return self._status is WizardStatus.ACTIVE

    @property
    def current_step(self) -> StepDefinition:
        return self.definition.step(self._position)

    @property
    def enrichment(self) -> EnrichmentResult | None:
        if self._enrichment is None:
            return None
        return self._enrichment.result

    @property
    def enrichment_state(self) -> EnrichmentState:
        if self._enrichment is None:
            return EnrichmentState.IDLE
        return self._enrichment.state

    @property
    def enrichment_error(self) -> str | None:
        if self._enrichment is None:
            return None
        return self._enrichment.error

    def snapshot(self) -> Mapping[str, Any]:
        if self._form is None:
            return {}
        return self._form.get_snapshot()

    def value(self, name: str, default: Any = None) -> Any:
        if self._form is None:
            return default
        return self._form.get(name, default)

    def can_advance(self) -> bool:
        if self._form is None:
            return False
        return gate.can_advance(self.current_step, self._form)

    def missing_fields(self) -> list[str]:
        if self._form is None:
            return []
        return gate.missing_fields(self.current_step, self._form)

    def visible_branches(self) -> list[BranchContent]:
        if self._form is None:
            return []
        return self.current_step.visible_branches(self._form)

    def set_field(self, name: str, value: Any) -> None:
        self._require_form().set_field(name, value)

    def attach_evidence(self, items: Iterable[EvidenceItem]) -> None:
        self._require_form().attach_evidence(items)

    def remove_evidence_item(self, index: int) -> EvidenceItem:
        return self._require_form().remove_evidence_item(index)

    async def wait_for_enrichment(self) -> EnrichmentResult | None:
        if self._enrichment is None:
            return None
        return await self._enrichment.wait()

    def next(self) -> str:
        if not self.active:
            return "ignored"
        if not self.can_advance():
            return "blocked"
        if self._position < self.total:
            self._position += 1
            return "advanced"
        self._submit()
        return "submitted"

    def back(self) -> str:
        if not self.active:
            return "ignored"
        if self._position > 1:
            self._position -= 1
            return "retreated"
        self._abandon()
        return "abandoned"

    def cancel(self) -> str:
        if not self.active:
            return "ignored"
        self._abandon()
        return "abandoned"

    def _submit(self) -> None:
        form = self._require_form()
        result = self._enrichment.result if self._enrichment else None
        record = CompletionRecord(
            wizard=self.definition.kind,
            record_id=self._id_factory(self.definition.id_prefix),
            fields=form.get_snapshot(),
            submitted_at=datetime.now(timezone.utc),
            enrichment=result,
        )
        self._teardown(WizardStatus.SUBMITTED)
        self._emit(Completed(record))

    def _abandon(self) -> None:
        position = self._position
        self._teardown(WizardStatus.ABANDONED)
        self._emit(Abandoned(wizard=self.definition.kind, position=position))

    def _teardown(self, status: WizardStatus) -> None:
        self._status = status
        if self._enrichment is not None:
            self._enrichment.cancel()
            self._enrichment = None
        if self._form is not None:
            self._form.clear()
            self._form = None

    def _require_form(self) -> FormState:
        if self._form is None:
            raise RuntimeError(f"Wizard session {self.definition.kind} has ended ({self._status.value}).")
        return self._form

    def _on_evidence_attached(self, evidence: tuple[EvidenceItem, ...]) -> None:
        if self._enrichment is not None:
            self._enrichment.trigger(evidence)

    def _on_enrichment_update(self, task: EnrichmentTask) -> None:
        if not self.active:
            return
        self._emit(EnrichmentUpdated(state=task.state, result=task.result, error=task.error))

    def _emit(self, event: WizardEvent) -> None:
        if self._on_event is not None:
            self._on_event(event)
