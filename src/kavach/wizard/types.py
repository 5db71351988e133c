"""Session status, completion records and controller events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from kavach.enrichment.task import EnrichmentState
from kavach.enrichment.types import EnrichmentResult, EvidenceItem


class WizardStatus(str, Enum):
    ACTIVE = "active"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class CompletionRecord:
    wizard: str
    record_id: str
    fields: Mapping[str, Any]
    submitted_at: datetime
    enrichment: EnrichmentResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "wizard": self.wizard,
            "record_id": self.record_id,
            "submitted_at": self.submitted_at.isoformat(),
            "fields": {name: _jsonable(value) for name, value in self.fields.items()},
            "enrichment": self.enrichment.to_dict() if self.enrichment else None,
        }


@dataclass(frozen=True)
class Completed:
    record: CompletionRecord


@dataclass(frozen=True)
class Abandoned:
    wizard: str
    position: int


@dataclass(frozen=True)
class EnrichmentUpdated:
    state: EnrichmentState
    result: EnrichmentResult | None
    error: str | None


WizardEvent = Completed | Abandoned | EnrichmentUpdated


def _jsonable(value: Any) -> Any:
    if isinstance(value, EvidenceItem):
        return value.to_dict()
    if isinstance(value, (tuple, list)):
        return [_jsonable(item) for item in value]
    return value
