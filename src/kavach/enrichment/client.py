"""Analyzer interface and factory for evidence enrichment."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from kavach.enrichment.types import EnrichmentResult, EvidenceItem


@runtime_checkable
class EvidenceAnalyzer(Protocol):
    async def analyze(self, evidence: Sequence[EvidenceItem]) -> EnrichmentResult:
        """Score a batch of attached evidence."""

    async def aclose(self) -> None:
        """Release any underlying client resources."""


def create_analyzer(mode: str, **kwargs: Any) -> EvidenceAnalyzer:
    if mode == "simulated":
        from kavach.enrichment.mock import SimulatedAnalyzer

        return SimulatedAnalyzer(**kwargs)
    if mode == "remote":
        from kavach.enrichment.remote import HttpAnalyzer

        return HttpAnalyzer(**kwargs)
    raise ValueError(f"Unsupported enrichment mode: {mode}")


def build_evidence_payload(evidence: Sequence[EvidenceItem]) -> dict[str, Any]:
    return {
        "evidence": [item.to_dict() for item in evidence],
        "count": len(evidence),
    }
