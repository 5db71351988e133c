"""Evidence enrichment interfaces and implementations."""

from kavach.enrichment.client import EvidenceAnalyzer, build_evidence_payload, create_analyzer
from kavach.enrichment.mock import SimulatedAnalyzer
from kavach.enrichment.remote import AnalyzerError, HttpAnalyzer
from kavach.enrichment.task import EnrichmentState, EnrichmentTask
from kavach.enrichment.types import (
    EnrichmentResult,
    EvidenceItem,
    MediaKind,
    TierThresholds,
    build_result,
    media_kind_for,
    tier_for_score,
)

__all__ = [
    "AnalyzerError",
    "EnrichmentResult",
    "EnrichmentState",
    "EnrichmentTask",
    "EvidenceAnalyzer",
    "EvidenceItem",
    "HttpAnalyzer",
    "MediaKind",
    "SimulatedAnalyzer",
    "TierThresholds",
    "build_evidence_payload",
    "build_result",
    "create_analyzer",
    "media_kind_for",
    "tier_for_score",
]
