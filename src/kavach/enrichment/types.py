"""Evidence and enrichment result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import mimetypes
from pathlib import Path
from typing import Any


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"


def media_kind_for(content_type: str | None) -> MediaKind:
    if content_type:
        major = content_type.split("/", 1)[0].lower()
        if major == "image":
            return MediaKind.IMAGE
        if major == "video":
            return MediaKind.VIDEO
        if major == "audio":
            return MediaKind.AUDIO
    return MediaKind.DOCUMENT


@dataclass(frozen=True)
class EvidenceItem:
    name: str
    size: int
    kind: MediaKind = MediaKind.DOCUMENT

    @classmethod
    def from_path(cls, path: Path) -> "EvidenceItem":
        content_type, _encoding = mimetypes.guess_type(path.name)
        return cls(name=path.name, size=path.stat().st_size, kind=media_kind_for(content_type))

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class TierThresholds:
    high: int = 80
    medium: int = 60

    def to_dict(self) -> dict[str, int]:
        return {
            "high": self.high,
            "medium": self.medium,
        }


def tier_for_score(score: int, thresholds: TierThresholds | None = None) -> str:
    limits = thresholds or TierThresholds()
    if score >= limits.high:
        return "high"
    if score >= limits.medium:
        return "medium"
    return "low"


@dataclass(frozen=True)
class EnrichmentResult:
    score: int
    tier: str
    evidence_count: int

    @property
    def label(self) -> str:
        return f"{self.tier.upper()} RISK"

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "tier": self.tier,
            "evidence_count": self.evidence_count,
        }


def build_result(score: int, evidence_count: int, thresholds: TierThresholds | None = None) -> EnrichmentResult:
    if not 0 <= score <= 100:
        raise ValueError(f"Score must be within 0-100, got {score}.")
    return EnrichmentResult(score=score, tier=tier_for_score(score, thresholds), evidence_count=evidence_count)
