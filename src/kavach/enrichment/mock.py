"""Simulated analyzer for offline use."""

from __future__ import annotations

import asyncio
import random
from typing import Sequence

from kavach.enrichment.types import EnrichmentResult, EvidenceItem, TierThresholds, build_result


class SimulatedAnalyzer:
    """Waits a fixed delay, then draws a score uniformly from an inclusive range."""

    def __init__(
        self,
        *,
        delay_s: float = 2.0,
        score_min: int = 60,
        score_max: int = 100,
        seed: int | None = None,
        thresholds: TierThresholds | None = None,
    ) -> None:
        if not 0 <= score_min <= score_max <= 100:
            raise ValueError(f"Invalid score range {score_min}-{score_max}; expected 0 <= min <= max <= 100.")
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0.")
        self._delay_s = delay_s
        self._score_min = score_min
        self._score_max = score_max
        self._rng = random.Random(seed)
        self._thresholds = thresholds or TierThresholds()

    @property
    def score_range(self) -> tuple[int, int]:
        return self._score_min, self._score_max

    async def analyze(self, evidence: Sequence[EvidenceItem]) -> EnrichmentResult:
        await asyncio.sleep(self._delay_s)
        score = self._rng.randint(self._score_min, self._score_max)
        return build_result(score, len(evidence), self._thresholds)

    async def aclose(self) -> None:
        return
