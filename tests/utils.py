from __future__ import annotations

import asyncio
from typing import Sequence

from kavach.enrichment.types import EnrichmentResult, EvidenceItem, build_result


class GatedAnalyzer:
    """Analyzer whose calls finish only when the test resolves them.

    With ``ignore_cancel`` set, a cancelled call keeps waiting for its result,
    which lets an older analysis finish after a newer one.
    """

    def __init__(self, *, ignore_cancel: bool = False) -> None:
        self.ignore_cancel = ignore_cancel
        self.calls: list[tuple[tuple[EvidenceItem, ...], asyncio.Future]] = []
        self.closed = False

    async def analyze(self, evidence: Sequence[EvidenceItem]) -> EnrichmentResult:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((tuple(evidence), future))
        while True:
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                if not self.ignore_cancel:
                    raise

    def resolve(self, index: int, score: int) -> None:
        evidence, future = self.calls[index]
        future.set_result(build_result(score, len(evidence)))

    def fail(self, index: int, exc: Exception) -> None:
        self.calls[index][1].set_exception(exc)

    async def aclose(self) -> None:
        self.closed = True


async def settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)
