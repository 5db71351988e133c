"""Cancellable background enrichment for attached evidence.

One task per wizard session. Each trigger bumps a generation counter; a
completion is applied only while its generation is still current, so the
most recent attachment always wins even if an older analysis finishes last.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Sequence

from kavach.enrichment.client import EvidenceAnalyzer
from kavach.enrichment.types import EnrichmentResult, EvidenceItem


class EnrichmentState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


class EnrichmentTask:
    def __init__(
        self,
        analyzer: EvidenceAnalyzer,
        *,
        on_update: Callable[["EnrichmentTask"], None] | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._on_update = on_update
        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self.state = EnrichmentState.IDLE
        self.result: EnrichmentResult | None = None
        self.error: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        return self.state is EnrichmentState.RUNNING

    def trigger(self, evidence: Sequence[EvidenceItem]) -> int:
        """Start analysis of ``evidence``, superseding any run in flight."""
        items = tuple(evidence)
        if not items:
            return self._generation
        # Raises outside a running loop; nothing has been touched yet.
        loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation
        self._cancel_in_flight()
        self.state = EnrichmentState.RUNNING
        self.result = None
        self.error = None
        self._task = loop.create_task(self._run(generation, items))
        self._notify()
        return generation

    def cancel(self) -> None:
        self._generation += 1
        self._cancel_in_flight()
        self._task = None
        was_idle = self.state is EnrichmentState.IDLE and self.result is None
        self.state = EnrichmentState.IDLE
        self.result = None
        self.error = None
        if not was_idle:
            self._notify()

    async def wait(self) -> EnrichmentResult | None:
        while self._task is not None and not self._task.done():
            current = self._task
            await asyncio.wait({current})
            if current is self._task:
                break
        return self.result

    async def _run(self, generation: int, evidence: tuple[EvidenceItem, ...]) -> None:
        try:
            result = await self._analyzer.analyze(evidence)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            if generation != self._generation:
                return
            self.state = EnrichmentState.FAILED
            self.error = str(exc) or exc.__class__.__name__
            self._notify()
            return
        if generation != self._generation:
            return
        self.result = result
        self.state = EnrichmentState.COMPLETE
        self._notify()

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self)
