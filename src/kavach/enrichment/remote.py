"""HTTP-backed analyzer implementation."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any, Sequence

import httpx

from kavach.enrichment.client import build_evidence_payload
from kavach.enrichment.types import EnrichmentResult, EvidenceItem, TierThresholds, build_result


@dataclass
class AnalyzerError(RuntimeError):
    status_code: int | None
    response_text: str
    endpoint: str

    def __str__(self) -> str:
        if self.status_code is None:
            return f"AnalyzerError(endpoint={self.endpoint}, detail={self.response_text})"
        return f"AnalyzerError(status={self.status_code}, endpoint={self.endpoint})"


class HttpAnalyzer:
    def __init__(
        self,
        *,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout_s: float = 30.0,
        thresholds: TierThresholds | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        resolved_endpoint = endpoint or os.environ.get("KAVACH_ANALYZER_URL")
        if not resolved_endpoint:
            raise ValueError("KAVACH_ANALYZER_URL is required for HttpAnalyzer.")
        self._endpoint = resolved_endpoint
        self._api_key = api_key or os.environ.get("KAVACH_ANALYZER_API_KEY")
        self._thresholds = thresholds or TierThresholds()
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def analyze(self, evidence: Sequence[EvidenceItem]) -> EnrichmentResult:
        body = build_evidence_payload(evidence)
        response = await self._client.post(self._endpoint, json=body, headers=_headers(self._api_key))
        if response.status_code < 200 or response.status_code >= 300:
            raise AnalyzerError(
                status_code=response.status_code,
                response_text=response.text,
                endpoint=self._endpoint,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise AnalyzerError(
                status_code=None,
                response_text=f"response is not JSON: {response.text[:200]}",
                endpoint=self._endpoint,
            ) from exc
        score = _extract_score(payload)
        if score is None:
            raise AnalyzerError(
                status_code=None,
                response_text=f"missing or invalid score in response: {response.text[:200]}",
                endpoint=self._endpoint,
            )
        return build_result(score, len(evidence), self._thresholds)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpAnalyzer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _headers(api_key: str | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def _extract_score(payload: Any) -> int | None:
    if not isinstance(payload, dict):
        return None
    score = payload.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    value = int(round(score))
    if not 0 <= value <= 100:
        return None
    return value
