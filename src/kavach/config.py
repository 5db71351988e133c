"""Configuration models and resolution helpers for kavach."""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
from pathlib import Path
from typing import Any

from kavach.enrichment.client import EvidenceAnalyzer, create_analyzer
from kavach.enrichment.types import TierThresholds

CONFIG_SCHEMA_VERSION = "1.0"
DEFAULT_CONFIG_PATH = Path("kavach.config.json")
ENRICHMENT_MODES = ("simulated", "remote")


@dataclass(frozen=True)
class EnrichmentConfig:
    mode: str = "simulated"
    delay_s: float = 2.0
    score_min: int = 60
    score_max: int = 100
    seed: int | None = None
    endpoint: str | None = None
    timeout_s: float = 30.0

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "delay_s": self.delay_s,
            "score_min": self.score_min,
            "score_max": self.score_max,
            "seed": self.seed,
            "endpoint": self.endpoint,
            "timeout_s": self.timeout_s,
        }


@dataclass(frozen=True)
class EngineConfig:
    schema_version: str
    enrichment: EnrichmentConfig
    tiers: TierThresholds

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "enrichment": self.enrichment.to_dict(),
            "tiers": self.tiers.to_dict(),
        }


def default_engine_config() -> dict[str, Any]:
    return EngineConfig(
        schema_version=CONFIG_SCHEMA_VERSION,
        enrichment=EnrichmentConfig(),
        tiers=TierThresholds(),
    ).to_dict()


def normalize_engine_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Fill missing blocks and keys from the defaults without touching extra keys."""
    normalized = default_engine_config()
    if not data:
        return normalized
    for key, value in data.items():
        if key in {"enrichment", "tiers"} and isinstance(value, dict):
            normalized[key].update(value)
        else:
            normalized[key] = value
    return normalized


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    updated = normalize_engine_config(data)
    mode = os.getenv("KAVACH_ENRICHMENT_MODE")
    if mode:
        updated["enrichment"]["mode"] = mode.strip().lower()
    endpoint = os.getenv("KAVACH_ANALYZER_URL")
    if endpoint:
        updated["enrichment"]["endpoint"] = endpoint.strip()
    return updated


def build_engine_config(data: dict[str, Any]) -> EngineConfig:
    normalized = normalize_engine_config(data)
    enrichment = normalized["enrichment"]
    tiers = normalized["tiers"]
    seed = enrichment.get("seed")
    if enrichment["mode"] not in ENRICHMENT_MODES:
        raise ValueError(
            f"Unsupported enrichment mode {enrichment['mode']!r}; choose {', '.join(ENRICHMENT_MODES)}."
        )
    if int(enrichment["score_max"]) < int(enrichment["score_min"]):
        raise ValueError("enrichment.score_max must be >= enrichment.score_min.")
    return EngineConfig(
        schema_version=str(normalized.get("schema_version") or CONFIG_SCHEMA_VERSION),
        enrichment=EnrichmentConfig(
            mode=str(enrichment["mode"]),
            delay_s=float(enrichment["delay_s"]),
            score_min=int(enrichment["score_min"]),
            score_max=int(enrichment["score_max"]),
            seed=int(seed) if seed is not None else None,
            endpoint=enrichment.get("endpoint") or None,
            timeout_s=float(enrichment["timeout_s"]),
        ),
        tiers=TierThresholds(high=int(tiers["high"]), medium=int(tiers["medium"])),
    )


def resolve_config_path(path: Path | None = None) -> Path:
    if path is not None:
        return path
    override = os.getenv("KAVACH_CONFIG_PATH")
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Read the config file if present, then layer environment overrides on top.

    A missing file means defaults. Malformed files raise ``ValueError``; run
    ``kavach config validate`` for a per-key report.
    """
    config_path = resolve_config_path(path)
    raw: dict[str, Any] = {}
    if config_path.exists():
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValueError(f"Invalid JSON config {config_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError(f"Config {config_path} must be a JSON object.")
    try:
        return build_engine_config(apply_env_overrides(raw))
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid config {config_path}: {exc}") from exc


def build_analyzer(config: EngineConfig) -> EvidenceAnalyzer:
    enrichment = config.enrichment
    if enrichment.mode == "remote":
        return create_analyzer(
            "remote",
            endpoint=enrichment.endpoint,
            timeout_s=enrichment.timeout_s,
            thresholds=config.tiers,
        )
    return create_analyzer(
        enrichment.mode,
        delay_s=enrichment.delay_s,
        score_min=enrichment.score_min,
        score_max=enrichment.score_max,
        seed=enrichment.seed,
        thresholds=config.tiers,
    )


def load_dotenv(path: str = ".env") -> bool:
    """Copy KEY=VALUE lines from ``path`` into the environment without overriding."""
    env_path = Path(path)
    if not env_path.exists():
        return False
    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return False

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export "):].lstrip()
        key, value = (part.strip() for part in stripped.split("=", 1))
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if value and key not in os.environ:
            os.environ[key] = value
    return True
