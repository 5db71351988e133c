"""Engine config validation helpers."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

from kavach.config import CONFIG_SCHEMA_VERSION, ENRICHMENT_MODES, normalize_engine_config


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    config: dict[str, Any] | None
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]


def load_and_validate_config(path: Path) -> ValidationResult:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", f"Config not found: {path}")],
            warnings=[],
        )
    except (OSError, json.JSONDecodeError) as exc:
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", f"Invalid JSON: {exc}")],
            warnings=[],
        )
    if not isinstance(raw, dict):
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", "Config must be a JSON object.")],
            warnings=[],
        )
    return validate_config(raw)


def validate_config(data: dict[str, Any]) -> ValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    schema_version = data.get("schema_version")
    if not schema_version:
        errors.append(ValidationIssue("schema_version", "Missing schema_version."))
    elif not isinstance(schema_version, str):
        errors.append(ValidationIssue("schema_version", "schema_version must be a string."))
    elif schema_version != CONFIG_SCHEMA_VERSION:
        warnings.append(
            ValidationIssue(
                "schema_version",
                f"Unexpected schema_version '{schema_version}'. Expected {CONFIG_SCHEMA_VERSION}.",
            )
        )

    enrichment = data.get("enrichment")
    if enrichment is None:
        warnings.append(ValidationIssue("enrichment", "Missing enrichment block; defaults apply."))
    elif not isinstance(enrichment, dict):
        errors.append(ValidationIssue("enrichment", "Must be an object."))
    else:
        _validate_enrichment(enrichment, errors, warnings)

    tiers = data.get("tiers")
    if tiers is None:
        warnings.append(ValidationIssue("tiers", "Missing tiers block; defaults apply."))
    elif not isinstance(tiers, dict):
        errors.append(ValidationIssue("tiers", "Must be an object."))
    else:
        _validate_tiers(tiers, errors)

    for key in sorted(set(data) - {"schema_version", "enrichment", "tiers"}):
        warnings.append(ValidationIssue(key, "Unknown key; ignored."))

    config = None
    if not errors:
        config = normalize_engine_config(data)
    return ValidationResult(config=config, errors=errors, warnings=warnings)


def _validate_enrichment(
    enrichment: dict[str, Any],
    errors: list[ValidationIssue],
    warnings: list[ValidationIssue],
) -> None:
    mode = enrichment.get("mode", "simulated")
    if mode not in ENRICHMENT_MODES:
        errors.append(ValidationIssue("enrichment.mode", f"Unsupported mode; choose {', '.join(ENRICHMENT_MODES)}."))
    if "delay_s" in enrichment:
        _require_non_negative_number(enrichment["delay_s"], "enrichment.delay_s", errors)
    if "timeout_s" in enrichment:
        _require_positive_number(enrichment["timeout_s"], "enrichment.timeout_s", errors)
    score_min = enrichment.get("score_min", 60)
    score_max = enrichment.get("score_max", 100)
    _require_score(score_min, "enrichment.score_min", errors)
    _require_score(score_max, "enrichment.score_max", errors)
    if _is_int(score_min) and _is_int(score_max) and score_max < score_min:
        errors.append(ValidationIssue("enrichment", "score_max must be >= score_min."))
    seed = enrichment.get("seed")
    if seed is not None and not _is_int(seed):
        errors.append(ValidationIssue("enrichment.seed", "Must be an integer or null."))
    endpoint = enrichment.get("endpoint")
    if endpoint is not None and not isinstance(endpoint, str):
        errors.append(ValidationIssue("enrichment.endpoint", "Must be a string or null."))
    if mode == "remote" and not endpoint:
        warnings.append(
            ValidationIssue("enrichment.endpoint", "Remote mode without endpoint; KAVACH_ANALYZER_URL must be set.")
        )


def _validate_tiers(tiers: dict[str, Any], errors: list[ValidationIssue]) -> None:
    high = tiers.get("high", 80)
    medium = tiers.get("medium", 60)
    _require_score(high, "tiers.high", errors)
    _require_score(medium, "tiers.medium", errors)
    if _is_int(high) and _is_int(medium) and high < medium:
        errors.append(ValidationIssue("tiers", "high must be >= medium."))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_score(value: Any, path: str, errors: list[ValidationIssue]) -> None:
    if not _is_int(value) or not 0 <= value <= 100:
        errors.append(ValidationIssue(path, "Must be an integer between 0 and 100."))


def _require_positive_number(value: Any, path: str, errors: list[ValidationIssue]) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        errors.append(ValidationIssue(path, "Must be a positive number."))


def _require_non_negative_number(value: Any, path: str, errors: list[ValidationIssue]) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        errors.append(ValidationIssue(path, "Must be a non-negative number."))
