"""Catalog loader for wizard choice lists."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from importlib import resources
from pathlib import Path
from typing import Any

_RESERVED_KEYS = {"value", "name", "description", "default"}


@dataclass(frozen=True)
class CatalogItem:
    value: str
    name: str
    description: str = ""
    is_default: bool = False
    extra: dict[str, str] = field(default_factory=dict, compare=False, hash=False)


def load_branch_catalog() -> tuple[list[CatalogItem], str | None]:
    return _load_catalog(env_var="KAVACH_BRANCH_CATALOG_PATH", filename="branches.json")


def load_threat_catalog() -> tuple[list[CatalogItem], str | None]:
    return _load_catalog(env_var="KAVACH_THREAT_CATALOG_PATH", filename="threat_types.json")


def load_issue_catalog() -> tuple[list[CatalogItem], str | None]:
    return _load_catalog(env_var="KAVACH_ISSUE_CATALOG_PATH", filename="issue_types.json")


def _load_catalog(*, env_var: str, filename: str) -> tuple[list[CatalogItem], str | None]:
    override = os.getenv(env_var)
    if override:
        try:
            return _load_from_path(Path(override)), None
        except (OSError, ValueError):
            return _load_builtin(filename), f"Catalog override failed ({env_var}). Using built-in catalog."
    return _load_builtin(filename), None


def _load_from_path(path: Path) -> list[CatalogItem]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return _validate_catalog(data)


def _load_builtin(filename: str) -> list[CatalogItem]:
    data = resources.files(__name__).joinpath(filename).read_text(encoding="utf-8")
    return _validate_catalog(json.loads(data))


def _validate_catalog(data: Any) -> list[CatalogItem]:
    if not isinstance(data, list):
        raise ValueError("Catalog must be a list of items.")
    items: list[CatalogItem] = []
    seen: set[str] = set()
    for idx, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ValueError(f"Catalog item {idx} must be an object.")
        key = raw.get("value")
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"Catalog item {idx} missing 'value'.")
        key = key.strip()
        if key in seen:
            raise ValueError(f"Catalog item {idx} duplicates value '{key}'.")
        seen.add(key)
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            name = key
        description = raw.get("description")
        if not isinstance(description, str):
            description = ""
        extra = {
            str(k): str(v)
            for k, v in raw.items()
            if k not in _RESERVED_KEYS and isinstance(v, (str, int, float))
        }
        items.append(
            CatalogItem(
                value=key,
                name=name.strip(),
                description=description.strip(),
                is_default=bool(raw.get("default", False)),
                extra=extra,
            )
        )
    if not items:
        raise ValueError("Catalog is empty.")
    return items
