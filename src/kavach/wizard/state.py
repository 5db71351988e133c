"""Form state for a single wizard session."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping

from kavach.enrichment.types import EvidenceItem

EvidenceListener = Callable[[tuple[EvidenceItem, ...]], None]


class FormState:
    """Answers collected so far, keyed by field name.

    Values are replaced only through ``set_field`` and the evidence helpers.
    No validation happens here; the gate owns that. Appending to the evidence
    field notifies ``on_evidence_attached`` with the full evidence tuple.
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        evidence_field: str | None = None,
        on_evidence_attached: EvidenceListener | None = None,
    ) -> None:
        self._values: dict[str, Any] = {}
        self._evidence_field = evidence_field
        self._on_evidence_attached = on_evidence_attached
        for name, value in (values or {}).items():
            self._values[name] = _freeze(value)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    @property
    def evidence(self) -> tuple[EvidenceItem, ...]:
        if self._evidence_field is None:
            return ()
        return tuple(self._values.get(self._evidence_field) or ())

    def set_field(self, name: str, value: Any) -> None:
        if name == self._evidence_field:
            self._set_evidence(tuple(value or ()))
            return
        self._values[name] = _freeze(value)

    def attach_evidence(self, items: Iterable[EvidenceItem]) -> None:
        if self._evidence_field is None:
            raise ValueError("This form has no evidence field.")
        added = tuple(items)
        if not added:
            return
        self._set_evidence(self.evidence + added)

    def remove_evidence_item(self, index: int) -> EvidenceItem:
        """Drop one attached item. Enrichment is not re-run for removals."""
        current = list(self.evidence)
        if not -len(current) <= index < len(current):
            raise IndexError(f"No evidence item at index {index}.")
        removed = current.pop(index)
        self._values[self._evidence_field] = tuple(current)
        return removed

    def get_snapshot(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._values))

    def clear(self) -> None:
        self._values.clear()

    def _set_evidence(self, items: tuple[EvidenceItem, ...]) -> None:
        previous = self.evidence
        self._values[self._evidence_field] = items
        if len(items) > len(previous) and self._on_evidence_attached is not None:
            self._on_evidence_attached(items)


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, set, frozenset)):
        return tuple(value)
    return value
