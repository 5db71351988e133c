"""Step definitions and the wizard registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from kavach.catalog import CatalogItem

FIELD_KINDS = ("text", "choice", "flag", "evidence")


class FormView(Protocol):
    def get(self, name: str, default: Any = None) -> Any:
        ...


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = "text"
    label: str = ""
    required: bool = False
    choices: tuple[CatalogItem, ...] = ()
    hint: str = ""

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unsupported field kind '{self.kind}' for {self.name}.")
        if self.kind == "choice" and not self.choices:
            raise ValueError(f"Choice field {self.name} needs at least one choice.")

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @property
    def choice_values(self) -> tuple[str, ...]:
        return tuple(item.value for item in self.choices)

    def initial_value(self) -> Any:
        if self.kind == "flag":
            return False
        if self.kind == "evidence":
            return ()
        return ""


@dataclass(frozen=True)
class ExactLength:
    field: str
    length: int

    @property
    def message(self) -> str:
        return f"{self.field} must be exactly {self.length} characters."

    def __call__(self, form: FormView) -> bool:
        value = form.get(self.field)
        return isinstance(value, str) and len(value.strip()) == self.length


@dataclass(frozen=True)
class MustBeTrue:
    field: str

    @property
    def message(self) -> str:
        return f"{self.field} must be confirmed."

    def __call__(self, form: FormView) -> bool:
        return form.get(self.field) is True


@dataclass(frozen=True)
class Predicate:
    field: str
    check: Callable[[Any], bool]
    message: str

    def __call__(self, form: FormView) -> bool:
        return bool(self.check(form.get(self.field)))


Rule = ExactLength | MustBeTrue | Predicate


@dataclass(frozen=True)
class BranchContent:
    """Extra content shown on a step only while ``field`` equals ``equals``."""

    field: str
    equals: Any
    title: str
    body: str


@dataclass(frozen=True)
class StepDefinition:
    position: int
    title: str
    description: str = ""
    fields: tuple[FieldSpec, ...] = ()
    rules: tuple[Rule, ...] = ()
    branches: tuple[BranchContent, ...] = ()

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    def visible_branches(self, form: FormView) -> list[BranchContent]:
        return [branch for branch in self.branches if form.get(branch.field) == branch.equals]


@dataclass(frozen=True)
class WizardDefinition:
    kind: str
    title: str
    steps: tuple[StepDefinition, ...]
    id_prefix: str
    evidence_field: str | None = None
    notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"Wizard {self.kind} needs at least one step.")
        positions = [step.position for step in self.steps]
        if positions != list(range(1, len(self.steps) + 1)):
            raise ValueError(f"Wizard {self.kind} steps must be numbered 1..N in order, got {positions}.")
        seen: set[str] = set()
        for step in self.steps:
            for spec in step.fields:
                if spec.name in seen:
                    raise ValueError(f"Wizard {self.kind} declares field {spec.name} twice.")
                seen.add(spec.name)
        if self.evidence_field is not None:
            spec = self.field_specs().get(self.evidence_field)
            if spec is None or spec.kind != "evidence":
                raise ValueError(f"Wizard {self.kind} evidence field {self.evidence_field} must be an evidence field.")

    @property
    def total(self) -> int:
        return len(self.steps)

    def step(self, position: int) -> StepDefinition:
        if not 1 <= position <= self.total:
            raise IndexError(f"Step {position} outside 1..{self.total} for wizard {self.kind}.")
        return self.steps[position - 1]

    def field_specs(self) -> dict[str, FieldSpec]:
        return {spec.name: spec for step in self.steps for spec in step.fields}

    def initial_values(self) -> dict[str, Any]:
        return {name: spec.initial_value() for name, spec in self.field_specs().items()}


_REGISTRY: dict[str, WizardDefinition] = {}
_BUILTINS_LOADED = False


def register_wizard(definition: WizardDefinition) -> None:
    _REGISTRY[definition.kind] = definition


def get_wizard(kind: str) -> WizardDefinition:
    _ensure_builtins()
    try:
        return _REGISTRY[kind]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY)) or "none"
        raise KeyError(f"Unknown wizard '{kind}'. Known wizards: {known}.") from None


def list_wizards() -> list[WizardDefinition]:
    _ensure_builtins()
    return [_REGISTRY[kind] for kind in sorted(_REGISTRY)]


def _ensure_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    _BUILTINS_LOADED = True
    from kavach.wizard.definitions import build_builtin_wizards

    for definition in build_builtin_wizards():
        _REGISTRY.setdefault(definition.kind, definition)


def describe_rules(step: StepDefinition) -> list[str]:
    return [rule.message for rule in step.rules]

