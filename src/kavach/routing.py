"""Role router: maps a finalized role to the dashboard it lands on."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from kavach.wizard.types import CompletionRecord


class Role(str, Enum):
    SERVING = "serving"
    VETERAN = "veteran"
    FAMILY = "family"


class UnknownRole(ValueError):
    def __init__(self, value: object) -> None:
        known = ", ".join(role.value for role in Role)
        super().__init__(f"Unknown role {value!r}. Expected one of: {known}.")
        self.value = value


@dataclass(frozen=True)
class ServingDashboard:
    title: str = "Serving Personnel Dashboard"
    report_wizard: str = "incident"
    role: Role = Role.SERVING

    def report_initial(self) -> dict[str, str]:
        return {"reporterRole": self.role.value}


@dataclass(frozen=True)
class VeteranDashboard:
    title: str = "Veteran Dashboard"
    report_wizard: str = "incident"
    role: Role = Role.VETERAN

    def report_initial(self) -> dict[str, str]:
        return {"reporterRole": self.role.value}


@dataclass(frozen=True)
class FamilyDashboard:
    title: str = "Family Safety Dashboard"
    report_wizard: str = "family"
    role: Role = Role.FAMILY

    def report_initial(self) -> dict[str, str]:
        return {}


Dashboard = ServingDashboard | VeteranDashboard | FamilyDashboard

_ROUTES: dict[Role, Callable[[], Dashboard]] = {
    Role.SERVING: ServingDashboard,
    Role.VETERAN: VeteranDashboard,
    Role.FAMILY: FamilyDashboard,
}


def _check_routes() -> None:
    missing = [role.value for role in Role if role not in _ROUTES]
    if missing:
        raise RuntimeError(f"No dashboard registered for role(s): {', '.join(missing)}.")


_check_routes()


def parse_role(value: object) -> Role:
    if isinstance(value, Role):
        return value
    if not isinstance(value, str) or not value.strip():
        raise UnknownRole(value)
    try:
        return Role(value.strip().lower())
    except ValueError:
        raise UnknownRole(value) from None


def route_role(value: object) -> Dashboard:
    return _ROUTES[parse_role(value)]()


def route_completion(record: CompletionRecord) -> Dashboard:
    """Route a finished sign-in by the role it was started with."""
    if record.wizard != "auth":
        raise ValueError(f"Only auth records carry a role, got {record.wizard!r}.")
    return route_role(record.fields.get("role"))
