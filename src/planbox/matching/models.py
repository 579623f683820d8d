from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from planbox._exceptions import InvalidInputError
from planbox.capabilities import CapabilityMatch
from planbox.rules import RuleEvaluation


@dataclass(frozen=True, slots=True)
class Machine:
    id: int
    process_type_key: str | None
    speed_hr: Any = 0
    capabilities: Mapping[str, Any] = field(default_factory=dict)
    facilities_id: int | None = None
    name: str = ""
    shift_capacity: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Machine:
        """Build a machine from a machine-registry row; unknown fields are ignored."""
        try:
            machine_id = data["id"]
        except (KeyError, TypeError) as exc:
            raise InvalidInputError(f"Machine row {data!r} has no id.") from exc
        return cls(
            id=machine_id,
            process_type_key=data.get("process_type_key"),
            speed_hr=data.get("speed_hr") or 0,
            capabilities=dict(data.get("capabilities") or {}),
            facilities_id=data.get("facilities_id"),
            name=data.get("name") or data.get("line") or "",
            shift_capacity=data.get("shift_capacity"),
        )


@dataclass(frozen=True, slots=True)
class MatchingCriteria:
    process_type: str
    job_requirements: Mapping[str, Any]
    quantity: float
    start_date: float  # epoch ms
    due_date: float  # epoch ms
    facility_id: int | None = None


@dataclass(frozen=True, slots=True)
class RequirementsMatch:
    can_handle: bool
    matches: tuple[CapabilityMatch, ...]
    score: int


@dataclass(frozen=True, slots=True)
class MachineMatch:
    machine: Machine
    match_score: int
    can_handle: bool
    match_reasons: tuple[str, ...]
    estimated_hours: float
    current_utilization: int
    speed_with_modifiers: float
    staffing_required: float
    rule_evaluation: RuleEvaluation | None = None
    capability_matches: tuple[CapabilityMatch, ...] = ()
