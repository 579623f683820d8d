from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from planbox._exceptions import InvalidInputError


class RuleOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "not_in"


class LogicOperator(str, Enum):
    AND = "AND"
    OR = "OR"


_LIST_OPERATORS = (RuleOperator.IN, RuleOperator.NOT_IN)


def _parse_enum(enum: type[Enum], raw: Any, what: str) -> Any:
    try:
        return enum(raw)
    except (ValueError, TypeError):
        allowed = ", ".join(m.value for m in enum)
        raise InvalidInputError(f"Unknown {what} {raw!r}; expected one of: {allowed}.") from None


_TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "n", "off", ""})


def _parse_flag(raw: Any, what: str) -> bool:
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise InvalidInputError(f"Unreadable {what} flag {raw!r}.")
    return bool(raw)


def _parse_priority(raw: Any) -> int:
    if raw is None or raw == "":
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidInputError(f"Rule priority must be an integer, got {raw!r}.") from exc


@dataclass(frozen=True, slots=True)
class RuleCondition:
    """
    One test on a job parameter.

    ``logic`` joins this condition to the *next* one in the rule's list;
    it is ignored on the last condition.
    """

    parameter: str
    operator: RuleOperator
    value: Any
    logic: LogicOperator = LogicOperator.AND

    def __post_init__(self) -> None:
        if not isinstance(self.parameter, str) or not self.parameter:
            raise InvalidInputError("Condition parameter must be a non-empty string.")
        if not isinstance(self.operator, RuleOperator):
            object.__setattr__(self, "operator", _parse_enum(RuleOperator, self.operator, "operator"))
        if not isinstance(self.logic, LogicOperator):
            object.__setattr__(self, "logic", _parse_enum(LogicOperator, self.logic, "logic"))

        if self.operator is RuleOperator.BETWEEN:
            if not isinstance(self.value, (list, tuple)) or len(self.value) != 2:
                raise InvalidInputError(
                    f"'between' on {self.parameter!r} needs a [min, max] pair, got {self.value!r}."
                )
            object.__setattr__(self, "value", tuple(self.value))
        elif self.operator in _LIST_OPERATORS:
            if not isinstance(self.value, (list, tuple)):
                raise InvalidInputError(
                    f"{self.operator.value!r} on {self.parameter!r} needs a list, got {self.value!r}."
                )
            object.__setattr__(self, "value", tuple(self.value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuleCondition:
        try:
            parameter = data["parameter"]
            operator = data["operator"]
            value = data["value"]
        except (KeyError, TypeError) as exc:
            raise InvalidInputError(f"Malformed rule condition {data!r}.") from exc
        logic = data.get("logic") or LogicOperator.AND
        return cls(parameter, operator, value, logic)


@dataclass(frozen=True, slots=True)
class RuleOutputs:
    # Percent of the machine's base speed, e.g. 80 means 80%.
    speed_modifier: float
    # May be fractional (0.25, 0.5 ...).
    people_required: float = 1
    fixed_rate: float | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuleOutputs:
        try:
            speed_modifier = float(data["speed_modifier"])
            people_required = float(data.get("people_required", 1))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInputError(f"Malformed rule outputs {data!r}.") from exc
        if people_required.is_integer():
            people_required = int(people_required)
        return cls(speed_modifier, people_required, data.get("fixed_rate"), data.get("notes"))


@dataclass(frozen=True, slots=True)
class MachineRule:
    conditions: tuple[RuleCondition, ...]
    outputs: RuleOutputs
    priority: int = 0
    active: bool = True
    machine_id: int | None = None
    id: int | None = None
    name: str = ""
    process_type_key: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MachineRule:
        """Build a rule from a rule-store row."""
        raw_conditions = data.get("conditions")
        if not isinstance(raw_conditions, Sequence) or isinstance(raw_conditions, (str, bytes)):
            raise InvalidInputError(f"Rule conditions must be a list, got {raw_conditions!r}.")
        raw_outputs = data.get("outputs")
        if not isinstance(raw_outputs, Mapping):
            raise InvalidInputError(f"Rule outputs must be a mapping, got {raw_outputs!r}.")

        active = data.get("active")
        return cls(
            conditions=tuple(RuleCondition.from_dict(c) for c in raw_conditions),
            outputs=RuleOutputs.from_dict(raw_outputs),
            priority=_parse_priority(data.get("priority")),
            active=True if active is None else _parse_flag(active, "active"),
            machine_id=data.get("machine_id"),
            id=data.get("id"),
            name=data.get("name") or "",
            process_type_key=data.get("process_type_key"),
        )

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return f"rule #{self.id}" if self.id is not None else "unnamed rule"


@dataclass(frozen=True, slots=True)
class RuleEvaluation:
    """Speed and staffing a machine runs at for one set of job parameters."""

    calculated_speed: float
    people_required: float
    base_speed: float
    explanation: str
    matched_rule: MachineRule | None = None
    matching_rules: tuple[MachineRule, ...] = field(default_factory=tuple)
