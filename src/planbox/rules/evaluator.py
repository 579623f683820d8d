from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol, Sequence

from planbox._exceptions import InvalidInputError
from planbox._rounding import round_half_up
from planbox.capacity.estimates import parse_speed_per_hour

from .models import LogicOperator, MachineRule, RuleCondition, RuleEvaluation, RuleOperator

logger = logging.getLogger(__name__)

DEFAULT_PEOPLE_REQUIRED = 1

_OPERATOR_LABELS = {
    RuleOperator.EQUALS: "=",
    RuleOperator.NOT_EQUALS: "≠",
    RuleOperator.GREATER_THAN: ">",
    RuleOperator.LESS_THAN: "<",
    RuleOperator.GREATER_THAN_OR_EQUAL: "≥",
    RuleOperator.LESS_THAN_OR_EQUAL: "≤",
    RuleOperator.BETWEEN: "between",
    RuleOperator.IN: "is one of",
    RuleOperator.NOT_IN: "is not one of",
}


class MachineLike(Protocol):
    id: int | None
    speed_hr: Any
    process_type_key: str | None


# ── coercion ─────────────────────────────────────────────────────────────

def _same(a: Any, b: Any) -> bool:
    # Strict equality: no bool/number crossover, no string/number crossover.
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def _number(value: Any) -> float | None:
    if isinstance(value, (bool, int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return None if number != number else number


def _compare(left: Any, right: Any, op: RuleOperator) -> bool:
    a, b = _number(left), _number(right)
    if a is None or b is None:
        return False
    if op is RuleOperator.GREATER_THAN:
        return a > b
    if op is RuleOperator.LESS_THAN:
        return a < b
    if op is RuleOperator.GREATER_THAN_OR_EQUAL:
        return a >= b
    return a <= b


def _as_condition(condition: RuleCondition | Mapping[str, Any]) -> RuleCondition:
    if isinstance(condition, RuleCondition):
        return condition
    if isinstance(condition, Mapping):
        return RuleCondition.from_dict(condition)
    raise InvalidInputError(f"Expected a rule condition, got {condition!r}.")


def _as_rule(rule: MachineRule | Mapping[str, Any]) -> MachineRule:
    if isinstance(rule, MachineRule):
        return rule
    if isinstance(rule, Mapping):
        return MachineRule.from_dict(rule)
    raise InvalidInputError(f"Expected a machine rule, got {rule!r}.")


# ── evaluation ───────────────────────────────────────────────────────────

def evaluate_condition(
    condition: RuleCondition | Mapping[str, Any],
    parameters: Mapping[str, Any],
) -> bool:
    condition = _as_condition(condition)
    actual = parameters.get(condition.parameter)
    if actual is None:
        return False

    op, expected = condition.operator, condition.value
    if op is RuleOperator.EQUALS:
        return _same(actual, expected)
    if op is RuleOperator.NOT_EQUALS:
        return not _same(actual, expected)
    if op is RuleOperator.BETWEEN:
        low, high = expected
        return _compare(actual, low, RuleOperator.GREATER_THAN_OR_EQUAL) and _compare(
            actual, high, RuleOperator.LESS_THAN_OR_EQUAL
        )
    if op is RuleOperator.IN:
        return any(_same(actual, option) for option in expected)
    if op is RuleOperator.NOT_IN:
        return not any(_same(actual, option) for option in expected)
    return _compare(actual, expected, op)


def evaluate_conditions(
    conditions: Sequence[RuleCondition | Mapping[str, Any]],
    parameters: Mapping[str, Any],
) -> bool:
    """
    Fold a flat condition chain left to right.

    The ``logic`` of condition *i* joins the running result with condition
    *i+1*. There is no grouping and no AND-before-OR precedence:
    ``a OR b AND c`` evaluates as ``(a OR b) AND c``. An empty chain never
    matches.
    """
    if isinstance(conditions, (str, bytes)) or not isinstance(conditions, Sequence):
        raise InvalidInputError(f"Conditions must be a list, got {conditions!r}.")
    chain = [_as_condition(c) for c in conditions]
    if not chain:
        return False

    result = evaluate_condition(chain[0], parameters)
    for previous, current in zip(chain, chain[1:]):
        outcome = evaluate_condition(current, parameters)
        if previous.logic is LogicOperator.OR:
            result = result or outcome
        else:
            result = result and outcome
    return result


def find_matching_rules(
    rules: Iterable[MachineRule | Mapping[str, Any]],
    parameters: Mapping[str, Any],
    machine_id: int | None = None,
) -> list[MachineRule]:
    """Active rules whose machine scope allows ``machine_id`` and whose conditions hold."""
    matching: list[MachineRule] = []
    for rule in map(_as_rule, rules):
        if not rule.active:
            continue
        if rule.machine_id is not None and rule.machine_id != machine_id:
            continue
        if evaluate_conditions(rule.conditions, parameters):
            matching.append(rule)
    return matching


def select_most_restrictive_rule(matching_rules: Sequence[MachineRule]) -> MachineRule | None:
    """Lowest speed modifier wins; equal modifiers go to the highest priority."""
    if not matching_rules:
        return None
    ranked = sorted(matching_rules, key=lambda r: (r.outputs.speed_modifier, -r.priority))
    return ranked[0]


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def evaluate_rules(
    rules: Iterable[MachineRule | Mapping[str, Any]],
    base_speed: float,
    parameters: Mapping[str, Any],
    machine_id: int | None = None,
) -> RuleEvaluation:
    """Effective speed and staffing for one machine under the applicable rules."""
    matching = find_matching_rules(rules, parameters, machine_id)
    selected = select_most_restrictive_rule(matching)

    if selected is None:
        return RuleEvaluation(
            calculated_speed=base_speed,
            people_required=DEFAULT_PEOPLE_REQUIRED,
            base_speed=base_speed,
            explanation="No matching rules found. Using base speed.",
        )

    modifier = selected.outputs.speed_modifier
    speed = round_half_up(base_speed * modifier / 100)
    people = selected.outputs.people_required
    logger.debug(
        "Rule %s selected from %d matching: %s%% of %s/hr = %s/hr",
        selected.label, len(matching), _fmt(modifier), _fmt(base_speed), speed,
    )
    return RuleEvaluation(
        calculated_speed=speed,
        people_required=people,
        base_speed=base_speed,
        explanation=(
            f'Rule "{selected.label}" applied: {_fmt(modifier)}% of base speed '
            f"({_fmt(base_speed)}/hr) = {speed}/hr. Requires {_fmt(people)} people."
        ),
        matched_rule=selected,
        matching_rules=tuple(matching),
    )


def evaluate_rules_for_machine(
    rules: Iterable[MachineRule | Mapping[str, Any]],
    machine: MachineLike,
    parameters: Mapping[str, Any],
) -> RuleEvaluation:
    """
    Evaluate the rules that apply to ``machine``'s process type, using its
    base speed and id. A machine without a process type runs at base speed.
    """
    base_speed = parse_speed_per_hour(machine.speed_hr)
    if not machine.process_type_key:
        return RuleEvaluation(
            calculated_speed=base_speed,
            people_required=DEFAULT_PEOPLE_REQUIRED,
            base_speed=base_speed,
            explanation="Machine has no process type. Using base speed.",
        )

    applicable = [
        rule
        for rule in map(_as_rule, rules)
        if rule.process_type_key in (None, machine.process_type_key)
    ]
    return evaluate_rules(applicable, base_speed, parameters, machine.id)


# ── display ──────────────────────────────────────────────────────────────

def format_condition(condition: RuleCondition | Mapping[str, Any]) -> str:
    condition = _as_condition(condition)
    label = _OPERATOR_LABELS[condition.operator]
    value = condition.value
    if condition.operator is RuleOperator.BETWEEN:
        text = f"{value[0]} and {value[1]}"
    elif isinstance(value, (list, tuple)):
        text = ", ".join(str(v) for v in value)
    else:
        text = str(value)
    return f"{condition.parameter} {label} {text}"


def format_conditions(conditions: Sequence[RuleCondition | Mapping[str, Any]]) -> str:
    chain = [_as_condition(c) for c in conditions]
    if not chain:
        return "No conditions"
    parts: list[str] = []
    for i, condition in enumerate(chain):
        parts.append(format_condition(condition))
        if i < len(chain) - 1:
            parts.append(condition.logic.value)
    return " ".join(parts)
