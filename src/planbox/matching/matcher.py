from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from planbox._rounding import round_half_up
from planbox.capabilities import CapabilityMatch, KeyResolver, default_resolver, match_capability
from planbox.capacity import (
    Assignment,
    calculate_current_utilization,
    calculate_machine_availability,
    calculate_time_estimate,
    window_hours,
)
from planbox.config import MatchingConfig, PlanboxSettings, get_settings
from planbox.rules import MachineRule, RuleEvaluation, evaluate_rules_for_machine

from .models import Machine, MachineMatch, MatchingCriteria, RequirementsMatch
from .scoring import score_machine

logger = logging.getLogger(__name__)


def _as_machine(machine: Machine | Mapping[str, Any]) -> Machine:
    return machine if isinstance(machine, Machine) else Machine.from_dict(machine)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def match_job_requirements_to_machine(
    job_parameters: Mapping[str, Any],
    machine: Machine | Mapping[str, Any],
    process_type: str,
    *,
    config: MatchingConfig | None = None,
    resolver: KeyResolver = default_resolver,
) -> RequirementsMatch:
    """
    Check every job requirement against one machine.

    A process-type mismatch disqualifies the machine outright. Metadata
    parameters and empty values are not requirements. ``score`` is the
    percentage of requirements met, or the neutral score when there were
    none to check.
    """
    machine = _as_machine(machine)
    config = config or get_settings().matching

    if machine.process_type_key != process_type:
        logger.debug(
            "Machine %s disqualified: process type %r != %r",
            machine.id, machine.process_type_key, process_type,
        )
        mismatch = CapabilityMatch(
            parameter="process_type",
            required=process_type,
            machine_capability=machine.process_type_key,
            matches=False,
            reason=(
                f"✗ Machine process type ({machine.process_type_key}) "
                f"doesn't match job requirement ({process_type})"
            ),
        )
        return RequirementsMatch(can_handle=False, matches=(mismatch,), score=0)

    matches = tuple(
        match_capability(parameter, required, machine.capabilities, resolver)
        for parameter, required in job_parameters.items()
        if parameter not in config.excluded_parameters and not _is_empty(required)
    )
    if not matches:
        return RequirementsMatch(can_handle=True, matches=(), score=config.neutral_score)

    met = sum(1 for m in matches if m.matches)
    return RequirementsMatch(
        can_handle=met == len(matches),
        matches=matches,
        score=round_half_up(met / len(matches) * 100),
    )


def can_machine_handle_job(
    machine: Machine | Mapping[str, Any],
    process_type: str,
    job_requirements: Mapping[str, Any],
    *,
    config: MatchingConfig | None = None,
) -> tuple[bool, list[str]]:
    result = match_job_requirements_to_machine(job_requirements, machine, process_type, config=config)
    return result.can_handle, [m.reason for m in result.matches]


def _reasons(
    result: RequirementsMatch,
    utilization: int,
    hours: float,
    evaluation: RuleEvaluation,
) -> tuple[str, ...]:
    lines: list[str] = []
    if result.can_handle:
        lines.append("Can handle job:")
        lines.extend(f"  {m.reason}" for m in result.matches)
    else:
        lines.append("Cannot handle job:")
        lines.extend(f"  {m.reason}" for m in result.matches if not m.matches)

    source = "with rule modifiers" if evaluation.matched_rule else "base speed"
    people = evaluation.people_required
    lines.append(f"Current utilization: {utilization}%")
    lines.append(f"Estimated time: {hours:.1f} hours")
    lines.append(f"Speed: {_fmt(evaluation.calculated_speed)} units/hr ({source})")
    lines.append(f"Staffing: {_fmt(people)} {'person' if people == 1 else 'people'}")
    return tuple(lines)


def _disqualified(machine: Machine, result: RequirementsMatch) -> MachineMatch:
    return MachineMatch(
        machine=machine,
        match_score=0,
        can_handle=False,
        match_reasons=("Cannot handle job:", *(f"  {m.reason}" for m in result.matches)),
        estimated_hours=0.0,
        current_utilization=0,
        speed_with_modifiers=0,
        staffing_required=0,
        capability_matches=result.matches,
    )


def rank_matches(matches: Iterable[MachineMatch]) -> list[MachineMatch]:
    """Machines that can handle the job first, then by score, highest first."""
    return sorted(matches, key=lambda m: (not m.can_handle, -m.match_score))


def find_matching_machines(
    criteria: MatchingCriteria,
    candidate_machines: Iterable[Machine | Mapping[str, Any]],
    existing_assignments: Iterable[Assignment | Mapping[str, Any]] | None = None,
    rules: Sequence[MachineRule | Mapping[str, Any]] = (),
    *,
    settings: PlanboxSettings | None = None,
    resolver: KeyResolver = default_resolver,
) -> list[MachineMatch]:
    """
    Score and rank every candidate machine for a job.

    Machines outside ``criteria.facility_id`` (when set) are dropped.
    Machines of another process type stay in the list as disqualified
    entries with score 0. ``rules`` are the rule-store rows for the job's
    process type; inactive and out-of-scope rules are filtered here.
    """
    settings = settings or get_settings()
    assignments = [a if isinstance(a, Assignment) else Assignment.from_dict(a)
                   for a in existing_assignments or ()]
    total_hours = window_hours(criteria.start_date, criteria.due_date, settings.availability)

    matches: list[MachineMatch] = []
    for machine in map(_as_machine, candidate_machines):
        if criteria.facility_id and machine.facilities_id != criteria.facility_id:
            continue

        result = match_job_requirements_to_machine(
            criteria.job_requirements,
            machine,
            criteria.process_type,
            config=settings.matching,
            resolver=resolver,
        )
        if machine.process_type_key != criteria.process_type:
            matches.append(_disqualified(machine, result))
            continue

        evaluation = evaluate_rules_for_machine(rules, machine, criteria.job_requirements)
        hours = calculate_time_estimate(criteria.quantity, evaluation.calculated_speed)

        available = calculate_machine_availability(
            machine.id, criteria.start_date, criteria.due_date, assignments, settings.availability
        )
        utilization = calculate_current_utilization(total_hours - available, total_hours)
        score = score_machine(machine, result.score, utilization, settings.scoring)

        matches.append(
            MachineMatch(
                machine=machine,
                match_score=score,
                can_handle=result.can_handle,
                match_reasons=_reasons(result, utilization, hours, evaluation),
                estimated_hours=hours,
                current_utilization=utilization,
                speed_with_modifiers=evaluation.calculated_speed,
                staffing_required=evaluation.people_required,
                rule_evaluation=evaluation,
                capability_matches=result.matches,
            )
        )

    ranked = rank_matches(matches)
    logger.debug(
        "Ranked %d machines for %s job, %d can handle it",
        len(ranked), criteria.process_type, sum(1 for m in ranked if m.can_handle),
    )
    return ranked


def find_best_machine(
    criteria: MatchingCriteria,
    candidate_machines: Iterable[Machine | Mapping[str, Any]],
    existing_assignments: Iterable[Assignment | Mapping[str, Any]] | None = None,
    rules: Sequence[MachineRule | Mapping[str, Any]] = (),
    *,
    settings: PlanboxSettings | None = None,
    resolver: KeyResolver = default_resolver,
) -> MachineMatch | None:
    """Top-ranked machine that can handle the job, or None."""
    ranked = find_matching_machines(
        criteria, candidate_machines, existing_assignments, rules,
        settings=settings, resolver=resolver,
    )
    return next((m for m in ranked if m.can_handle), None)
