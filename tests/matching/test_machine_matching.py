"""
tests/matching/test_machine_matching.py

Covers:
  - Requirement matching per machine: process type gate, exclusions, score
  - can_machine_handle_job
  - find_matching_machines: rules, availability, ranking, facility filter,
    disqualified entries and explanation lines
  - find_best_machine
"""

import dataclasses

import pytest

from planbox._exceptions import InvalidInputError
from planbox.capacity import DAY_MS, Assignment
from planbox.config import MatchingConfig, PlanboxSettings
from planbox.matching import (
    Machine,
    MachineMatch,
    MatchingCriteria,
    can_machine_handle_job,
    find_best_machine,
    find_matching_machines,
    match_job_requirements_to_machine,
    rank_matches,
)
from planbox.rules import MachineRule


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def settings():
    return PlanboxSettings()


@pytest.fixture
def inserter():
    return Machine(
        id=1,
        process_type_key="insert",
        speed_hr=5000,
        capabilities={
            "supported_paper_sizes": ["6x9", "10x13"],
            "min_pockets": 2,
            "max_pockets": 6,
        },
        facilities_id=1,
    )


@pytest.fixture
def small_inserter():
    return Machine(
        id=2,
        process_type_key="insert",
        speed_hr="10,000/hr",
        capabilities={"supported_paper_sizes": ["6x9"], "pockets_range": {"min": 2, "max": 8}},
        facilities_id=2,
    )


@pytest.fixture
def folder(inserter):
    return Machine(
        id=3,
        process_type_key="fold",
        speed_hr=20000,
        capabilities=dict(inserter.capabilities),
        facilities_id=1,
    )


@pytest.fixture
def machines(inserter, small_inserter, folder):
    return [folder, small_inserter, inserter]


@pytest.fixture
def criteria():
    return MatchingCriteria(
        process_type="insert",
        job_requirements={"paper_size": "10x13", "pockets": 4},
        quantity=20000,
        start_date=0,
        due_date=5 * DAY_MS,
    )


@pytest.fixture
def large_envelopes():
    return MachineRule.from_dict({
        "name": "Large envelopes",
        "priority": 1,
        "process_type_key": "insert",
        "conditions": [{"parameter": "paper_size", "operator": "equals", "value": "10x13"}],
        "outputs": {"speed_modifier": 80, "people_required": 2},
    })


# ── Requirements against one machine ──────────────────────────────────────────

class TestMatchRequirements:

    def test_all_met(self, inserter):
        result = match_job_requirements_to_machine({"paper_size": "10x13", "pockets": 4}, inserter, "insert")
        assert result.can_handle is True
        assert result.score == 100
        assert len(result.matches) == 2

    def test_partly_met(self, small_inserter):
        result = match_job_requirements_to_machine(
            {"paper_size": "10x13", "pockets": 4}, small_inserter, "insert"
        )
        assert result.can_handle is False
        assert result.score == 50

    def test_score_rounds_half_up(self, inserter):
        reqs = {"paper_size": "10x13", "pockets": 4, "glue": True}
        # two of three met
        assert match_job_requirements_to_machine(reqs, inserter, "insert").score == 67

    def test_process_type_mismatch_disqualifies(self, folder):
        result = match_job_requirements_to_machine({"paper_size": "10x13"}, folder, "insert")
        assert result.can_handle is False
        assert result.score == 0
        assert result.matches[0].reason == (
            "✗ Machine process type (fold) doesn't match job requirement (insert)"
        )

    def test_metadata_and_empty_values_skipped(self, inserter):
        reqs = {"process_type": "insert", "id": 9, "job_id": 4, "paper_size": "", "inks": []}
        result = match_job_requirements_to_machine(reqs, inserter, "insert")
        assert result.matches == ()
        assert result.can_handle is True
        assert result.score == 50

    def test_neutral_score_configurable(self, inserter):
        result = match_job_requirements_to_machine(
            {}, inserter, "insert", config=MatchingConfig(neutral_score=100)
        )
        assert result.score == 100

    def test_extra_exclusions(self, inserter):
        config = MatchingConfig(excluded_parameters=frozenset({"customer"}))
        result = match_job_requirements_to_machine(
            {"customer": "acme", "process_type": "insert"}, inserter, "insert", config=config
        )
        assert result.matches == ()

    def test_accepts_machine_row(self):
        row = {
            "id": 5,
            "process_type_key": "insert",
            "speed_hr": "4000",
            "capabilities": {"affix_capable": True},
            "line": "Line 5",
        }
        assert match_job_requirements_to_machine({"affix": True}, row, "insert").can_handle is True
        assert Machine.from_dict(row).name == "Line 5"

    def test_machine_row_shift_capacity(self):
        row = {"id": 6, "process_type_key": "fold", "shift_capacity": 1.5}
        assert Machine.from_dict(row).shift_capacity == 1.5
        assert Machine.from_dict({"id": 7, "process_type_key": "fold"}).shift_capacity is None


class TestCanMachineHandleJob:

    def test_reasons(self, small_inserter):
        ok, reasons = can_machine_handle_job(small_inserter, "insert", {"paper_size": "10x13"})
        assert ok is False
        assert reasons == ["✗ Machine doesn't support paper_size: 10x13 (supports: 6x9)"]

    def test_no_requirements(self, inserter):
        assert can_machine_handle_job(inserter, "insert", {}) == (True, [])


# ── Ranking ───────────────────────────────────────────────────────────────────

class TestFindMatchingMachines:

    def test_ranking(self, criteria, machines, settings):
        ranked = find_matching_machines(criteria, machines, settings=settings)
        assert [m.machine.id for m in ranked] == [1, 2, 3]
        assert [m.match_score for m in ranked] == [85, 80, 0]
        assert [m.can_handle for m in ranked] == [True, False, False]

    def test_estimates_without_rules(self, criteria, inserter, settings):
        (match,) = find_matching_machines(criteria, [inserter], settings=settings)
        assert match.estimated_hours == 4.0
        assert match.speed_with_modifiers == 5000
        assert match.staffing_required == 1
        assert match.current_utilization == 0
        assert match.match_reasons == (
            "Can handle job:",
            "  ✓ Machine supports paper_size: 10x13",
            "  ✓ 4 is within machine range [2 to 6]",
            "Current utilization: 0%",
            "Estimated time: 4.0 hours",
            "Speed: 5000 units/hr (base speed)",
            "Staffing: 1 person",
        )

    def test_rules_change_speed_not_score(self, criteria, inserter, large_envelopes, settings):
        (match,) = find_matching_machines(criteria, [inserter], rules=[large_envelopes], settings=settings)
        assert match.speed_with_modifiers == 4000
        assert match.estimated_hours == 5.0
        assert match.staffing_required == 2
        assert match.match_score == 85
        assert match.rule_evaluation.matched_rule is large_envelopes
        assert "Speed: 4000 units/hr (with rule modifiers)" in match.match_reasons
        assert "Staffing: 2 people" in match.match_reasons

    def test_bookings_lower_score(self, criteria, inserter, settings):
        booked = [Assignment(machines_id=(1,), start_date=0, due_date=2 * DAY_MS)]
        (match,) = find_matching_machines(criteria, [inserter], booked, settings=settings)
        assert match.current_utilization == 20
        assert match.match_score == 79

    def test_dict_assignments(self, criteria, inserter, settings):
        booked = [{"machines_id": [1], "start_date": 0, "due_date": 2 * DAY_MS}]
        (match,) = find_matching_machines(criteria, [inserter], booked, settings=settings)
        assert match.current_utilization == 20

    def test_cannot_handle_lists_only_failures(self, criteria, small_inserter, settings):
        (match,) = find_matching_machines(criteria, [small_inserter], settings=settings)
        assert match.match_reasons[:2] == (
            "Cannot handle job:",
            "  ✗ Machine doesn't support paper_size: 10x13 (supports: 6x9)",
        )
        assert match.match_reasons[2] == "Current utilization: 0%"

    def test_other_process_type_disqualified(self, criteria, folder, settings):
        (match,) = find_matching_machines(criteria, [folder], settings=settings)
        assert match.can_handle is False
        assert match.match_score == 0
        assert match.estimated_hours == 0
        assert match.match_reasons == (
            "Cannot handle job:",
            "  ✗ Machine process type (fold) doesn't match job requirement (insert)",
        )

    def test_facility_filter(self, criteria, machines, settings):
        scoped = dataclasses.replace(criteria, facility_id=2)
        ranked = find_matching_machines(scoped, machines, settings=settings)
        assert [m.machine.id for m in ranked] == [2]

    def test_no_candidates(self, criteria, settings):
        assert find_matching_machines(criteria, [], settings=settings) == []

    def test_machine_row_without_id(self, criteria, settings):
        with pytest.raises(InvalidInputError, match="no id"):
            find_matching_machines(criteria, [{"process_type_key": "insert"}], settings=settings)

    def test_assignment_row_without_due_date(self, criteria, inserter, settings):
        booked = [{"machines_id": [1], "start_date": 0}]
        with pytest.raises(InvalidInputError, match="Malformed assignment"):
            find_matching_machines(criteria, [inserter], booked, settings=settings)


class TestFindBestMachine:

    def test_best(self, criteria, machines, settings):
        assert find_best_machine(criteria, machines, settings=settings).machine.id == 1

    def test_none_capable(self, criteria, small_inserter, folder, settings):
        assert find_best_machine(criteria, [small_inserter, folder], settings=settings) is None


class TestRankMatches:

    def _match(self, machine_id, score, can_handle):
        return MachineMatch(
            machine=Machine(machine_id, "insert"),
            match_score=score,
            can_handle=can_handle,
            match_reasons=(),
            estimated_hours=0,
            current_utilization=0,
            speed_with_modifiers=0,
            staffing_required=1,
        )

    def test_order(self):
        ranked = rank_matches([
            self._match(1, 95, False),
            self._match(2, 40, True),
            self._match(3, 70, True),
        ])
        assert [m.machine.id for m in ranked] == [3, 2, 1]
