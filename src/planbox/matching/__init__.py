"""
planbox.matching
~~~~~~~~~~~~~~~~

Rank candidate machines for a job.

Each candidate is checked requirement by requirement (see
:mod:`planbox.capabilities`), run through the rule set for its effective
speed and staffing (see :mod:`planbox.rules`), charged against existing
bookings for utilization (see :mod:`planbox.capacity`), and given a
composite score. Machines that can handle the job always rank above
those that cannot.

Basic usage::

    from planbox.matching import MatchingCriteria, find_best_machine

    criteria = MatchingCriteria(
        process_type="insert",
        job_requirements={"paper_size": "10x13", "pockets": 4},
        quantity=50_000,
        start_date=start_ms,
        due_date=due_ms,
    )
    best = find_best_machine(criteria, machines, assignments, rules)
    if best is not None:
        best.machine.id, best.match_score, best.estimated_hours
"""

from planbox.matching.matcher import (
    can_machine_handle_job,
    find_best_machine,
    find_matching_machines,
    match_job_requirements_to_machine,
    rank_matches,
)
from planbox.matching.models import Machine, MachineMatch, MatchingCriteria, RequirementsMatch
from planbox.matching.scoring import score_machine

__all__ = [
    "Machine",
    "MachineMatch",
    "MatchingCriteria",
    "RequirementsMatch",
    "can_machine_handle_job",
    "find_best_machine",
    "find_matching_machines",
    "match_job_requirements_to_machine",
    "rank_matches",
    "score_machine",
]
