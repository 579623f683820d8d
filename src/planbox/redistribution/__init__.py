"""
planbox.redistribution
~~~~~~~~~~~~~~~~~~~~~~

Absorb a manual edit to one period by rebalancing the periods the user
has not locked, keeping the job's grand total.

Basic usage::

    from dataclasses import replace
    from planbox.calendar import calculate_periods
    from planbox.redistribution import redistribute_quantity, reset_to_even_distribution

    weeks = calculate_periods(start, end, "weekly")    # three job weeks
    even = reset_to_even_distribution(len(weeks), 300) # quantities [100, 100, 100]
    periods = [replace(w, quantity=q) for w, q in zip(weeks, even.quantities)]
    edited = redistribute_quantity(periods, 0, 150, 300)
    [p.quantity for p in edited]                       # [150, 75, 75]
    edited[0].is_locked                                # True

Edits flow forward: only unlocked periods after the edited one absorb the
difference. When none are left, ``allow_backward=True`` lets earlier
unlocked periods absorb it; ``backward_candidates`` tells the caller which
ones would change so it can ask first.
"""

from planbox.redistribution.redistribute import (
    EvenSplit,
    backward_candidates,
    forward_candidates,
    reconciliation_gap,
    redistribute_quantity,
    reset_to_even_distribution,
    toggle_lock,
    unlock_all,
)

__all__ = [
    "EvenSplit",
    "backward_candidates",
    "forward_candidates",
    "reconciliation_gap",
    "redistribute_quantity",
    "reset_to_even_distribution",
    "toggle_lock",
    "unlock_all",
]
