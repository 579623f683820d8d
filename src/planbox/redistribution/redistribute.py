from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Sequence

from planbox._exceptions import InvalidInputError
from planbox.calendar import Period

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EvenSplit:
    quantities: list[int]
    locks: list[bool]


def _check_index(periods: Sequence[Period], index: int) -> None:
    if not 0 <= index < len(periods):
        raise InvalidInputError(f"Period index {index} is out of range for {len(periods)} periods.")


def reconciliation_gap(periods: Sequence[Period], total_quantity: float) -> float:
    """What is still missing (positive) or in excess (negative) against the total."""
    return total_quantity - sum(p.quantity for p in periods)


def forward_candidates(periods: Sequence[Period], edited_index: int) -> list[int]:
    return [i for i, p in enumerate(periods) if i > edited_index and not p.is_locked]


def backward_candidates(periods: Sequence[Period], edited_index: int) -> list[int]:
    """Unlocked periods before the edit; the caller confirms before they absorb it."""
    return [i for i, p in enumerate(periods) if i < edited_index and not p.is_locked]


def redistribute_quantity(
    periods: Sequence[Period],
    edited_index: int,
    new_value: float,
    total_quantity: float,
    allow_backward: bool = False,
) -> list[Period]:
    """
    Apply a manual edit to one period and rebalance the others.

    The edited period takes ``new_value`` and becomes locked. The gap to
    ``total_quantity`` is shared by the unlocked periods after it; only if
    there are none, and ``allow_backward`` is set, by every other unlocked
    period. Each absorber gets an equal whole share, the first few one
    extra unit and the first one any fractional part of the gap. No period
    drops below zero. With no absorber left the edit stands alone and the
    total does not reconcile.

    Returns new periods; the input is not modified.
    """
    _check_index(periods, edited_index)
    result = list(periods)
    result[edited_index] = dataclasses.replace(
        result[edited_index], quantity=new_value, is_locked=True
    )

    difference = reconciliation_gap(result, total_quantity)
    if difference == 0:
        return result

    pool = forward_candidates(result, edited_index)
    if not pool and allow_backward:
        pool = [i for i, p in enumerate(result) if i != edited_index and not p.is_locked]
    if not pool:
        logger.debug("No unlocked period can absorb %s; total left unreconciled", difference)
        return result

    # Whole units are split with divmod; a fractional residue goes to the first absorber.
    whole = math.floor(difference)
    fraction = difference - whole
    base, remainder = divmod(whole, len(pool))
    for position, i in enumerate(pool):
        adjustment = base + (1 if position < remainder else 0)
        if position == 0 and fraction:
            adjustment += fraction
        result[i] = dataclasses.replace(result[i], quantity=max(0, result[i].quantity + adjustment))
    return result


def reset_to_even_distribution(period_count: int, total_quantity: int) -> EvenSplit:
    """Even whole-unit split with every lock cleared; the first periods take the remainder."""
    if period_count < 1:
        raise InvalidInputError("Period count must be at least 1.")
    base, remainder = divmod(total_quantity, period_count)
    return EvenSplit(
        quantities=[base + 1 if i < remainder else base for i in range(period_count)],
        locks=[False] * period_count,
    )


def toggle_lock(periods: Sequence[Period], index: int) -> list[Period]:
    _check_index(periods, index)
    result = list(periods)
    result[index] = dataclasses.replace(result[index], is_locked=not result[index].is_locked)
    return result


def unlock_all(periods: Sequence[Period]) -> list[Period]:
    return [dataclasses.replace(p, is_locked=False) if p.is_locked else p for p in periods]
