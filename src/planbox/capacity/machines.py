from __future__ import annotations

from typing import Any, Iterable, Mapping

from planbox.config import AvailabilityConfig, get_settings

from .estimates import parse_speed_per_hour


def _field(machine: Any, name: str) -> Any:
    if isinstance(machine, Mapping):
        return machine.get(name)
    return getattr(machine, name, None)


def _combined_speed(machines: Iterable[Any]) -> float:
    return sum(parse_speed_per_hour(_field(m, "speed_hr")) for m in machines)


def calculate_multi_machine_time_estimate(quantity: float, machines: Iterable[Any]) -> float:
    """Hours to run ``quantity`` on several machines at once: quantity over their combined speed."""
    rate = _combined_speed(machines)
    if rate <= 0:
        return 0.0
    return quantity / rate


def distribute_hours_across_machines(total_hours: float, machines: Iterable[Any]) -> dict[Any, float]:
    """
    Split a job's hours between the machines it is assigned to.

    Each machine gets the share of ``total_hours`` its speed has of the
    combined speed. When no machine has a readable speed the hours are
    split equally. Keyed by machine id.
    """
    machines = list(machines)
    if not machines:
        return {}
    rate = _combined_speed(machines)
    if rate <= 0:
        equal = total_hours / len(machines)
        return {_field(m, "id"): equal for m in machines}
    return {
        _field(m, "id"): total_hours * parse_speed_per_hour(_field(m, "speed_hr")) / rate
        for m in machines
    }


def calculate_daily_machine_capacity(machine: Any, config: AvailabilityConfig | None = None) -> float:
    """
    Hours a machine offers per day.

    A positive ``shift_capacity`` on the machine scales the standard
    day; otherwise the standard day applies.
    """
    config = config or get_settings().availability
    multiplier = _field(machine, "shift_capacity")
    if multiplier:
        return float(multiplier) * config.hours_per_day
    return config.hours_per_day


def calculate_total_capacity(machines: Iterable[Any], config: AvailabilityConfig | None = None) -> float:
    config = config or get_settings().availability
    return sum(calculate_daily_machine_capacity(m, config) for m in machines)


def is_over_capacity(allocated: float, capacity: float) -> bool:
    return allocated > capacity
