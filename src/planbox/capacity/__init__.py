"""
planbox.capacity
~~~~~~~~~~~~~~~~

Hours-based capacity estimates for a machine over a job window.

The model is coarse: a window offers ``hours_per_shift *
shifts_per_day`` hours per day (16 by default), and every existing
assignment on the machine that overlaps the window is charged a flat
``assumed_hours_per_assigned_day`` (8 by default) per overlap day.

Basic usage::

    from planbox.capacity import calculate_machine_availability, calculate_time_estimate

    DAY = 24 * 60 * 60 * 1000
    booked = [{"machines_id": [7], "start_date": 0, "due_date": 2 * DAY}]
    calculate_machine_availability(7, 0, 5 * DAY, booked)    # 5*16 - 2*8 = 64.0
    calculate_time_estimate(12000, "4,000/hr")                # 3.0

Public API
----------
Assignment                      Existing booking used for availability.
calculate_machine_availability  Free hours on a machine in a window.
calculate_current_utilization   Allocated/available as a capped percent.
calculate_time_estimate         Quantity / speed in hours.
parse_speed_per_hour            Lenient speed parsing ("10,000/hr").
window_days, window_hours       Window size in days and offered hours.
distribute_hours_across_days    Even hours per calendar day of a window.

Several machines on one job
---------------------------
calculate_multi_machine_time_estimate  Quantity / combined speed in hours.
distribute_hours_across_machines       Hours split by speed share.
calculate_daily_machine_capacity       Hours per day, scaled by shift_capacity.
calculate_total_capacity               Daily hours summed over machines.
is_over_capacity                       Allocated hours above capacity.
"""

from planbox.capacity.availability import (
    DAY_MS,
    Assignment,
    allocated_hours,
    calculate_current_utilization,
    calculate_machine_availability,
    distribute_hours_across_days,
    window_days,
    window_hours,
)
from planbox.capacity.estimates import calculate_time_estimate, parse_speed_per_hour
from planbox.capacity.machines import (
    calculate_daily_machine_capacity,
    calculate_multi_machine_time_estimate,
    calculate_total_capacity,
    distribute_hours_across_machines,
    is_over_capacity,
)

__all__ = [
    "DAY_MS",
    "Assignment",
    "allocated_hours",
    "calculate_current_utilization",
    "calculate_daily_machine_capacity",
    "calculate_machine_availability",
    "calculate_multi_machine_time_estimate",
    "calculate_time_estimate",
    "calculate_total_capacity",
    "distribute_hours_across_days",
    "distribute_hours_across_machines",
    "is_over_capacity",
    "parse_speed_per_hour",
    "window_days",
    "window_hours",
]
