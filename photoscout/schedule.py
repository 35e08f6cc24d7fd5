"""
Schedule calculation utilities for PhotoScout.

This module turns an ordered trip into a time‑based itinerary. Given
travel durations between consecutive stops and how long the
photographer plans to spend at each one, it produces arrival and
departure times and flags stops where the projected arrival misses the
planned arrival (for example a sunrise shot).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence

from photoscout.trip import TripStop

# Arriving later than this after the planned arrival counts as late.
LATE_TOLERANCE = timedelta(minutes=15)


@dataclass
class StopSchedule:
    index: int
    arrival: datetime
    departure: datetime
    status: str  # "ok", "early", "late"


def parse_time_string(t: str) -> time:
    """Parse a HH:MM formatted time string into a datetime.time object."""
    try:
        h, m = map(int, t.strip().split(":")[:2])
        return time(hour=h, minute=m)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid time {t!r}, expected HH:MM") from exc


def _arrival_status(arrival: datetime, planned: Optional[str], day: date) -> str:
    if not planned:
        return "ok"
    planned_dt = datetime.combine(day, parse_time_string(planned))
    if arrival < planned_dt:
        return "early"
    if arrival > planned_dt + LATE_TOLERANCE:
        return "late"
    return "ok"


def schedule_trip(
    stops: Sequence[TripStop],
    leg_durations_s: Sequence[float],
    departure_time_str: str,
    day: Optional[date] = None,
) -> List[StopSchedule]:
    """Generate a schedule for stops visited in the given order.

    Args:
        stops: Stops in visiting order.
        leg_durations_s: Travel time in seconds from each stop to the
            next; ``len(stops) - 1`` entries.
        departure_time_str: Arrival time at the first stop as HH:MM.
        day: Date of the trip (default today).

    Returns:
        A list of ``StopSchedule`` objects, one per stop.

    Raises:
        ValueError: If the number of legs does not match the stops or a
            time string is malformed.
    """
    if stops and len(leg_durations_s) != len(stops) - 1:
        raise ValueError(f"expected {len(stops) - 1} leg durations, got {len(leg_durations_s)}")
    day = day or date.today()
    current_time = datetime.combine(day, parse_time_string(departure_time_str))

    schedule: List[StopSchedule] = []
    for idx, stop in enumerate(stops):
        arrival_time = current_time
        status = _arrival_status(arrival_time, stop.planned_arrival, day)
        departure_time = arrival_time + timedelta(minutes=stop.planned_duration_minutes)
        schedule.append(StopSchedule(index=idx, arrival=arrival_time, departure=departure_time, status=status))
        if idx < len(stops) - 1:
            current_time = departure_time + timedelta(seconds=leg_durations_s[idx])
    return schedule
