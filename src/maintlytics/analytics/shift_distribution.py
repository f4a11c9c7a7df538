"""Demand distribution of work orders across the three daily shifts."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import settings
from maintlytics.analytics.work_orders import (
    WorkOrder,
    ensure_records,
    opened_hour,
    parse_date,
    round_half_up,
)

SHIFT_A_START = settings.shift_a_start
SHIFT_B_START = settings.shift_b_start
SHIFT_C_START = settings.shift_c_start


@dataclass
class ShiftBucket:
    """Orders opened within one shift window."""

    shift: str  # "A", "B" or "C"
    window: str  # e.g. "08:00 - 18:00"
    count: int
    average: float  # orders per day, 2 decimals


@dataclass
class ShiftReport:
    shifts: list[ShiftBucket]  # always A, B, C
    total_days: int
    total_orders: int
    full_day_average: float


def shift_of(hour: int) -> str:
    """Map an opening hour to its shift. Shift C wraps around midnight."""
    if SHIFT_A_START <= hour < SHIFT_B_START:
        return "A"
    if SHIFT_B_START <= hour < SHIFT_C_START:
        return "B"
    return "C"


def compute_shift_distribution(records: list[WorkOrder]) -> ShiftReport | None:
    """Count orders per shift and average them over the distinct opening days.

    Returns None when there are no records.
    """
    ensure_records(records)
    if not records:
        return None

    days = {r.opened_date for r in records if parse_date(r.opened_date) is not None}
    total_days = len(days) or 1

    counts = {"A": 0, "B": 0, "C": 0}
    for record in records:
        counts[shift_of(opened_hour(record.opened_time))] += 1

    windows = {
        "A": _window(SHIFT_A_START, SHIFT_B_START),
        "B": _window(SHIFT_B_START, SHIFT_C_START),
        "C": _window(SHIFT_C_START, SHIFT_A_START),
    }
    shifts = [
        ShiftBucket(
            shift=name,
            window=windows[name],
            count=counts[name],
            average=round_half_up(counts[name] / total_days, 2),
        )
        for name in ("A", "B", "C")
    ]

    return ShiftReport(
        shifts=shifts,
        total_days=total_days,
        total_orders=len(records),
        full_day_average=round_half_up(len(records) / total_days, 2),
    )


def _window(start: int, end: int) -> str:
    return f"{start:02d}:00 - {end:02d}:00"
