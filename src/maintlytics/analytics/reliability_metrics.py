"""Reliability KPIs for a set of work orders: MTTR, MTBF and availability.

MTTR is measured in minutes per closed order, MTBF in hours between
successive orders on the same asset, and availability models each failure
cycle as MTBF of uptime followed by MTTR of repair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from config.settings import settings
from maintlytics.analytics.work_orders import (
    WorkOrder,
    ensure_records,
    parse_date,
    round_half_up,
)

logger = logging.getLogger(__name__)

TREND_VOLUME_DIVISOR = settings.trend_volume_divisor


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class ReliabilityMetrics:
    """Dashboard KPIs. Display values are rounded to 1 decimal."""

    total_orders: int
    closed_orders: int
    total_downtime_minutes: float
    mttr_minutes: float
    mtbf_hours: float
    availability_pct: float
    os_trend: str  # "good" or "bad"
    qualifying_assets: int  # assets with >= 2 dated orders (MTBF divisor)
    mttr_exact: float
    mtbf_exact: float
    availability_exact: float


@dataclass
class KpiGoals:
    """Targets the dashboard compares each KPI against."""

    mttr_minutes: float = settings.goal_mttr_minutes  # maximum
    mtbf_hours: float = settings.goal_mtbf_hours  # minimum
    availability_pct: float = settings.goal_availability_pct  # minimum


@dataclass
class GoalAssessment:
    mttr: str  # "good" or "bad"
    mtbf: str
    availability: str


# ---------------------------------------------------------------------------
# 1. compute_reliability_metrics
# ---------------------------------------------------------------------------


def compute_reliability_metrics(
    records: list[WorkOrder],
    total_dataset_size: int,
) -> ReliabilityMetrics | None:
    """Compute MTTR, MTBF, availability and the volume trend.

    Args:
        records: Filtered work orders.
        total_dataset_size: Size of the unfiltered dataset, used by the
            volume-spike heuristic.

    Returns:
        ReliabilityMetrics, or None when there are no records.
    """
    ensure_records(records)
    if not records:
        return None

    closed_orders = sum(1 for r in records if r.is_closed)
    total_downtime = sum(r.duration_minutes for r in records)
    mttr = total_downtime / closed_orders if closed_orders > 0 else 0.0

    mtbf, qualifying = _mean_time_between_failures(records)

    downtime_hours = mttr / 60
    cycle = mtbf + downtime_hours
    availability = mtbf / cycle * 100 if cycle > 0 else 0.0

    trend = "bad" if len(records) > total_dataset_size / TREND_VOLUME_DIVISOR else "good"

    return ReliabilityMetrics(
        total_orders=len(records),
        closed_orders=closed_orders,
        total_downtime_minutes=total_downtime,
        mttr_minutes=round_half_up(mttr, 1),
        mtbf_hours=round_half_up(mtbf, 1),
        availability_pct=round_half_up(availability, 1),
        os_trend=trend,
        qualifying_assets=qualifying,
        mttr_exact=mttr,
        mtbf_exact=mtbf,
        availability_exact=availability,
    )


def _mean_time_between_failures(records: list[WorkOrder]) -> tuple[float, int]:
    """Average, across assets, of each asset's mean gap between openings (hours).

    Orders whose opened date does not parse are left out of the gap chain;
    an asset needs at least two dated orders to count.
    """
    by_asset: dict[str, list[datetime]] = {}
    skipped = 0
    for record in records:
        opened = parse_date(record.opened_date)
        dates = by_asset.setdefault(record.asset_code, [])
        if opened is None:
            skipped += 1
            continue
        dates.append(opened)

    if skipped:
        logger.debug("MTBF skipped %d work order(s) with unparseable opened date", skipped)

    total = 0.0
    qualifying = 0
    for dates in by_asset.values():
        if len(dates) < 2:
            continue
        ordered = sorted(dates)
        gaps = sum(
            (ordered[i] - ordered[i - 1]).total_seconds() for i in range(1, len(ordered))
        )
        total += gaps / (len(ordered) - 1) / 3600
        qualifying += 1

    mtbf = total / qualifying if qualifying > 0 else 0.0
    return mtbf, qualifying


# ---------------------------------------------------------------------------
# 2. evaluate_goals
# ---------------------------------------------------------------------------


def evaluate_goals(metrics: ReliabilityMetrics, goals: KpiGoals | None = None) -> GoalAssessment:
    """Compare displayed KPIs against targets (MTTR below, MTBF above, availability at least)."""
    goals = goals or KpiGoals()
    return GoalAssessment(
        mttr="good" if metrics.mttr_minutes < goals.mttr_minutes else "bad",
        mtbf="good" if metrics.mtbf_hours > goals.mtbf_hours else "bad",
        availability="good" if metrics.availability_pct >= goals.availability_pct else "bad",
    )
