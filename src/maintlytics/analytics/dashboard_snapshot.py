"""Dashboard snapshot — every aggregate the dashboard and the export render.

Pure function: filters once, then feeds the same subset to each calculator.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from maintlytics.analytics.asset_downtime import RankedAsset, rank_asset_downtime
from maintlytics.analytics.defect_frequency import RankedDefect, rank_defect_frequency
from maintlytics.analytics.filter_engine import apply_filters
from maintlytics.analytics.reliability_metrics import (
    GoalAssessment,
    KpiGoals,
    ReliabilityMetrics,
    compute_reliability_metrics,
    evaluate_goals,
)
from maintlytics.analytics.shift_distribution import ShiftReport, compute_shift_distribution
from maintlytics.analytics.work_orders import FilterSpec, WorkOrder

logger = logging.getLogger(__name__)


@dataclass
class DashboardSnapshot:
    dataset_size: int
    filtered_count: int
    metrics: ReliabilityMetrics | None
    goals: GoalAssessment | None
    shifts: ShiftReport | None
    top_assets: list[RankedAsset]
    top_defects: list[RankedDefect]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_dashboard_snapshot(
    records: list[WorkOrder],
    spec: FilterSpec,
    goals: KpiGoals | None = None,
) -> DashboardSnapshot:
    """Filter the full dataset and compute every dashboard aggregate."""
    filtered = apply_filters(records, spec)
    metrics = compute_reliability_metrics(filtered, len(records))

    snapshot = DashboardSnapshot(
        dataset_size=len(records),
        filtered_count=len(filtered),
        metrics=metrics,
        goals=evaluate_goals(metrics, goals) if metrics is not None else None,
        shifts=compute_shift_distribution(filtered),
        top_assets=rank_asset_downtime(filtered),
        top_defects=rank_defect_frequency(filtered),
    )
    logger.info(
        "Dashboard snapshot: %d of %d work orders, %d asset(s) ranked",
        snapshot.filtered_count, snapshot.dataset_size, len(snapshot.top_assets),
    )
    return snapshot
