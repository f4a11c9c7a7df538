"""Most frequent defect types among work orders."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import settings
from maintlytics.analytics.work_orders import WorkOrder, ensure_records

DEFECT_RANKING_LIMIT = settings.defect_ranking_limit


@dataclass
class RankedDefect:
    defect: str
    count: int


def rank_defect_frequency(
    records: list[WorkOrder],
    limit: int = DEFECT_RANKING_LIMIT,
) -> list[RankedDefect]:
    """Count orders per defect description, most frequent first.

    Blank descriptions are grouped under the "not informed" sentinel; ties
    keep first-encounter order.
    """
    ensure_records(records)

    counts: dict[str, int] = {}
    for record in records:
        key = record.defect_label
        counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda x: -x[1])[:limit]
    return [RankedDefect(defect=name, count=count) for name, count in ranked]
