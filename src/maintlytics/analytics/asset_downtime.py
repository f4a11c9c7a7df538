"""Ranking of assets by accumulated downtime."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import settings
from maintlytics.analytics.work_orders import WorkOrder, ensure_records, round_half_up

ASSET_RANKING_LIMIT = settings.asset_ranking_limit
HOURS_LABEL_THRESHOLD = settings.hours_label_threshold_minutes


@dataclass
class RankedAsset:
    asset_code: str
    name: str  # first token of the asset description
    total_downtime_minutes: float
    order_count: int
    label: str  # "45 min" or "2.5 h"


def rank_asset_downtime(
    records: list[WorkOrder],
    limit: int = ASSET_RANKING_LIMIT,
) -> list[RankedAsset]:
    """Sum downtime per asset and return the worst ``limit`` assets.

    Ties keep the order in which assets were first seen.
    """
    ensure_records(records)

    assets: dict[str, RankedAsset] = {}
    for record in records:
        item = assets.get(record.asset_code)
        if item is None:
            item = RankedAsset(
                asset_code=record.asset_code,
                name=record.short_label,
                total_downtime_minutes=0.0,
                order_count=0,
                label="",
            )
            assets[record.asset_code] = item
        item.total_downtime_minutes += record.duration_minutes
        item.order_count += 1

    ranked = sorted(assets.values(), key=lambda a: -a.total_downtime_minutes)[:limit]
    for item in ranked:
        item.label = downtime_label(item.total_downtime_minutes)
    return ranked


def downtime_label(minutes: float) -> str:
    """Human label: minutes below the threshold, hours with 1 decimal above."""
    if minutes < HOURS_LABEL_THRESHOLD:
        return f"{minutes:g} min"
    return f"{round_half_up(minutes / 60, 1):.1f} h"
