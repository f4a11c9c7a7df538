"""Work-order filtering shared by the dashboard, the export and scenario replay.

Pure functions: the same records + FilterSpec always produce the same subset,
in the same relative order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from maintlytics.analytics.work_orders import (
    ALL,
    FilterSpec,
    WorkOrder,
    ensure_records,
    period_of,
)

logger = logging.getLogger(__name__)


@dataclass
class FilterOptions:
    """Choices offered by the filter bar, derived from the full dataset."""

    assets: list[tuple[str, str]]  # (code, description), sorted by description
    statuses: list[str]
    periods: list[str]  # newest first


def matches(record: WorkOrder, spec: FilterSpec) -> bool:
    """Return True when a record satisfies every condition of the spec.

    A record whose inclusion date cannot be parsed still honours the asset
    and status conditions, but only ever matches the "all" period.
    """
    match_asset = not spec.asset_codes or record.asset_code in spec.asset_codes
    match_status = spec.status == ALL or record.status == spec.status

    period = period_of(record.inclusion_date)
    if period is None:
        return match_asset and match_status and spec.period == ALL

    match_period = spec.period == ALL or period == spec.period
    return match_asset and match_status and match_period


def apply_filters(records: list[WorkOrder], spec: FilterSpec) -> list[WorkOrder]:
    """Return the records matching ``spec``, preserving input order."""
    ensure_records(records)
    if spec.is_unrestricted:
        return list(records)

    filtered = [r for r in records if matches(r, spec)]
    logger.debug("Filter kept %d of %d work orders", len(filtered), len(records))
    return filtered


def filter_options(records: list[WorkOrder]) -> FilterOptions:
    """Collect the assets, statuses and periods present in the dataset."""
    ensure_records(records)

    descriptions: dict[str, str] = {}
    statuses: set[str] = set()
    periods: set[str] = set()
    for record in records:
        descriptions.setdefault(record.asset_code, record.asset_description)
        statuses.add(record.status)
        period = period_of(record.inclusion_date)
        if period is not None:
            periods.add(period)

    return FilterOptions(
        assets=sorted(descriptions.items(), key=lambda item: item[1].lower()),
        statuses=sorted(statuses),
        periods=sorted(periods, reverse=True),
    )


def toggle_asset(spec: FilterSpec, asset_code: str) -> FilterSpec:
    """Return a copy of ``spec`` with ``asset_code`` added or removed."""
    codes = set(spec.asset_codes)
    if asset_code in codes:
        codes.remove(asset_code)
    else:
        codes.add(asset_code)
    return FilterSpec(asset_codes=frozenset(codes), period=spec.period, status=spec.status)
