"""Per-asset order listing for the technical dossier export."""

from __future__ import annotations

from dataclasses import dataclass

from maintlytics.analytics.work_orders import WorkOrder, ensure_records, parse_date

SORT_FIELDS = ("opened_date", "status", "duration_minutes")


@dataclass
class AssetDossier:
    asset_code: str
    description: str
    orders: list[WorkOrder]

    @property
    def total_downtime_minutes(self) -> float:
        return sum(o.duration_minutes for o in self.orders)


def group_orders_by_asset(
    records: list[WorkOrder],
    search: str = "",
    sort_field: str = "opened_date",
    sort_order: str = "desc",
) -> list[AssetDossier]:
    """Group orders per asset, optionally searching and sorting them.

    Args:
        records: Filtered work orders.
        search: Case-insensitive match on the asset description, or a
            substring of the asset code.
        sort_field: One of ``SORT_FIELDS``.
        sort_order: "asc" or "desc".

    Returns:
        Dossiers sorted by asset description. Orders without a parseable
        opened date are listed last when sorting by date.
    """
    ensure_records(records)
    if sort_field not in SORT_FIELDS:
        raise ValueError(f"sort_field must be one of {SORT_FIELDS}, got {sort_field!r}")
    if sort_order not in ("asc", "desc"):
        raise ValueError(f"sort_order must be 'asc' or 'desc', got {sort_order!r}")

    groups: dict[str, AssetDossier] = {}
    for record in records:
        if record.asset_code not in groups:
            groups[record.asset_code] = AssetDossier(
                asset_code=record.asset_code,
                description=record.asset_description,
                orders=[],
            )
        groups[record.asset_code].orders.append(record)

    needle = search.lower()
    dossiers = [
        d for d in groups.values()
        if needle in d.description.lower() or search in d.asset_code
    ]
    for dossier in dossiers:
        dossier.orders = _sort_orders(dossier.orders, sort_field, sort_order == "desc")

    return sorted(dossiers, key=lambda d: d.description.lower())


def _sort_orders(orders: list[WorkOrder], sort_field: str, descending: bool) -> list[WorkOrder]:
    if sort_field == "opened_date":
        dated = [(parse_date(o.opened_date), o) for o in orders]
        ordered = sorted(
            (pair for pair in dated if pair[0] is not None),
            key=lambda pair: pair[0],
            reverse=descending,
        )
        undated = [o for ts, o in dated if ts is None]
        return [o for _, o in ordered] + undated

    if sort_field == "status":
        return sorted(orders, key=lambda o: o.status, reverse=descending)
    return sorted(orders, key=lambda o: o.duration_minutes, reverse=descending)
