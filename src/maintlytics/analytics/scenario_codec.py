"""Saved filter scenarios: creation, replay reconciliation and JSON persistence format.

A scenario is a named FilterSpec. Replaying one against a newly loaded
dataset may find asset codes that no longer exist; those are reported back
to the caller and dropped from the effective filter instead of silently
filtering everything out.

Persisted format (a JSON array)::

    [{"id": "...", "name": "...", "createdAt": "2024-01-02T10:00:00.000Z",
      "filters": {"machineCodes": ["M1"], "period": "all", "status": "all"}}]
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from config.settings import settings
from maintlytics.analytics.work_orders import ALL, FilterSpec

logger = logging.getLogger(__name__)

SCENARIO_HISTORY_LIMIT = settings.scenario_history_limit


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SavedScenario:
    id: str
    name: str
    filters: FilterSpec
    created_at: str  # ISO-8601, UTC


@dataclass
class ReconciledScenario:
    """Filters to apply plus the scenario asset codes missing from the dataset."""

    filters: FilterSpec
    dropped_codes: list[str]


# ---------------------------------------------------------------------------
# Scenario lifecycle
# ---------------------------------------------------------------------------


def save_scenario(name: str, filters: FilterSpec) -> SavedScenario:
    """Snapshot the active filters under a new id and the current time."""
    return SavedScenario(
        id=str(uuid.uuid4()),
        name=name,
        filters=FilterSpec(
            asset_codes=frozenset(filters.asset_codes),
            period=filters.period,
            status=filters.status,
        ),
        created_at=_utc_now_iso(),
    )


def add_scenario(
    scenarios: list[SavedScenario],
    scenario: SavedScenario,
    limit: int = SCENARIO_HISTORY_LIMIT,
) -> list[SavedScenario]:
    """Return a new list with ``scenario`` first (most recent first)."""
    updated = [scenario, *scenarios]
    if limit > 0:
        updated = updated[:limit]
    return updated


def delete_scenario(scenarios: list[SavedScenario], scenario_id: str) -> list[SavedScenario]:
    """Return a new list without ``scenario_id``. Unknown ids are a no-op."""
    return [s for s in scenarios if s.id != scenario_id]


def reconcile_scenario(
    scenario: SavedScenario,
    dataset_asset_codes: Iterable[str],
) -> ReconciledScenario:
    """Restrict a scenario's asset codes to those present in the loaded dataset.

    With an empty dataset there is nothing to reconcile against, so the
    scenario's filters are returned unchanged.
    """
    available = set(dataset_asset_codes)
    if not available:
        return ReconciledScenario(filters=scenario.filters, dropped_codes=[])

    dropped = sorted(c for c in scenario.filters.asset_codes if c not in available)
    if dropped:
        logger.warning(
            "Scenario %r references %d asset code(s) missing from the dataset: %s",
            scenario.name, len(dropped), ", ".join(dropped),
        )

    kept = frozenset(c for c in scenario.filters.asset_codes if c in available)
    filters = FilterSpec(
        asset_codes=kept,
        period=scenario.filters.period,
        status=scenario.filters.status,
    )
    return ReconciledScenario(filters=filters, dropped_codes=dropped)


# ---------------------------------------------------------------------------
# JSON persistence format
# ---------------------------------------------------------------------------


def filters_to_dict(filters: FilterSpec) -> dict:
    return {
        "machineCodes": sorted(filters.asset_codes),
        "period": filters.period,
        "status": filters.status,
    }


def filters_from_dict(data: dict) -> FilterSpec:
    codes = data.get("machineCodes") or []
    return FilterSpec(
        asset_codes=frozenset(str(c) for c in codes),
        period=str(data.get("period") or ALL),
        status=str(data.get("status") or ALL),
    )


def scenario_to_dict(scenario: SavedScenario) -> dict:
    return {
        "id": scenario.id,
        "name": scenario.name,
        "filters": filters_to_dict(scenario.filters),
        "createdAt": scenario.created_at,
    }


def scenario_from_dict(data: dict) -> SavedScenario:
    """Build a SavedScenario from its persisted dict. Raises KeyError/TypeError on bad shape."""
    if not isinstance(data["filters"], dict):
        raise TypeError("scenario filters must be an object")
    return SavedScenario(
        id=str(data["id"]),
        name=str(data["name"]),
        filters=filters_from_dict(data["filters"]),
        created_at=str(data["createdAt"]),
    )


def serialize_scenarios(scenarios: list[SavedScenario]) -> str:
    return json.dumps([scenario_to_dict(s) for s in scenarios], ensure_ascii=False)


def parse_scenarios(payload: str) -> list[SavedScenario]:
    """Strictly parse a persisted scenario list.

    Raises ValueError when the payload is not a JSON array. Individual
    malformed entries are skipped.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ValueError("Saved-scenario payload is not valid JSON") from exc
    if not isinstance(data, list):
        raise ValueError("Saved-scenario payload must be a JSON array")
    return _scenarios_from_list(data)


def deserialize_scenarios(payload: str | None) -> list[SavedScenario]:
    """Load a persisted scenario list, treating a corrupt payload as empty."""
    if not payload:
        return []
    try:
        return parse_scenarios(payload)
    except ValueError:
        logger.warning("Discarding corrupt saved-scenario payload")
        return []


def _scenarios_from_list(data: list) -> list[SavedScenario]:
    scenarios: list[SavedScenario] = []
    for item in data:
        try:
            scenarios.append(scenario_from_dict(item))
        except (KeyError, TypeError):
            logger.warning("Skipping malformed saved scenario: %r", item)
    return scenarios


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
