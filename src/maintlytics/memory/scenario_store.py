"""CRUD for saved filter scenarios.

The analytics core never touches storage; this module is the repository the
API calls to load and persist the scenario list.
"""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from maintlytics.analytics.scenario_codec import (
    SCENARIO_HISTORY_LIMIT,
    SavedScenario,
    filters_from_dict,
    filters_to_dict,
    parse_scenarios,
    serialize_scenarios,
)
from maintlytics.db.models import SavedScenarioRow

logger = logging.getLogger(__name__)


def _to_scenario(row: SavedScenarioRow) -> SavedScenario:
    return SavedScenario(
        id=row.id,
        name=row.name,
        filters=filters_from_dict(row.filters or {}),
        created_at=row.created_at,
    )


def _to_row(scenario: SavedScenario) -> SavedScenarioRow:
    return SavedScenarioRow(
        id=scenario.id,
        name=scenario.name,
        filters=filters_to_dict(scenario.filters),
        created_at=scenario.created_at,
    )


async def list_scenarios(session: AsyncSession) -> list[SavedScenario]:
    """All saved scenarios, most recently created first."""
    stmt = select(SavedScenarioRow).order_by(SavedScenarioRow.created_at.desc())
    result = await session.execute(stmt)
    return [_to_scenario(row) for row in result.scalars().all()]


async def get_scenario(session: AsyncSession, scenario_id: str) -> SavedScenario | None:
    result = await session.execute(
        select(SavedScenarioRow).where(SavedScenarioRow.id == scenario_id)
    )
    row = result.scalar_one_or_none()
    return _to_scenario(row) if row else None


async def add_scenario(
    session: AsyncSession,
    scenario: SavedScenario,
    limit: int = SCENARIO_HISTORY_LIMIT,
) -> SavedScenario:
    """Persist a newly saved scenario.

    With a positive ``limit`` only the ``limit`` most recent scenarios are
    kept; older rows are deleted in the same transaction.
    """
    session.add(_to_row(scenario))
    if limit > 0:
        await session.flush()
        overflow = (
            select(SavedScenarioRow.id)
            .order_by(SavedScenarioRow.created_at.desc())
            .offset(limit)
            .scalar_subquery()
        )
        result = await session.execute(
            delete(SavedScenarioRow).where(SavedScenarioRow.id.in_(overflow))
        )
        if result.rowcount:
            logger.info("Dropped %d scenario(s) beyond the history limit", result.rowcount)
    await session.commit()
    logger.info("Saved scenario %r (%s)", scenario.name, scenario.id)
    return scenario


async def delete_scenario(session: AsyncSession, scenario_id: str) -> bool:
    """Delete a scenario. Returns False when the id was unknown."""
    result = await session.execute(
        delete(SavedScenarioRow).where(SavedScenarioRow.id == scenario_id)
    )
    await session.commit()
    return result.rowcount > 0


async def replace_all(session: AsyncSession, scenarios: list[SavedScenario]) -> int:
    """Overwrite the stored list with ``scenarios``. Returns count stored."""
    await session.execute(delete(SavedScenarioRow))
    for scenario in scenarios:
        session.add(_to_row(scenario))
    await session.commit()
    return len(scenarios)


async def export_json(session: AsyncSession) -> str:
    """Serialize every stored scenario in the persisted JSON format."""
    return serialize_scenarios(await list_scenarios(session))


async def import_json(session: AsyncSession, payload: str) -> int:
    """Replace the stored list with a previously exported JSON payload.

    Raises ValueError, leaving the store untouched, when the payload is not
    a JSON array.
    """
    scenarios = parse_scenarios(payload)
    count = await replace_all(session, scenarios)
    logger.info("Imported %d saved scenario(s)", count)
    return count
