"""Saved scenario routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from maintlytics.action.routers.dashboard import FiltersModel
from maintlytics.analytics import scenario_codec
from maintlytics.db.connection import get_session
from maintlytics.memory import scenario_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scenarios"])


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------


class ScenarioCreateRequest(BaseModel):
    name: str
    filters: FiltersModel = Field(default_factory=FiltersModel)


class ScenarioApplyRequest(BaseModel):
    dataset_asset_codes: list[str] = Field(default_factory=list)


class ScenarioImportRequest(BaseModel):
    payload: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/scenarios")
async def list_scenarios(session: AsyncSession = Depends(get_session)) -> list[dict]:
    """List saved scenarios, most recent first."""
    scenarios = await scenario_store.list_scenarios(session)
    return [scenario_codec.scenario_to_dict(s) for s in scenarios]


@router.post("/scenarios")
async def create_scenario(
    req: ScenarioCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Save the active filters under a name."""
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Scenario name is required")
    scenario = scenario_codec.save_scenario(name, req.filters.to_spec())
    try:
        await scenario_store.add_scenario(session, scenario)
    except Exception:
        logger.exception("Failed to persist scenario %r", name)
        raise HTTPException(status_code=500, detail="Could not save scenario")
    return scenario_codec.scenario_to_dict(scenario)


@router.post("/scenarios/{scenario_id}/apply")
async def apply_scenario(
    scenario_id: str,
    req: ScenarioApplyRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Reconcile a scenario against the asset codes of the loaded dataset."""
    scenario = await scenario_store.get_scenario(session, scenario_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    reconciled = scenario_codec.reconcile_scenario(scenario, req.dataset_asset_codes)
    return {
        "name": scenario.name,
        "filters": scenario_codec.filters_to_dict(reconciled.filters),
        "dropped_codes": reconciled.dropped_codes,
    }


@router.delete("/scenarios/{scenario_id}")
async def delete_scenario(scenario_id: str, session: AsyncSession = Depends(get_session)) -> dict:
    """Delete a scenario. Unknown ids are not an error."""
    deleted = await scenario_store.delete_scenario(session, scenario_id)
    return {"status": "deleted" if deleted else "not_found", "id": scenario_id}


@router.get("/scenarios/export")
async def export_scenarios(session: AsyncSession = Depends(get_session)) -> dict:
    """Export every scenario in the persisted JSON format."""
    return {"payload": await scenario_store.export_json(session)}


@router.post("/scenarios/import")
async def import_scenarios(
    req: ScenarioImportRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Replace the stored scenarios with an exported payload.

    A payload that is not a JSON array is rejected and the store is left as is.
    """
    try:
        count = await scenario_store.import_json(session, req.payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "imported", "count": count}
