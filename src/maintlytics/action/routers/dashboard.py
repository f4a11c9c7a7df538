"""Dashboard and dossier routes — stateless recomputation over posted records."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from maintlytics.analytics.asset_dossier import group_orders_by_asset
from maintlytics.analytics.dashboard_snapshot import build_dashboard_snapshot
from maintlytics.analytics.filter_engine import apply_filters, filter_options
from maintlytics.analytics.reliability_metrics import KpiGoals
from maintlytics.analytics.work_orders import ALL, FilterSpec, normalize_records

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------


class FiltersModel(BaseModel):
    asset_codes: list[str] = Field(default_factory=list)
    period: str = ALL  # "all" or "YYYY-MM"
    status: str = ALL

    def to_spec(self) -> FilterSpec:
        return FilterSpec(asset_codes=frozenset(self.asset_codes), period=self.period, status=self.status)


class GoalsModel(BaseModel):
    mttr_minutes: float = KpiGoals.mttr_minutes
    mtbf_hours: float = KpiGoals.mtbf_hours
    availability_pct: float = KpiGoals.availability_pct


class DashboardRequest(BaseModel):
    records: list[dict]
    filters: FiltersModel = Field(default_factory=FiltersModel)
    goals: GoalsModel | None = None


class DossierRequest(BaseModel):
    records: list[dict]
    filters: FiltersModel = Field(default_factory=FiltersModel)
    search: str = ""
    sort_field: str = "opened_date"
    sort_order: str = "desc"


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/dashboard")
async def dashboard_endpoint(req: DashboardRequest) -> dict:
    """Compute every dashboard aggregate for the posted dataset and filters."""
    records = normalize_records(req.records)
    goals = KpiGoals(**req.goals.model_dump()) if req.goals else None
    snapshot = build_dashboard_snapshot(records, req.filters.to_spec(), goals)
    options = filter_options(records)
    return {
        **snapshot.to_dict(),
        "options": {
            "assets": [{"code": code, "description": desc} for code, desc in options.assets],
            "statuses": options.statuses,
            "periods": options.periods,
        },
    }


@router.post("/dossier")
async def dossier_endpoint(req: DossierRequest) -> list[dict]:
    """Per-asset order listing for the technical dossier."""
    records = apply_filters(normalize_records(req.records), req.filters.to_spec())
    try:
        dossiers = group_orders_by_asset(records, req.search, req.sort_field, req.sort_order)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return [
        {
            "asset_code": d.asset_code,
            "description": d.description,
            "total_downtime_minutes": d.total_downtime_minutes,
            "orders": [
                {
                    "order_id": o.order_id,
                    "defect": o.defect_label,
                    "status": o.status,
                    "duration_minutes": o.duration_minutes,
                    "opened_date": o.opened_date,
                    "opened_time": o.opened_time,
                    "closed_date": o.closed_date,
                    "observation": o.observation,
                }
                for o in d.orders
            ],
        }
        for d in dossiers
    ]
