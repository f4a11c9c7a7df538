"""FastAPI application exposing the maintenance analytics."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from maintlytics.action.routers.dashboard import router as dashboard_router
from maintlytics.action.routers.scenarios import router as scenarios_router
from maintlytics.db.connection import engine
from maintlytics.db.models import Base

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(title="Maintlytics API", version=VERSION)

app.include_router(dashboard_router)
app.include_router(scenarios_router)


@app.on_event("startup")
async def _ensure_tables():
    """Create the scenario table when it does not exist yet."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("Could not create database tables")


# CORS: lock down in production via CORS_ORIGINS env var (comma-separated).
_cors_origins = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}
