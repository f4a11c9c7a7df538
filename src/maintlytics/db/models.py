"""ORM models for saved filter scenarios."""

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SavedScenarioRow(Base):
    """A named dashboard filter kept for one-click reapplication."""

    __tablename__ = "saved_scenarios"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    filters = Column(JSON, nullable=False)  # {machineCodes, period, status}
    created_at = Column(String(32), nullable=False, index=True)  # ISO-8601 UTC, as persisted
    stored_at = Column(DateTime(timezone=True), server_default=func.now())
