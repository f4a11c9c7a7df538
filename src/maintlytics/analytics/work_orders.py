"""Canonical work-order records and the helpers every calculator shares.

Records arrive already shaped by the spreadsheet ingestion step; this module
only applies the field defaults, collapses duplicate order ids and offers
tolerant date/hour parsing so no calculator has to guard against malformed
input on its own.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from config.settings import settings

logger = logging.getLogger(__name__)

ALL = "all"
DEFECT_SENTINEL = settings.defect_sentinel

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkOrder:
    """A single maintenance ticket against one asset."""

    order_id: str
    asset_code: str
    asset_description: str = ""
    inclusion_date: Any = None  # datetime, date or raw string
    defect_code: str = ""
    defect_description: str = ""
    status: str = ""
    observation: str = ""
    opened_date: str = ""
    opened_time: str = "00:00"
    closed_date: str | None = None
    closed_time: str | None = None
    duration_minutes: float = 0.0

    @property
    def is_closed(self) -> bool:
        return bool(self.closed_date)

    @property
    def short_label(self) -> str:
        """First whitespace-delimited token of the asset description."""
        parts = self.asset_description.split()
        return parts[0] if parts else ""

    @property
    def defect_label(self) -> str:
        return self.defect_description or DEFECT_SENTINEL


@dataclass(frozen=True)
class FilterSpec:
    """Asset/period/status restriction shared by dashboard, export and scenarios.

    An empty ``asset_codes`` set means no asset restriction.
    """

    asset_codes: frozenset[str] = field(default_factory=frozenset)
    period: str = ALL  # "all" or "YYYY-MM"
    status: str = ALL

    def __post_init__(self) -> None:
        if not isinstance(self.asset_codes, frozenset):
            object.__setattr__(self, "asset_codes", frozenset(self.asset_codes))

    @property
    def is_unrestricted(self) -> bool:
        return not self.asset_codes and self.period == ALL and self.status == ALL


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_record(row: dict) -> WorkOrder:
    """Build a WorkOrder from a canonical-keyed dict, applying field defaults."""
    return WorkOrder(
        order_id=_text(row.get("order_id")),
        asset_code=_text(row.get("asset_code")).strip(),
        asset_description=_text(row.get("asset_description")).strip(),
        inclusion_date=row.get("inclusion_date"),
        defect_code=_text(row.get("defect_code")),
        defect_description=_text(row.get("defect_description")).strip(),
        status=_text(row.get("status")),
        observation=_text(row.get("observation")),
        opened_date=_text(row.get("opened_date")),
        opened_time=_text(row.get("opened_time")) or "00:00",
        closed_date=_optional_text(row.get("closed_date")),
        closed_time=_optional_text(row.get("closed_time")),
        duration_minutes=coerce_minutes(row.get("duration_minutes")),
    )


def normalize_records(rows: Iterable[dict | WorkOrder]) -> list[WorkOrder]:
    """Normalize rows and collapse duplicate order ids to their first occurrence."""
    if rows is None:
        raise TypeError("rows must be an iterable of dicts, not None")

    seen: set[str] = set()
    records: list[WorkOrder] = []
    duplicates = 0
    for row in rows:
        record = row if isinstance(row, WorkOrder) else normalize_record(row)
        if record.order_id in seen:
            duplicates += 1
            continue
        seen.add(record.order_id)
        records.append(record)

    if duplicates:
        logger.debug("Dropped %d duplicate work order(s) by order id", duplicates)
    return records


def ensure_records(records: list[WorkOrder] | None) -> list[WorkOrder]:
    """Reject a missing records list; an empty list is valid input."""
    if records is None:
        raise TypeError("records must be a list of WorkOrder, not None")
    return records


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def parse_date(value: Any) -> datetime | None:
    """Parse a date-like value, returning None instead of raising."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def period_of(value: Any) -> str | None:
    """Return the ``YYYY-MM`` period of a date-like value, or None."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def opened_hour(opened_time: str | None) -> int:
    """Hour component of an ``HH:MM`` string; 0 when missing or malformed."""
    match = _LEADING_INT.match(opened_time or "")
    if not match:
        return 0
    return int(match.group(1))


def coerce_minutes(value: Any) -> float:
    """Coerce a duration to non-negative finite minutes (0 on bad input)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(minutes) or minutes < 0:
        return 0.0
    return minutes


def round_half_up(value: float, digits: int) -> float:
    """Round like a fixed-point display would (2.25 -> 2.3, not 2.2).

    Non-finite values pass through; magnitudes beyond Decimal precision fall
    back to the builtin round.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-digits)
    try:
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return round(value, digits)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _optional_text(value: Any) -> str | None:
    text = _text(value).strip()
    return text or None
