"""Parsing utilities for Salesforce query records."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from contract_enrichment.models.history import StageHistoryEvent
from contract_enrichment.models.raw import RawRecord

from .constants import (
    CREATED_DATE,
    HISTORY_OPPORTUNITY_ID,
    HISTORY_STAGE_NAME,
    LEAD_UTM_FIELDS,
)


def dig(data: Optional[dict[str, Any]], *path: str) -> Any:
    """Follow nested relationship keys; None as soon as a level is missing."""
    current: Any = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def as_dict(value: Any) -> dict[str, Any]:
    """Nested relationship object, or {} when absent or not an object."""
    return value if isinstance(value, dict) else {}


def related_records(data: dict[str, Any], relationship: str) -> list[dict[str, Any]]:
    """Records of a child relationship sub-query; absent or null lists become []."""
    rows = dig(data, relationship, "records")
    if not isinstance(rows, list):
        return []
    return [r for r in rows if isinstance(r, dict)]


def to_decimal(value: Any, default: Decimal) -> Decimal:
    """Numeric field as Decimal; None, booleans and non-numeric values fall back to default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def to_float(value: Any) -> Optional[float]:
    """Optional numeric field as float."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def text_or_none(value: Any) -> Optional[str]:
    """Non-empty string or None."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def parse_history_event(raw: RawRecord) -> StageHistoryEvent:
    """OpportunityHistory row to StageHistoryEvent."""
    d = raw.data
    return StageHistoryEvent(
        opportunity_id=text_or_none(d.get(HISTORY_OPPORTUNITY_ID)),
        created_at=text_or_none(d.get(CREATED_DATE)),
        stage_name=text_or_none(d.get(HISTORY_STAGE_NAME)),
    )


def lead_utm(data: dict[str, Any]) -> Optional[str]:
    """Raw UTM string of a lead under whichever spelling is present."""
    for field in LEAD_UTM_FIELDS:
        value = data.get(field)
        if value is not None:
            return value if isinstance(value, str) else str(value)
    return None
