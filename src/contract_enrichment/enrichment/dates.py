"""Timestamp parsing and the shared day-diff metric."""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from contract_enrichment.models.metric import Metric

MS_PER_DAY = 24 * 60 * 60 * 1000
_ONE_MS = timedelta(milliseconds=1)

# Salesforce writes offsets as +0000; fromisoformat wants +00:00
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a timestamp with offset, or a bare YYYY-MM-DD date at UTC midnight.
    Naive timestamps are taken as UTC. Returns None when the value cannot be parsed.
    """
    if not value or not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()

    if _DATE_ONLY.match(text):
        try:
            d = date.fromisoformat(text)
        except ValueError:
            return None
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)

    if "T" not in text and " " not in text:
        return None
    fixed = _COMPACT_OFFSET.sub(r"\1:\2", text)
    if fixed.endswith(("Z", "z")):
        fixed = fixed[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(fixed)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def day_diff(start_raw: Optional[str], end_raw: Optional[str]) -> Metric:
    """
    Whole days from start to end, rounded up: any partial day counts as a day.
    Missing input gives reason "missing-date", unparseable input "parse-error".
    """
    if not _present(start_raw) or not _present(end_raw):
        return Metric.missing()
    start = parse_timestamp(start_raw)
    end = parse_timestamp(end_raw)
    if start is None or end is None:
        return Metric.parse_error()
    elapsed_ms = (end - start) // _ONE_MS
    return Metric.ok(-(-elapsed_ms // MS_PER_DAY))


def _present(value: Optional[str]) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
