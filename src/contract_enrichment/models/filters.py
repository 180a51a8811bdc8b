"""Structured filter input for a contract enrichment run."""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Department values that mean "every department" (case-sensitive)
_ALL_DEPARTMENTS = ("", "ALL", "*")


class FilterParams(BaseModel):
    """Date range and optional department filter for the contract query."""

    month: Optional[str] = Field(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Calendar month, YYYY-MM. Takes precedence over start/end.",
    )
    start: Optional[date] = None
    end: Optional[date] = None
    owner_department: Optional[str] = None

    @field_validator("owner_department")
    @classmethod
    def _strip_department(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @property
    def department(self) -> Optional[str]:
        """Department to filter on, or None when every department is wanted."""
        dept = self.owner_department
        if dept is None or dept in _ALL_DEPARTMENTS:
            return None
        return dept

    def resolve_range(self, today: Optional[date] = None) -> tuple[date, date]:
        """
        Return the half-open contract start-date range [start, end).
        month wins over start/end; with neither, the previous calendar month of `today`.
        """
        if self.month:
            year, month = (int(p) for p in self.month.split("-"))
            start = date(year, month, 1)
            end = _first_of_next_month(start)
        elif self.start and self.end:
            start, end = self.start, self.end
        else:
            today = today or datetime.now(timezone.utc).date()
            end = today.replace(day=1)
            start = _first_of_previous_month(end)

        if start >= end:
            raise ValueError(f"Empty date range: start {start} is not before end {end}")
        return start, end


def _first_of_next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def _first_of_previous_month(d: date) -> date:
    if d.month == 1:
        return date(d.year - 1, 12, 1)
    return date(d.year, d.month - 1, 1)
