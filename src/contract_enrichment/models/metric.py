"""Day-count metric with an explanatory reason code."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

MetricReason = Literal["ok", "missing-date", "parse-error"]


class Metric(BaseModel):
    """
    Elapsed whole days between two timestamps.
    `days` is set only when `reason` is "ok"; negative values are kept as-is.
    """

    model_config = ConfigDict(frozen=True)

    days: Optional[int] = None
    reason: MetricReason = "missing-date"

    @model_validator(mode="after")
    def _days_match_reason(self) -> "Metric":
        if (self.days is not None) != (self.reason == "ok"):
            raise ValueError(f"days={self.days!r} is inconsistent with reason={self.reason!r}")
        return self

    @classmethod
    def ok(cls, days: int) -> "Metric":
        return cls(days=days, reason="ok")

    @classmethod
    def missing(cls) -> "Metric":
        return cls(days=None, reason="missing-date")

    @classmethod
    def parse_error(cls) -> "Metric":
        return cls(days=None, reason="parse-error")
