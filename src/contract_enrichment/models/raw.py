"""Raw query records and result pages before normalization."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    Flexible raw record from the remote query service.
    Holds the JSON object as returned, nested relationships included.
    """

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] = Field(default_factory=dict)


class QueryPage(BaseModel):
    """One page of a cursor-paginated query response."""

    records: list[RawRecord] = Field(default_factory=list)
    done: bool = True
    next_cursor: Optional[str] = None
