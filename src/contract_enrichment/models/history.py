"""Opportunity stage history models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from contract_enrichment.models.metric import Metric


class StageHistoryEvent(BaseModel):
    """One stage transition of an opportunity."""

    model_config = ConfigDict(frozen=True)

    opportunity_id: Optional[str] = None
    created_at: Optional[str] = None
    stage_name: Optional[str] = None


class CloseReconciliation(BaseModel):
    """First transition into a won stage and the step that led to it."""

    model_config = ConfigDict(frozen=True)

    first_won_at: Optional[str] = None
    before_first_won_at: Optional[str] = None
    prev_to_first_close: Metric = Field(default_factory=Metric.missing)
    first_install_at: Optional[str] = None
    install_to_first_close: Metric = Field(default_factory=Metric.missing)
