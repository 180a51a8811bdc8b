"""Data models for raw query records and enriched contracts."""

from contract_enrichment.models.contract import (
    ContractRecord,
    LeadSummary,
    LeadTimeSource,
    LineItem,
    OpportunitySummary,
    OptionSurcharge,
    Promotion,
)
from contract_enrichment.models.filters import FilterParams
from contract_enrichment.models.history import CloseReconciliation, StageHistoryEvent
from contract_enrichment.models.metric import Metric
from contract_enrichment.models.raw import QueryPage, RawRecord

__all__ = [
    "CloseReconciliation",
    "ContractRecord",
    "FilterParams",
    "LeadSummary",
    "LeadTimeSource",
    "LineItem",
    "Metric",
    "OpportunitySummary",
    "OptionSurcharge",
    "Promotion",
    "QueryPage",
    "RawRecord",
    "StageHistoryEvent",
]
