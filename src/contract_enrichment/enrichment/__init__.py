"""Contract normalization, stage-history reconciliation and lead attribution."""

from contract_enrichment.enrichment.dates import day_diff, parse_timestamp
from contract_enrichment.enrichment.history import apply_close, reconcile_close
from contract_enrichment.enrichment.leads import attribute_lead, parse_utm_params
from contract_enrichment.enrichment.lookup import batch_lookup, chunked
from contract_enrichment.enrichment.normalizer import normalize_contract
from contract_enrichment.enrichment.stages import StageTable

__all__ = [
    "StageTable",
    "apply_close",
    "attribute_lead",
    "batch_lookup",
    "chunked",
    "day_diff",
    "normalize_contract",
    "parse_timestamp",
    "parse_utm_params",
    "reconcile_close",
]
