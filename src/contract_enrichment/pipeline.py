"""Pipeline orchestration: contracts → stage history → leads."""

import logging
from datetime import date
from typing import Optional

import httpx

from contract_enrichment.auth import TokenProvider
from contract_enrichment.connectors.base import BaseQueryClient
from contract_enrichment.connectors.salesforce import SalesforceConnector
from contract_enrichment.connectors.salesforce import constants as sf
from contract_enrichment.connectors.salesforce import soql
from contract_enrichment.connectors.salesforce.parsers import parse_history_event
from contract_enrichment.enrichment.history import apply_close, reconcile_close
from contract_enrichment.enrichment.leads import attribute_lead, index_leads, needs_fallback
from contract_enrichment.enrichment.lookup import batch_lookup
from contract_enrichment.enrichment.normalizer import normalize_contract
from contract_enrichment.enrichment.stages import StageTable
from contract_enrichment.models.contract import ContractRecord
from contract_enrichment.models.filters import FilterParams

logger = logging.getLogger(__name__)


def run_enrichment(
    client: BaseQueryClient,
    params: FilterParams,
    *,
    stages: Optional[StageTable] = None,
    today: Optional[date] = None,
) -> list[ContractRecord]:
    """
    Run the enrichment against an already-authenticated query client.
    Output order follows the contract query. Any query failure aborts the run.
    """
    start, end = params.resolve_range(today)
    department = params.department
    logger.info("Enriching contracts %s..%s (department=%s)", start, end, department or "ALL")

    raw_contracts = client.query_all(soql.build_contract_query(start, end, department))
    contracts = [normalize_contract(r) for r in raw_contracts]
    if not contracts:
        logger.info("No contracts in range")
        return []

    opp_ids = [c.opportunity.id for c in contracts]
    history = batch_lookup(client, opp_ids, soql.build_history_query, sf.HISTORY_OPPORTUNITY_ID)
    contracts = [
        apply_close(
            c,
            reconcile_close(
                [parse_history_event(r) for r in history.get(c.opportunity.id or "", [])],
                stages,
            ),
        )
        for c in contracts
    ]

    leads_by_id = index_leads(
        batch_lookup(client, [c.converted_lead_id for c in contracts], soql.build_leads_by_id_query, sf.ID)
    )
    fallback_opp_ids = needs_fallback(contracts, leads_by_id)
    leads_by_opportunity = index_leads(
        batch_lookup(
            client,
            fallback_opp_ids,
            soql.build_leads_by_opportunity_query,
            sf.LEAD_CONVERTED_OPPORTUNITY_ID,
        )
    )
    contracts = [attribute_lead(c, leads_by_id, leads_by_opportunity) for c in contracts]

    logger.info(
        "Enriched %d contract(s): %d closed-won found, %d lead(s) resolved (%d fallback lookups)",
        len(contracts),
        sum(1 for c in contracts if c.first_won_at),
        sum(1 for c in contracts if c.lead is not None),
        len(fallback_opp_ids),
    )
    return contracts


def enrich_contracts(
    params: FilterParams,
    token_provider: TokenProvider,
    *,
    http_client: Optional[httpx.Client] = None,
    stages: Optional[StageTable] = None,
    today: Optional[date] = None,
) -> list[ContractRecord]:
    """
    Entry point: authenticate via the injected provider, then enrich contracts.
    Raises AuthenticationRequiredError when no token is available.
    """
    token = token_provider.require_token()
    connector = SalesforceConnector(token, client=http_client)
    try:
        return run_enrichment(connector, params, stages=stages, today=today)
    finally:
        if http_client is None:
            connector.close()
