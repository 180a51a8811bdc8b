"""Lead attribution: resolve the originating lead of each contract.

Resolution order:
1. the opportunity's converted-lead id, looked up by lead id
2. the opportunity id, looked up among converted leads
3. no lead; lead_reason says why
"""

import re
from typing import Iterable, Optional
from urllib.parse import parse_qs

from contract_enrichment.connectors.salesforce import constants as sf
from contract_enrichment.connectors.salesforce.parsers import lead_utm, text_or_none
from contract_enrichment.enrichment.dates import day_diff, parse_timestamp
from contract_enrichment.models.contract import ContractRecord, LeadReason, LeadSummary
from contract_enrichment.models.metric import Metric
from contract_enrichment.models.raw import RawRecord

_LEAD_ID_FORMAT = re.compile(rf"^{sf.LEAD_ID_PREFIX}", re.IGNORECASE)

_NO_UTM: dict[str, Optional[str]] = {"utm_source": None, "utm_content": None, "utm_term": None}


def parse_utm_params(raw: Optional[str]) -> dict[str, Optional[str]]:
    """
    Extract utm_source, utm_content and utm_term from a landing-page URL or query string.
    Anything unparseable yields all None; this never raises.
    """
    if not raw or not isinstance(raw, str):
        return dict(_NO_UTM)
    query = raw.rsplit("?", 1)[-1]
    try:
        params = parse_qs(query, keep_blank_values=True)
    except ValueError:
        return dict(_NO_UTM)

    def first_or_none(key: str) -> Optional[str]:
        values = params.get(key) or []
        return values[0] if values and values[0] != "" else None

    return {key: first_or_none(key) for key in _NO_UTM}


def parse_lead(raw: RawRecord) -> LeadSummary:
    """Lead record to LeadSummary, UTM attribution decoded."""
    d = raw.data
    utm = lead_utm(d)
    return LeadSummary(
        id=str(d.get(sf.ID) or ""),
        created_at=text_or_none(d.get(sf.CREATED_DATE)),
        company=text_or_none(d.get(sf.LEAD_COMPANY)),
        lead_source=text_or_none(d.get(sf.LEAD_SOURCE)),
        utm=utm,
        **parse_utm_params(utm),
    )


def _lead_order(lead: LeadSummary) -> tuple:
    parsed = parse_timestamp(lead.created_at)
    return (parsed is None, parsed.timestamp() if parsed else 0.0, lead.id)


def index_leads(records_by_key: dict[str, list[RawRecord]]) -> dict[str, LeadSummary]:
    """
    One lead per key. When a key matches several leads the earliest created
    (then lowest id) wins, so the choice does not depend on fetch order.
    """
    index: dict[str, LeadSummary] = {}
    for key, records in records_by_key.items():
        leads = [parse_lead(r) for r in records]
        if leads:
            index[key] = min(leads, key=_lead_order)
    return index


def lead_reason(lead_id: Optional[str]) -> LeadReason:
    """Why a contract's lead could not be resolved."""
    if not lead_id:
        return "missing-reference"
    if not _LEAD_ID_FORMAT.match(lead_id):
        return "invalid-reference-format"
    return "not-found"


def needs_fallback(
    contracts: Iterable[ContractRecord],
    leads_by_id: dict[str, LeadSummary],
) -> list[str]:
    """Opportunity ids of contracts whose converted-lead id did not resolve."""
    return [
        c.opportunity.id
        for c in contracts
        if c.opportunity.id and not (c.converted_lead_id and c.converted_lead_id in leads_by_id)
    ]


def attribute_lead(
    contract: ContractRecord,
    leads_by_id: dict[str, LeadSummary],
    leads_by_opportunity: dict[str, LeadSummary],
) -> ContractRecord:
    """Copy of the contract with lead, lead_reason and lead_to_opportunity set."""
    lead_id = contract.converted_lead_id
    opp_id = contract.opportunity.id

    lead: Optional[LeadSummary] = None
    if lead_id and lead_id in leads_by_id:
        lead = leads_by_id[lead_id]
    elif opp_id and opp_id in leads_by_opportunity:
        lead = leads_by_opportunity[opp_id]

    if lead is None:
        return contract.model_copy(
            update={
                "lead": None,
                "lead_reason": lead_reason(lead_id),
                "lead_to_opportunity": Metric.missing(),
            }
        )
    return contract.model_copy(
        update={
            "lead": lead,
            "lead_reason": None,
            "lead_to_opportunity": day_diff(lead.created_at, contract.opportunity.created_date),
        }
    )
