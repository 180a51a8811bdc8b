#!/usr/bin/env python3
"""Quick live run of the contract enrichment against a real org.

Needs SF_ACCESS_TOKEN and SF_INSTANCE_URL in the environment.

Run:
  poetry run python scripts/contracts_live.py                 # previous month, all departments
  poetry run python scripts/contracts_live.py 2025-09         # one month
  poetry run python scripts/contracts_live.py 2025-09 Sales   # one month, one department
"""

import logging
import sys

from contract_enrichment.auth import EnvTokenProvider
from contract_enrichment.models.filters import FilterParams
from contract_enrichment.pipeline import enrich_contracts


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    month = sys.argv[1] if len(sys.argv) > 1 else None
    dept = sys.argv[2] if len(sys.argv) > 2 else None
    params = FilterParams(month=month, owner_department=dept)
    start, end = params.resolve_range()
    print(f"Fetching contracts {start}..{end} (department={params.department or 'ALL'})...")

    contracts = enrich_contracts(params, EnvTokenProvider())
    print(f"Got {len(contracts)} contracts")
    for i, c in enumerate(contracts[:5], 1):
        lead = c.lead.id if c.lead else f"- ({c.lead_reason})"
        print(
            f"  {i}. {c.name} {c.account_name}: purchase={c.purchase_amount} vat={c.vat} "
            f"lead_time={c.lead_time.days} first_won={c.first_won_at} lead={lead}"
        )
    if contracts:
        print("\n✅ Contracts, stage history and leads fetched.")
    else:
        print("\n⚠️ No contracts in range.")


if __name__ == "__main__":
    main()
