"""Remote query clients."""

from contract_enrichment.connectors.base import BaseQueryClient
from contract_enrichment.connectors.salesforce import SalesforceConnector

__all__ = ["BaseQueryClient", "SalesforceConnector"]
