"""Salesforce REST query connector.

Queries go to /services/data/{version}/query?q=...; when a result set is larger
than one batch the response carries done=false and a nextRecordsUrl, which is
requested as-is against the instance URL until done=true.
"""

import logging
import os
from typing import Any, Optional

import httpx

from contract_enrichment.auth import AccessToken
from contract_enrichment.connectors.base import BaseQueryClient
from contract_enrichment.exceptions import QueryError
from contract_enrichment.models.raw import QueryPage, RawRecord

from .constants import DEFAULT_API_VERSION, DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class SalesforceConnector(BaseQueryClient):
    """
    Read-only SOQL client for one Salesforce instance.
    Each call is a single GET with a fixed timeout; errors are not retried.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "contract-enrichment/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        token: AccessToken,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            token: Access token and instance URL
            api_version: REST API version (default: SF_API_VERSION env or v60.0)
            timeout: Per-request timeout in seconds (default: SF_TIMEOUT_SECONDS env or 30)
            client: Optional httpx client
        """
        self._token = token
        self._instance_url = token.instance_url.rstrip("/")
        self._api_version = api_version or os.environ.get("SF_API_VERSION") or DEFAULT_API_VERSION
        if timeout is None:
            timeout = float(os.environ.get("SF_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS)
        self._client = client or httpx.Client(
            timeout=timeout,
            headers=self.DEFAULT_HEADERS,
        )

    @property
    def query_url(self) -> str:
        return f"{self._instance_url}/services/data/{self._api_version}/query"

    def _get(self, url: str, params: Optional[dict[str, str]] = None) -> dict[str, Any]:
        """Authenticated GET returning the decoded JSON body."""
        headers = {"Authorization": f"Bearer {self._token.access_token}"}
        resp = self._client.get(url, params=params, headers=headers)
        resp.raise_for_status()
        try:
            return resp.json()
        except ValueError as e:
            raise QueryError(f"Query response is not JSON: {e}", url=url) from e

    def _to_page(self, payload: dict[str, Any], url: str) -> QueryPage:
        records = payload.get("records") if isinstance(payload, dict) else None
        if not isinstance(records, list):
            raise QueryError("Query response has no records list", url=url)
        done = bool(payload.get("done", True))
        return QueryPage(
            records=[RawRecord(data=r) for r in records if isinstance(r, dict)],
            done=done,
            next_cursor=None if done else payload.get("nextRecordsUrl"),
        )

    def run_query(self, query: str) -> QueryPage:
        """Issue a SOQL query and return the first page."""
        logger.debug("SOQL: %s", " ".join(query.split()))
        url = self.query_url
        return self._to_page(self._get(url, params={"q": query}), url)

    def query_more(self, cursor: str) -> QueryPage:
        """Follow a nextRecordsUrl (a path relative to the instance URL)."""
        url = f"{self._instance_url}{cursor}"
        logger.debug("Following cursor %s", cursor)
        return self._to_page(self._get(url), url)

    def close(self) -> None:
        self._client.close()
