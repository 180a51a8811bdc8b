"""Abstract base class for cursor-paginated query clients."""

import logging
from abc import ABC, abstractmethod

from contract_enrichment.models.raw import QueryPage, RawRecord

logger = logging.getLogger(__name__)


class BaseQueryClient(ABC):
    """
    Standard interface for the remote query service.
    Implementations issue one request per call; query_all follows the cursors.
    """

    @abstractmethod
    def run_query(self, query: str) -> QueryPage:
        """
        Issue a query and return its first page.
        """
        pass

    @abstractmethod
    def query_more(self, cursor: str) -> QueryPage:
        """
        Fetch the page a continuation cursor points to.
        """
        pass

    def query_all(self, query: str) -> list[RawRecord]:
        """
        Run a query and follow continuation cursors until the result is complete.
        Records are appended in response order; failures propagate without retry.
        """
        page = self.run_query(query)
        records = list(page.records)
        pages = 1
        while not page.done and page.next_cursor:
            page = self.query_more(page.next_cursor)
            records.extend(page.records)
            pages += 1
        logger.debug("Query returned %d records over %d page(s)", len(records), pages)
        return records
