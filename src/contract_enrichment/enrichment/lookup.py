"""Chunked secondary lookups keyed by a foreign-key field."""

import logging
from typing import Callable, Iterable, Iterator, Optional

from contract_enrichment.connectors.base import BaseQueryClient
from contract_enrichment.connectors.salesforce.constants import MAX_IN_LIST
from contract_enrichment.models.raw import RawRecord

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[Optional[str]]) -> list[str]:
    """Drop empty ids and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(i for i in ids if i))


def chunked(items: list[str], size: int) -> Iterator[list[str]]:
    """Consecutive slices of at most `size` items."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    for i in range(0, len(items), size):
        yield items[i : i + size]


def batch_lookup(
    client: BaseQueryClient,
    ids: Iterable[Optional[str]],
    query_builder: Callable[[list[str]], str],
    key_field: str,
    *,
    chunk_size: int = MAX_IN_LIST,
) -> dict[str, list[RawRecord]]:
    """
    Look up records for many ids, one query per chunk of at most chunk_size ids.
    Returns key_field value -> records. Chunks run in sequence; the merge only
    appends per key, so chunk order does not change which records land where.
    """
    if chunk_size > MAX_IN_LIST:
        raise ValueError(f"chunk size {chunk_size} exceeds the IN list limit of {MAX_IN_LIST}")
    wanted = unique_ids(ids)
    if not wanted:
        return {}

    merged: dict[str, list[RawRecord]] = {}
    chunks = 0
    skipped = 0
    for chunk in chunked(wanted, chunk_size):
        chunks += 1
        for record in client.query_all(query_builder(chunk)):
            key = record.data.get(key_field)
            if not key:
                skipped += 1
                continue
            merged.setdefault(key, []).append(record)

    if skipped:
        logger.warning("Skipped %d record(s) without %s", skipped, key_field)
    logger.debug(
        "Batch lookup on %s: %d id(s), %d chunk(s), %d key(s) matched",
        key_field, len(wanted), chunks, len(merged),
    )
    return merged
