"""Stage-history reconciliation: first transition into a won stage.

An opportunity can pass through many stages and re-enter "won" after being
reopened. Only the first won transition counts; the event right before it in
time order marks the start of the last step to close.
"""

from datetime import datetime
from typing import Iterable, Optional

from contract_enrichment.enrichment.dates import day_diff, parse_timestamp
from contract_enrichment.enrichment.stages import StageTable
from contract_enrichment.models.contract import ContractRecord
from contract_enrichment.models.history import CloseReconciliation, StageHistoryEvent

_DEFAULT_STAGES = StageTable()


def sort_events(events: Iterable[StageHistoryEvent]) -> list[StageHistoryEvent]:
    """Events ascending by creation time; unparseable timestamps keep their order at the end."""
    dated: list[tuple[datetime, int, StageHistoryEvent]] = []
    undated: list[StageHistoryEvent] = []
    for i, event in enumerate(events):
        parsed = parse_timestamp(event.created_at)
        if parsed is None:
            undated.append(event)
        else:
            dated.append((parsed, i, event))
    dated.sort(key=lambda item: (item[0], item[1]))
    return [event for _, _, event in dated] + undated


def reconcile_close(
    events: Iterable[StageHistoryEvent],
    stages: Optional[StageTable] = None,
) -> CloseReconciliation:
    """Locate the first won event and its predecessor, and the days between them."""
    stages = stages or _DEFAULT_STAGES
    ordered = sort_events(events)

    won_idx = next((i for i, e in enumerate(ordered) if stages.is_won(e.stage_name)), None)
    if won_idx is None:
        return CloseReconciliation()

    first_won_at = ordered[won_idx].created_at
    before_first_won_at = ordered[won_idx - 1].created_at if won_idx > 0 else None
    first_install_at = next(
        (e.created_at for e in ordered[:won_idx] if stages.is_install(e.stage_name)),
        None,
    )
    return CloseReconciliation(
        first_won_at=first_won_at,
        before_first_won_at=before_first_won_at,
        prev_to_first_close=day_diff(before_first_won_at, first_won_at),
        first_install_at=first_install_at,
        install_to_first_close=day_diff(first_install_at, first_won_at),
    )


def apply_close(contract: ContractRecord, close: CloseReconciliation) -> ContractRecord:
    """Copy of the contract carrying the reconciliation fields."""
    return contract.model_copy(
        update={
            "first_won_at": close.first_won_at,
            "before_first_won_at": close.before_first_won_at,
            "prev_to_first_close": close.prev_to_first_close,
            "first_install_at": close.first_install_at,
            "install_to_first_close": close.install_to_first_close,
        }
    )
