"""Run-wide aggregation of extracted playlist records."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from models import AggregateState, PlaylistRecord

logger = logging.getLogger(__name__)


def ingest(state: AggregateState, record: PlaylistRecord) -> AggregateState:
    """Fold one file's record into ``state`` (in place) and return it.

    Not thread-safe; calls must be serialized.
    """
    counters = state.counters
    counters.total += 1

    if not record.is_complete:
        counters.failed += 1
        return state

    counters.succeeded += 1

    if record.share_code in state.seen_share_codes:
        counters.dup_code += 1
        logger.warning(
            "Duplicate share code '%s' in %s",
            record.share_code,
            record.source or "<content>",
        )
    else:
        state.seen_share_codes.add(record.share_code)

    if record.playlist_name in state.seen_playlist_names:
        counters.dup_name += 1
        logger.warning(
            "Duplicate playlist name '%s' in %s",
            record.playlist_name,
            record.source or "<content>",
        )
    else:
        state.seen_playlist_names.add(record.playlist_name)

    state.records.append(record)
    return state


def aggregate_records(
    records: Iterable[PlaylistRecord], state: Optional[AggregateState] = None
) -> AggregateState:
    if state is None:
        state = AggregateState()
    for record in records:
        ingest(state, record)
    return state


__all__ = ["ingest", "aggregate_records"]
