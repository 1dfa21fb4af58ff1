from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_BATCH_SIZE

T = TypeVar("T")

logger = logging.getLogger(__name__)


def paged_fetch(
    fetch_batch: Callable[[int, int], Sequence[T]],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_rows: Optional[int] = None,
) -> List[T]:
    """Read every row behind a per-query row cap.

    ``fetch_batch(offset, limit)`` is called with growing offsets until a batch
    comes back shorter than ``batch_size``. Errors propagate unchanged, so a
    caller never sees a partial result.
    """

    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    rows: List[T] = []
    offset = 0
    while True:
        batch = list(fetch_batch(offset, batch_size))
        rows.extend(batch)
        if len(batch) < batch_size:
            break
        offset += batch_size
        if max_rows is not None and offset >= max_rows:
            logger.warning("paged fetch stopped at safety limit of %d rows", max_rows)
            break
    return rows
