from datetime import timedelta
from typing import Any, Dict, Optional

from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.models.base import utcnow
from gremlinlink.store import BlockStore

DEFAULT_WINDOW_DAYS = 30


def block_analytics(
    *,
    block_id: str,
    days: int = DEFAULT_WINDOW_DAYS,
    store: Optional[BlockStore] = None,
) -> Dict[str, Any]:
    """Click totals, most recent clicks and per-day counts for one block."""
    store = store or BlockStore()

    if store.get_by_id(block_id) is None:
        raise BlockNotFound(f"Block {block_id} not found")

    since = utcnow() - timedelta(days=max(days, 1))
    summary = store.click_summary(block_id, since=since)
    summary["days"] = days
    return summary
