"""
Landing block and public visibility policy.

The landing block lives in a singleton selection row, so "at most one
landing block" holds by construction. Changes to it are additionally
serialized through a process-wide lock (SQLite ignores
SELECT ... FOR UPDATE).
"""
import logging
from threading import Lock
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.domain.invariants.block import assert_can_be_landing, assert_privacy_change
from gremlinlink.models import ContentBlock
from gremlinlink.store import BlockStore
from gremlinlink.utils.transaction import transactional

logger = logging.getLogger(__name__)

_landing_lock = Lock()


def get_landing_block(*, store: Optional[BlockStore] = None) -> Optional[ContentBlock]:
    store = store or BlockStore()
    return store.landing_block()


def set_landing_block(*, block_id: str, store: Optional[BlockStore] = None) -> ContentBlock:
    """
    Make `block_id` the landing block.

    - the block must exist, be published and be a root block
    - the previous landing block (if any) loses the flag in the same write
    - the new landing block is forced public
    """
    store = store or BlockStore()

    with _landing_lock:
        # the first insert of the selection row can collide with another
        # process on the primary key; the retry updates the row instead
        for attempt in range(2):
            try:
                with transactional():
                    block = store.lock_block(block_id)
                    if block is None:
                        raise BlockNotFound(f"Block {block_id} not found")

                    assert_can_be_landing(block)
                    previous = store.assign_landing(block)
                break
            except IntegrityError:
                if attempt:
                    raise

    logger.info(
        "Landing block set to %s (previous: %s)",
        block.slug,
        previous.slug if previous is not None else None,
    )
    return block


def remove_landing_block(*, store: Optional[BlockStore] = None) -> Optional[ContentBlock]:
    """Clear the landing block. Idempotent; returns the block that held it."""
    store = store or BlockStore()

    with _landing_lock:
        with transactional():
            previous = store.clear_landing()

    if previous is not None:
        logger.info("Landing block %s removed", previous.slug)
    return previous


def toggle_privacy(*, block_id: str, store: Optional[BlockStore] = None) -> ContentBlock:
    """
    Flip `is_private` on a block.

    Landing blocks cannot be made private; the landing selection itself is
    never changed here.
    """
    store = store or BlockStore()

    with transactional():
        block = store.lock_block(block_id)
        if block is None:
            raise BlockNotFound(f"Block {block_id} not found")

        assert_privacy_change(block, not block.is_private)
        block.is_private = not block.is_private
        block.touch()

    return block


def get_public_blocks(*, store: Optional[BlockStore] = None) -> List[ContentBlock]:
    """Published, non-private root blocks for the public index."""
    store = store or BlockStore()
    return store.public_blocks()


def landing_status(*, store: Optional[BlockStore] = None) -> Dict[str, Any]:
    store = store or BlockStore()
    landing = store.landing_block()

    return {
        "has_landing_block": landing is not None,
        "landing_block": landing,
        "public_block_count": store.count_roots(public_only=True),
        "total_block_count": store.count_roots(),
    }
