from typing import List, Optional, Tuple

from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.domain.invariants.block import assert_privacy_change, assert_renderer_unchanged
from gremlinlink.models import ContentBlock
from gremlinlink.store import BlockStore
from gremlinlink.utils.transaction import transactional
from .data import prepare_block_data
from .schemas import BlockUpdate


def update_block(
    *,
    block_id: str,
    payload: BlockUpdate,
    store: Optional[BlockStore] = None,
    before_change=None,
) -> Tuple[ContentBlock, List[str]]:
    """
    Apply a partial update and return the block with the changed field names.

    `data` is re-validated against the block's existing renderer;
    `before_change(block)` runs once the block is loaded (optimistic lock).
    """
    store = store or BlockStore()

    with transactional():
        block = store.lock_block(block_id)
        if block is None:
            raise BlockNotFound(f"Block {block_id} not found")

        if before_change is not None:
            before_change(block)

        assert_renderer_unchanged(block, payload.renderer)

        changed_fields = []

        if payload.data is not None:
            data = prepare_block_data(block.renderer, payload.data)
            if data != block.data:
                block.data = data
                changed_fields.append("data")

        if payload.metadata is not None and payload.metadata != block.meta:
            block.meta = payload.metadata
            changed_fields.append("metadata")

        if payload.is_private is not None and payload.is_private != block.is_private:
            assert_privacy_change(block, payload.is_private)
            block.is_private = payload.is_private
            changed_fields.append("is_private")

        for field in ("display_order", "is_published"):
            value = getattr(payload, field)
            if value is not None and getattr(block, field) != value:
                setattr(block, field, value)
                changed_fields.append(field)

        if changed_fields:
            block.touch()

    return block, changed_fields
