import logging
from typing import Optional

from gremlinlink.domain.exceptions import BlockNotFound, SlugConflict
from gremlinlink.domain.invariants.block import assert_block_kind
from gremlinlink.domain.invariants.slug import assert_slug
from gremlinlink.models import ContentBlock
from gremlinlink.store import BlockStore
from gremlinlink.utils.order import next_display_order
from gremlinlink.utils.slugs import child_slug
from gremlinlink.utils.transaction import transactional
from .data import prepare_block_data
from .schemas import BlockCreate

logger = logging.getLogger(__name__)


def create_block(
    *,
    payload: BlockCreate,
    store: Optional[BlockStore] = None,
) -> ContentBlock:
    """
    Create a root block, or a child block when `parent_id` is given.

    Edge cases handled:
    - Root blocks need a valid, unreserved, unused slug
    - Child blocks get a generated slug unless one is supplied
    - Unknown renderer or data the renderer rejects
    - Missing parent
    - Duplicate slug (never overwrites the existing row)
    """
    store = store or BlockStore()
    data = prepare_block_data(payload.renderer, payload.data)

    with transactional():
        parent = None
        if payload.parent_id:
            parent = store.get_by_id(payload.parent_id)
            if parent is None:
                raise BlockNotFound(f"Parent block {payload.parent_id} not found")

        slug = payload.slug
        if parent is not None and not slug:
            slug = child_slug(parent.slug, payload.renderer)
        assert_slug(slug)

        if store.slug_exists(slug):
            raise SlugConflict(f"Slug '{slug}' is already taken")

        display_order = payload.display_order
        if display_order is None:
            siblings = store.get_children(parent.id) if parent is not None else []
            display_order = next_display_order(siblings)

        block = ContentBlock()
        block.slug = slug
        block.kind = "child" if parent is not None else "root"
        block.parent_id = parent.id if parent is not None else None
        block.renderer = payload.renderer
        block.data = data
        block.meta = payload.metadata
        block.display_order = display_order
        block.is_published = payload.is_published
        block.is_private = payload.is_private

        assert_block_kind(block)
        store.add(block)

    logger.info("Created %s block %s (%s)", block.renderer, block.slug, block.kind)
    return block
