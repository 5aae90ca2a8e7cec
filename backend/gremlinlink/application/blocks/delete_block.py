import logging
from typing import Optional

from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.store import BlockStore
from gremlinlink.utils.transaction import transactional

logger = logging.getLogger(__name__)


def delete_block(
    *,
    block_id: str,
    store: Optional[BlockStore] = None,
) -> None:
    """
    Hard-delete a block with its whole subtree.

    Notes:
    - Child blocks are removed through the ORM cascade
    - Click events go with their block through ON DELETE CASCADE
    - A deleted landing block leaves no landing block behind
    """
    store = store or BlockStore()

    with transactional():
        block = store.get_by_id(block_id)
        if block is None:
            raise BlockNotFound(f"Block {block_id} not found")

        slug = block.slug
        store.delete(block)

    logger.info("Deleted block %s (%s)", block_id, slug)
