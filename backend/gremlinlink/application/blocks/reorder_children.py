from typing import List, Optional

from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.domain.invariants.exceptions import InvariantViolation
from gremlinlink.models import ContentBlock
from gremlinlink.store import BlockStore
from gremlinlink.utils.order import compact_order
from gremlinlink.utils.transaction import transactional


def reorder_children(
    *,
    parent_id: str,
    ordered_ids: List[str],
    store: Optional[BlockStore] = None,
) -> List[ContentBlock]:
    """
    Put the listed children first, in the given order, and renumber all
    children 0..N-1. Children missing from the list keep their relative
    order after the listed ones.
    """
    store = store or BlockStore()

    with transactional():
        parent = store.get_by_id(parent_id)
        if parent is None:
            raise BlockNotFound(f"Block {parent_id} not found")

        children = store.get_children(parent_id)
        known = {child.id for child in children}

        unknown = [block_id for block_id in ordered_ids if block_id not in known]
        if unknown:
            raise InvariantViolation(f"Blocks are not children of {parent.slug}: {unknown}")

        if len(set(ordered_ids)) != len(ordered_ids):
            raise InvariantViolation("Child ids must not repeat.")

        position = {block_id: index for index, block_id in enumerate(ordered_ids)}
        ordered = sorted(
            enumerate(children),
            key=lambda pair: (0, position[pair[1].id]) if pair[1].id in position else (1, pair[0]),
        )
        compact_order([child for _, child in ordered])

    return [child for _, child in ordered]
