def _iso(value):
    return value.isoformat() if value is not None else None


def normalize_block(block, admin=False, include_children=False):
    base = {
        "id": block.id,
        "slug": block.slug,
        "kind": block.kind,
        "parent_id": block.parent_id,
        "renderer": block.renderer,
        "data": block.data or {},
        "metadata": block.meta or {},
        "display_order": block.display_order,
        "is_published": block.is_published,
        "is_private": block.is_private,
        "is_landing_block": block.is_landing_block,
    }

    if admin:
        base["created_at"] = _iso(block.created_at)
        base["updated_at"] = _iso(block.updated_at)

    if include_children:
        children = sorted(block.children, key=lambda b: (b.display_order, b.created_at))
        base["children"] = [
            normalize_block(child, admin=admin, include_children=True) for child in children
        ]

    return base


def normalize_public_block(block):
    """Index card for the public listing: no payload beyond what links need."""
    return {
        "id": block.id,
        "slug": block.slug,
        "renderer": block.renderer,
        "title": (block.meta or {}).get("title") or (block.data or {}).get("title") or block.slug,
        "description": (block.meta or {}).get("description") or (block.data or {}).get("description"),
        "updated_at": _iso(block.updated_at),
    }
