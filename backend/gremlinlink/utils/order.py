from gremlinlink.extensions import db


def compact_order(items, order_field="display_order", start=0):
    """
    Re-assigns sequential order values (start..start+N-1) to `items`,
    keeping their current sequence.
    """
    for index, item in enumerate(items, start=start):
        if getattr(item, order_field) != index:
            setattr(item, order_field, index)
            item.touch()

    db.session.flush()
    return items


def next_display_order(siblings, order_field="display_order"):
    orders = [getattr(s, order_field) for s in siblings]
    return max(orders) + 1 if orders else 0
