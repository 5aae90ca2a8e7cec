from dataclasses import asdict

from gremlinlink.domain.outcomes import BlockNode, Error, NotFound, Redirect, Rendered


def normalize_node(node: BlockNode):
    data = asdict(node)
    for key in ("created_at", "updated_at"):
        if data[key] is not None:
            data[key] = data[key].isoformat()
    data.pop("children")
    data["children"] = [normalize_node(child) for child in node.children]
    return data


def normalize_outcome(outcome, *, detail=False):
    """
    JSON form of a RenderOutcome.

    `detail` exposes the failure reason; it is meant for admin callers only.
    """
    if isinstance(outcome, Redirect):
        return {
            "type": "redirect",
            "url": outcome.url,
            "status_code": outcome.status_code,
            "cache_ttl": outcome.cache_ttl,
        }

    if isinstance(outcome, Rendered):
        return {
            "type": "rendered",
            "block": normalize_node(outcome.block),
            "content": outcome.content,
            "metadata": outcome.metadata,
            "cache_ttl": outcome.cache_ttl,
        }

    body = {"type": "not_found" if isinstance(outcome, NotFound) else "error"}
    if detail and isinstance(outcome, (NotFound, Error)):
        body["reason"] = outcome.reason.value
        body["detail"] = outcome.detail
    return body
