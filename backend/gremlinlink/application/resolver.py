from __future__ import annotations

import logging
from typing import List, Optional, Set

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from gremlinlink.domain.exceptions import StoreUnavailable
from gremlinlink.domain.outcomes import (
    BlockNode,
    Error,
    ErrorKind,
    NotFound,
    Redirect,
    Rendered,
    RenderOutcome,
)
from gremlinlink.models.base import utcnow
from gremlinlink.renderers import (
    JsonResult,
    RedirectResult,
    RenderContext,
    RendererType,
    get_cache_ttl,
    render_block,
)
from gremlinlink.store import BlockStore

logger = logging.getLogger(__name__)


def current_recorder():
    return current_app.extensions.get("click_recorder")


class BlockResolver:
    """
    Turns a slug into a RenderOutcome.

    lookup -> (redirect fast path) -> subtree assembly -> render -> click.
    Children are never loaded for redirects. Every failure below this class
    comes back as a NotFound or Error outcome; nothing is raised to the
    HTTP layer.
    """

    def __init__(self, store: Optional[BlockStore] = None, recorder=None):
        self.store = store or BlockStore()
        self.recorder = recorder

    def resolve(
        self,
        slug: str,
        context: Optional[RenderContext] = None,
        *,
        include_unpublished: bool = False,
    ) -> RenderOutcome:
        context = context or RenderContext(is_preview=include_unpublished)

        try:
            block = self.store.get_by_slug(slug, include_unpublished=include_unpublished)
            if block is None:
                return NotFound(ErrorKind.NOT_FOUND, f"No block for slug '{slug}'")

            node = BlockNode.from_model(block)

            if node.renderer == RendererType.REDIRECT.value:
                return self._redirect(node, context)

            node.children = self.load_children(node.id, include_unpublished=include_unpublished)
            return self._render(node, context)

        except (StoreUnavailable, SQLAlchemyError) as exc:
            logger.error("Store unavailable while resolving '%s': %s", slug, exc)
            return Error(ErrorKind.STORE_UNAVAILABLE, "Content store unavailable")
        except Exception:
            logger.exception("Resolving '%s' failed", slug)
            return NotFound(ErrorKind.RENDER_FAILED, "Rendering failed")

    def load_children(
        self,
        parent_id: str,
        *,
        include_unpublished: bool = False,
        _seen: Optional[Set[str]] = None,
    ) -> List[BlockNode]:
        """Ordered subtree below `parent_id`, recursing until a block has no children."""
        seen = _seen if _seen is not None else {parent_id}
        nodes = []

        for child in self.store.get_children(parent_id, include_unpublished=include_unpublished):
            if child.id in seen:
                logger.warning("Block %s appears twice under %s; skipping", child.id, parent_id)
                continue
            seen.add(child.id)

            node = BlockNode.from_model(child)
            node.children = self.load_children(
                child.id,
                include_unpublished=include_unpublished,
                _seen=seen,
            )
            nodes.append(node)

        return nodes

    def _redirect(self, node: BlockNode, context: RenderContext) -> RenderOutcome:
        result = render_block(node, context)
        if not isinstance(result, RedirectResult):
            logger.info("Redirect block %s not followed: %s", node.slug, result.message)
            return NotFound(result.kind, result.message)

        self._track(node, "redirect", context)
        return Redirect(
            url=result.url,
            status_code=result.status_code,
            cache_ttl=get_cache_ttl(node.renderer),
        )

    def _render(self, node: BlockNode, context: RenderContext) -> RenderOutcome:
        result = render_block(node, context)
        if not isinstance(result, JsonResult):
            return NotFound(getattr(result, "kind", ErrorKind.RENDER_FAILED), getattr(result, "message", ""))

        self._track(node, "view", context)
        return Rendered(
            block=node,
            content=result.data,
            metadata=result.metadata,
            cache_ttl=get_cache_ttl(node.renderer),
        )

    def _track(self, node: BlockNode, event_type: str, context: RenderContext) -> None:
        if context.is_preview or self.recorder is None:
            return

        # not awaited: the outcome is returned whatever happens to the write
        self.recorder.record(node.id, {
            "type": event_type,
            "timestamp": utcnow(),
            "userAgent": context.user_agent,
            "referrer": context.referrer,
            "ipAddress": context.ip_address,
            "country": context.country,
        })
