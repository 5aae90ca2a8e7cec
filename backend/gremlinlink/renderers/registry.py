import logging
from typing import Dict, Optional

from gremlinlink.domain.outcomes import BlockNode, ErrorKind
from .base import (
    DEFAULT_CACHE_TTL,
    DEFAULT_METADATA,
    BaseRenderer,
    BlockMetadata,
    RenderContext,
    RenderFailure,
    RenderResult,
    RendererType,
)
from .article import ArticleRenderer
from .card import CardRenderer
from .gallery import GalleryRenderer
from .image import ImageRenderer
from .redirect import RedirectRenderer
from .structural import HeadingRenderer, PageRenderer, TextRenderer

logger = logging.getLogger(__name__)

RENDERERS: Dict[RendererType, BaseRenderer] = {
    RendererType.REDIRECT: RedirectRenderer(),
    RendererType.ARTICLE: ArticleRenderer(),
    RendererType.IMAGE: ImageRenderer(),
    RendererType.CARD: CardRenderer(),
    RendererType.GALLERY: GalleryRenderer(),
    RendererType.PAGE: PageRenderer(),
    RendererType.HEADING: HeadingRenderer(),
    RendererType.TEXT: TextRenderer(),
}

_unregistered = set(RendererType) - set(RENDERERS)
if _unregistered:
    raise RuntimeError(f"Renderer types without a renderer: {sorted(t.value for t in _unregistered)}")


def renderer_type(tag: str) -> Optional[RendererType]:
    try:
        return RendererType(tag)
    except ValueError:
        return None


def get_renderer(tag: str) -> Optional[BaseRenderer]:
    kind = renderer_type(tag)
    if kind is None:
        return None
    return RENDERERS[kind]


def render_block(block: BlockNode, context: Optional[RenderContext] = None) -> RenderResult:
    """
    Dispatch a block to its renderer.

    Never raises: unknown tags and renderer crashes come back as
    `RenderFailure` values.
    """
    renderer = get_renderer(block.renderer)
    if renderer is None:
        logger.warning("Unknown renderer %r on block %s (%s)", block.renderer, block.id, block.slug)
        return RenderFailure(
            kind=ErrorKind.UNKNOWN_RENDERER,
            message=f"Unknown renderer: {block.renderer}",
            status_code=404,
        )

    try:
        return renderer.render(block, context)
    except Exception:
        logger.exception("Renderer %s failed for block %s", block.renderer, block.id)
        return RenderFailure(kind=ErrorKind.RENDER_FAILED, message="Rendering failed", status_code=500)


def get_block_metadata(block: BlockNode) -> BlockMetadata:
    renderer = get_renderer(block.renderer)
    if renderer is None:
        return DEFAULT_METADATA
    return renderer.get_metadata(block)


def get_cache_ttl(tag: str) -> int:
    renderer = get_renderer(tag)
    if renderer is None:
        return DEFAULT_CACHE_TTL
    return renderer.get_cache_ttl()


def validate_block_data(tag: str, data) -> bool:
    renderer = get_renderer(tag)
    return renderer is not None and renderer.validate(data)
