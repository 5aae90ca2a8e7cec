from .base import (
    BlockMetadata,
    JsonResult,
    RedirectResult,
    RenderContext,
    RenderFailure,
    RendererType,
)
from .registry import (
    RENDERERS,
    get_block_metadata,
    get_cache_ttl,
    get_renderer,
    render_block,
    renderer_type,
    validate_block_data,
)

__all__ = [
    "BlockMetadata",
    "JsonResult",
    "RedirectResult",
    "RenderContext",
    "RenderFailure",
    "RendererType",
    "RENDERERS",
    "get_block_metadata",
    "get_cache_ttl",
    "get_renderer",
    "render_block",
    "renderer_type",
    "validate_block_data",
]
