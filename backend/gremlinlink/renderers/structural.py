"""
Renderers for composition blocks.

A `page` lays out its ordered children; `heading` and `text` are the
building blocks that normally live inside one.
"""
from .base import (
    BaseRenderer,
    BlockMetadata,
    JsonResult,
    RedirectResult,
    RenderFailure,
    RendererType,
    first_text,
    isoformat,
    text,
)
from .shapes import HeadingData, PageData, TextData
from gremlinlink.domain.outcomes import ErrorKind


def child_entry(child, result):
    entry = {
        "id": child.id,
        "slug": child.slug,
        "renderer": child.renderer,
        "display_order": child.display_order,
    }

    if isinstance(result, JsonResult):
        entry["content"] = result.data
    elif isinstance(result, RedirectResult):
        # inside a page a redirect block is a link, never a redirect
        entry["content"] = {"url": result.url, "status_code": result.status_code}
    else:
        entry["error"] = result.kind.value
    return entry


class PageRenderer(BaseRenderer):
    renderer_type = RendererType.PAGE
    shape = PageData
    cache_ttl = 1800

    def _is_complete(self, data):
        return True

    def _render(self, block, data, context):
        from .registry import render_block

        children = [child_entry(child, render_block(child, context)) for child in block.children]

        return JsonResult(
            data={
                "id": block.id,
                "slug": block.slug,
                "title": data.title,
                "description": data.description,
                "children": children,
                "created_at": isoformat(block.created_at),
                "updated_at": isoformat(block.updated_at),
            },
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        title = first_text(data.title, meta.get("title")) or "Page"
        description = first_text(data.description, meta.get("description"))
        return BlockMetadata(
            title=title,
            description=description or "View page",
            og_title=title,
            og_description=description,
            og_type="website",
            og_image=first_text(meta.get("og_image")),
            twitter_card="summary",
            twitter_title=title,
            twitter_description=description,
        )


class HeadingRenderer(BaseRenderer):
    renderer_type = RendererType.HEADING
    shape = HeadingData
    cache_ttl = 1800

    def _is_complete(self, data):
        return text(data.text) is not None

    def _render(self, block, data, context):
        if not self._is_complete(data):
            return RenderFailure(ErrorKind.NOT_FOUND, "Heading text not found", 404)

        return JsonResult(
            data={"id": block.id, "slug": block.slug, "text": data.text, "level": data.level},
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        return BlockMetadata(
            title=first_text(data.text, meta.get("title")) or "Heading",
            description=first_text(meta.get("description")) or "View content",
        )


class TextRenderer(BaseRenderer):
    renderer_type = RendererType.TEXT
    shape = TextData
    cache_ttl = 1800

    def _is_complete(self, data):
        return data.content is not None

    def _render(self, block, data, context):
        if not self._is_complete(data):
            return RenderFailure(ErrorKind.NOT_FOUND, "Text content not found", 404)

        return JsonResult(
            data={"id": block.id, "slug": block.slug, "content": data.content},
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        return BlockMetadata(
            title=first_text(meta.get("title")) or "Content",
            description=first_text(meta.get("description")) or "View content",
        )
