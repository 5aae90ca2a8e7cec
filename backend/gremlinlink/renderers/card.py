from gremlinlink.domain.outcomes import ErrorKind
from .base import (
    BaseRenderer,
    BlockMetadata,
    JsonResult,
    RenderFailure,
    RendererType,
    first_text,
    isoformat,
    text,
)
from .shapes import CardData


class CardRenderer(BaseRenderer):
    renderer_type = RendererType.CARD
    shape = CardData
    cache_ttl = 3600

    def _is_complete(self, data):
        return text(data.title) is not None

    def _render(self, block, data, context):
        if not self._is_complete(data):
            return RenderFailure(ErrorKind.NOT_FOUND, "Card title not found", 404)

        return JsonResult(
            data={
                "id": block.id,
                "slug": block.slug,
                "title": data.title,
                "description": data.description,
                "url": data.url,
                "image_url": data.image_url,
                "icon": data.icon,
                "created_at": isoformat(block.created_at),
            },
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        description = first_text(data.description, meta.get("description"))
        return BlockMetadata(
            title=data.title or first_text(meta.get("title")) or "Card",
            description=description or f"Visit {data.title}",
            og_title=data.title,
            og_description=description,
            og_type="website",
            og_image=data.image_url,
            twitter_card="summary",
            twitter_title=data.title,
            twitter_description=description,
            twitter_image=data.image_url,
        )
