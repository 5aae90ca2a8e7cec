from gremlinlink.domain.outcomes import ErrorKind
from .base import (
    BaseRenderer,
    BlockMetadata,
    JsonResult,
    RenderFailure,
    RendererType,
    first_text,
    isoformat,
)
from .shapes import GalleryData


class GalleryRenderer(BaseRenderer):
    renderer_type = RendererType.GALLERY
    shape = GalleryData
    cache_ttl = 3600

    def _is_complete(self, data):
        return bool(data.images)

    def _render(self, block, data, context):
        if not self._is_complete(data):
            return RenderFailure(ErrorKind.NOT_FOUND, "Gallery images not found", 404)

        return JsonResult(
            data={
                "id": block.id,
                "slug": block.slug,
                "images": [image.model_dump(exclude_none=True) for image in data.images],
                "layout": data.layout,
                "created_at": isoformat(block.created_at),
            },
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        images = data.images or []
        cover = images[0].url if images else None
        title = first_text(meta.get("title")) or "Gallery"
        description = first_text(meta.get("description"))

        return BlockMetadata(
            title=title,
            description=description or f"Gallery with {len(images)} images",
            og_title=title,
            og_description=description,
            og_type="website",
            og_image=cover,
            twitter_card="summary_large_image",
            twitter_title=title,
            twitter_description=description,
            twitter_image=cover,
        )
