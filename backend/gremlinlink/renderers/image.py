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
from .shapes import ImageData


class ImageRenderer(BaseRenderer):
    """Images stored either as a media asset object or as a legacy flat url."""

    renderer_type = RendererType.IMAGE
    shape = ImageData
    cache_ttl = 7200

    @staticmethod
    def image_url(data):
        return first_text(data.image.url if data.image else None, data.url)

    @staticmethod
    def alt_text(data):
        return first_text(
            data.alt,
            data.alt_text,
            data.image.filename if data.image else None,
        ) or "Image"

    def _is_complete(self, data):
        return self.image_url(data) is not None

    def _render(self, block, data, context):
        url = self.image_url(data)
        if not url:
            return RenderFailure(ErrorKind.NOT_FOUND, "Image not found", 404)

        asset = data.image
        return JsonResult(
            data={
                "id": block.id,
                "slug": block.slug,
                "url": url,
                "alt_text": self.alt_text(data),
                "caption": data.caption,
                "width": (asset.width if asset else None) or data.width,
                "height": (asset.height if asset else None) or data.height,
                "created_at": isoformat(block.created_at),
            },
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        url = self.image_url(data)
        # titles only consider the alt fields, not the asset filename
        alt = first_text(data.alt, data.alt_text) or "Image"
        title = first_text(meta.get("title")) or alt
        caption = first_text(data.caption)

        return BlockMetadata(
            title=title,
            description=caption or first_text(meta.get("description")) or "View image",
            og_title=title,
            og_description=caption or first_text(meta.get("description")),
            og_type="website",
            og_image=url,
            twitter_card="summary_large_image",
            twitter_title=title,
            twitter_description=caption,
            twitter_image=url,
        )
