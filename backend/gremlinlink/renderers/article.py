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
from .shapes import ArticleData

WORDS_PER_MINUTE = 200


def extract_plain_text(content):
    """Flatten article content items to plain text for word counts."""
    parts = []
    for item in content or []:
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, dict):
            value = item.get("content") or item.get("text")
            if isinstance(value, str):
                parts.append(value)
    return " ".join(" ".join(parts).split())


def reading_stats(content):
    words = len([w for w in extract_plain_text(content).split(" ") if w])
    minutes = 0
    if words:
        minutes = max(1, round(words / WORDS_PER_MINUTE))
    return words, minutes


class ArticleRenderer(BaseRenderer):
    renderer_type = RendererType.ARTICLE
    shape = ArticleData
    cache_ttl = 1800

    def _is_complete(self, data):
        return text(data.title) is not None and data.content is not None

    def _render(self, block, data, context):
        if not self._is_complete(data):
            return RenderFailure(ErrorKind.NOT_FOUND, "Article content not found", 404)

        return JsonResult(
            data={
                "id": block.id,
                "slug": block.slug,
                "title": data.title,
                "content": data.content,
                "reading_time": data.reading_time,
                "excerpt": data.excerpt,
                "created_at": isoformat(block.created_at),
                "updated_at": isoformat(block.updated_at),
            },
            metadata=self.get_metadata(block).as_dict(),
        )

    def _metadata(self, block, data, meta):
        description = first_text(data.excerpt, meta.get("description"))
        og_image = first_text(meta.get("og_image"))

        return BlockMetadata(
            title=data.title,
            description=description or f"Read {data.title}",
            og_title=data.title,
            og_description=description,
            og_type="article",
            og_image=og_image,
            twitter_card="summary_large_image",
            twitter_title=data.title,
            twitter_description=description,
            twitter_image=og_image,
            schema_org={
                "@context": "https://schema.org",
                "@type": "Article",
                "headline": data.title,
                "description": data.excerpt,
                "datePublished": isoformat(block.created_at),
                "dateModified": isoformat(block.updated_at),
            },
        )
