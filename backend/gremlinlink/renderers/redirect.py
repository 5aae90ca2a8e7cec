from typing import Any, Dict, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from gremlinlink.domain.outcomes import ErrorKind
from .base import (
    BaseRenderer,
    BlockMetadata,
    RedirectResult,
    RenderFailure,
    RendererType,
    first_text,
    text,
)
from .shapes import RedirectData

DEFAULT_STATUS_CODE = 302

_url_adapter = TypeAdapter(AnyUrl)


def looks_like_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def is_absolute_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class RedirectRenderer(BaseRenderer):
    """
    URL shortener redirects.

    Legacy rows sometimes stored the target under another key, so when
    `url` is missing every other string field is scanned, in stored order,
    for an absolute http(s) URL.
    """

    renderer_type = RendererType.REDIRECT
    shape = RedirectData
    cache_ttl = 3600

    def target_url(self, data: RedirectData, raw: Optional[Dict[str, Any]]) -> Optional[str]:
        url = text(data.url)
        if url:
            return url.strip()

        for key, value in (raw or {}).items():
            if key == "url":
                continue
            if looks_like_url(value):
                return value.strip()
        return None

    def _is_complete(self, data):
        url = self.target_url(data, data.model_dump(by_alias=True))
        return url is not None and is_absolute_url(url)

    def _render(self, block, data, context):
        url = self.target_url(data, block.data)
        if not url:
            return RenderFailure(ErrorKind.NOT_FOUND, "Redirect URL not found", 404)

        if not is_absolute_url(url):
            return RenderFailure(ErrorKind.INVALID_DATA, "Redirect URL is not a valid absolute URL", 400)

        # Stored codes pass through verbatim; no whitelist at this layer
        status_code = DEFAULT_STATUS_CODE if data.status_code is None else data.status_code
        return RedirectResult(url=url, status_code=status_code)

    def _metadata(self, block, data, meta):
        return BlockMetadata(
            title=first_text(meta.get("title")) or "Redirect",
            description=first_text(meta.get("description")) or "Redirecting...",
            robots="noindex,nofollow",
        )
