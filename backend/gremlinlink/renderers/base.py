from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from gremlinlink.domain.outcomes import BlockNode, ErrorKind

DEFAULT_CACHE_TTL = 300


class RendererType(str, Enum):
    REDIRECT = "redirect"
    ARTICLE = "article"
    IMAGE = "image"
    CARD = "card"
    GALLERY = "gallery"
    PAGE = "page"
    HEADING = "heading"
    TEXT = "text"


@dataclass
class RenderContext:
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    ip_address: Optional[str] = None
    country: Optional[str] = None
    is_preview: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RedirectResult:
    url: str
    status_code: int = 302


@dataclass(frozen=True)
class JsonResult:
    data: Dict[str, Any]
    metadata: Dict[str, Any]


@dataclass(frozen=True)
class RenderFailure:
    kind: ErrorKind
    message: str
    status_code: int = 404


RenderResult = Union[RedirectResult, JsonResult, RenderFailure]


class BlockMetadata(BaseModel):
    """SEO metadata synthesized from a block's data and metadata."""

    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None
    schema_org: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


DEFAULT_METADATA = BlockMetadata(title="Content", description="View content")


class BlockData(BaseModel):
    """Base for renderer-owned data shapes. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


def text(value: Any) -> Optional[str]:
    """Return `value` if it is a non-empty string."""
    if isinstance(value, str) and value:
        return value
    return None


def first_text(*values: Any) -> Optional[str]:
    for value in values:
        found = text(value)
        if found is not None:
            return found
    return None


def isoformat(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class BaseRenderer(ABC):
    """
    Strategy for one renderer tag.

    Subclasses declare `shape`, the pydantic model their block data must
    parse into, and implement `_render` over the parsed shape. A shape that
    fails to parse is malformed data (400); a parsed shape lacking its
    required content is reported by `_render` as not found (404).
    """

    renderer_type: RendererType
    shape: Type[BlockData] = BlockData
    cache_ttl: int = DEFAULT_CACHE_TTL

    def parse(self, data: Optional[Dict[str, Any]]) -> BlockData:
        return self.shape.model_validate(data or {})

    def validate(self, data: Optional[Dict[str, Any]]) -> bool:
        try:
            parsed = self.parse(data)
        except ValidationError:
            return False
        return self._is_complete(parsed)

    def render(self, block: BlockNode, context: Optional[RenderContext] = None) -> RenderResult:
        try:
            parsed = self.parse(block.data)
        except ValidationError as exc:
            return RenderFailure(
                kind=ErrorKind.INVALID_DATA,
                message=f"Invalid data for renderer {block.renderer}: {exc.error_count()} error(s)",
                status_code=400,
            )
        return self._render(block, parsed, context or RenderContext())

    def get_metadata(self, block: BlockNode) -> BlockMetadata:
        try:
            parsed = self.parse(block.data)
        except ValidationError:
            return DEFAULT_METADATA
        return self._metadata(block, parsed, block.metadata or {})

    def get_cache_ttl(self) -> int:
        return self.cache_ttl

    @abstractmethod
    def _is_complete(self, data: BlockData) -> bool:
        ...

    @abstractmethod
    def _render(self, block: BlockNode, data: BlockData, context: RenderContext) -> RenderResult:
        ...

    @abstractmethod
    def _metadata(self, block: BlockNode, data: BlockData, meta: Dict[str, Any]) -> BlockMetadata:
        ...
