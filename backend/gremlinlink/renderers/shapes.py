from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import BlockData


class RedirectData(BlockData):
    url: Optional[str] = None
    status_code: Optional[int] = Field(default=None, alias="statusCode")


class ArticleData(BlockData):
    title: Optional[str] = None
    content: Optional[List[Any]] = None
    excerpt: Optional[str] = None
    reading_time: Optional[float] = None
    word_count: Optional[int] = None


class MediaAsset(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: Optional[str] = None
    filename: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ImageData(BlockData):
    # media asset shape
    image: Optional[MediaAsset] = None
    alt: Optional[str] = None
    caption: Optional[str] = None

    # legacy flat shape
    url: Optional[str] = None
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class CardData(BlockData):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    icon: Optional[str] = None


class GalleryImage(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str
    alt_text: Optional[str] = None
    caption: Optional[str] = None


class GalleryData(BlockData):
    images: Optional[List[GalleryImage]] = None
    layout: Literal["grid", "masonry", "carousel"] = "grid"


class PageData(BlockData):
    title: Optional[str] = None
    description: Optional[str] = None


class HeadingData(BlockData):
    text: Optional[str] = None
    level: int = Field(default=2, ge=1, le=6)


class TextData(BlockData):
    content: Any = None
