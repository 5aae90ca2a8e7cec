from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BlockCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slug: Optional[str] = None
    renderer: str = Field(min_length=1, max_length=50)
    data: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    parent_id: Optional[str] = None
    display_order: Optional[int] = Field(default=None, ge=0)
    is_published: bool = True
    is_private: bool = False


class BlockUpdate(BaseModel):
    """Partial update. The slug is not updatable; the renderer may only be repeated."""

    model_config = ConfigDict(extra="forbid")

    renderer: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    display_order: Optional[int] = Field(default=None, ge=0)
    is_published: Optional[bool] = None
    is_private: Optional[bool] = None


class ChildOrder(BaseModel):
    ordered_ids: List[str] = Field(min_length=1)
