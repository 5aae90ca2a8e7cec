from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_DATA = "invalid_data"
    UNKNOWN_RENDERER = "unknown_renderer"
    STORE_UNAVAILABLE = "store_unavailable"
    RENDER_FAILED = "render_failed"


@dataclass
class BlockNode:
    """
    Detached snapshot of a block and its ordered subtree.

    Renderers and the HTTP layer work on these rather than on ORM rows, so
    nothing downstream of the resolver touches the database session.
    """
    id: str
    slug: str
    kind: str
    renderer: str
    data: Dict[str, Any]
    metadata: Dict[str, Any]
    display_order: int = 0
    parent_id: Optional[str] = None
    is_published: bool = True
    is_private: bool = False
    is_landing_block: bool = False
    created_at: Any = None
    updated_at: Any = None
    children: List["BlockNode"] = field(default_factory=list)

    @classmethod
    def from_model(cls, block) -> "BlockNode":
        return cls(
            id=block.id,
            slug=block.slug,
            kind=block.kind,
            renderer=block.renderer,
            data=dict(block.data or {}),
            metadata=dict(block.meta or {}),
            display_order=block.display_order or 0,
            parent_id=block.parent_id,
            is_published=bool(block.is_published),
            is_private=bool(block.is_private),
            is_landing_block=block.is_landing_block,
            created_at=block.created_at,
            updated_at=block.updated_at,
        )


@dataclass(frozen=True)
class Redirect:
    url: str
    status_code: int = 302
    cache_ttl: int = 3600


@dataclass(frozen=True)
class Rendered:
    block: BlockNode
    content: Dict[str, Any]
    metadata: Dict[str, Any]
    cache_ttl: int = 300


@dataclass(frozen=True)
class NotFound:
    reason: ErrorKind = ErrorKind.NOT_FOUND
    detail: str = ""


@dataclass(frozen=True)
class Error:
    reason: ErrorKind = ErrorKind.STORE_UNAVAILABLE
    detail: str = ""


RenderOutcome = Union[Redirect, Rendered, NotFound, Error]
