from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload

from gremlinlink.domain.exceptions import SlugConflict, StoreUnavailable
from gremlinlink.extensions import db
from gremlinlink.models import ClickEvent, ContentBlock, LandingSelection, LANDING_ROW_ID
from gremlinlink.models.base import utcnow
from gremlinlink.utils.transaction import transactional


class BlockStore:
    """
    Persistence for content blocks, click events and the landing selection.

    Reads and writes go through the Flask-SQLAlchemy session of the current
    app context. Callers own transaction boundaries (`transactional()`),
    except for `record_click`, which commits its own append.
    Driver failures surface as `StoreUnavailable`.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    @contextmanager
    def _guard(self):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailable(f"Block store unavailable: {exc.__class__.__name__}") from exc

    # ------------------------
    # Lookups
    # ------------------------

    def get_by_id(self, block_id: str) -> Optional[ContentBlock]:
        with self._guard():
            return self.session.get(ContentBlock, block_id)

    def get_by_slug(
        self,
        slug: str,
        *,
        include_unpublished: bool = False,
        roots_only: bool = True,
    ) -> Optional[ContentBlock]:
        stmt = (
            select(ContentBlock)
            .options(joinedload(ContentBlock.landing))
            .where(ContentBlock.slug == slug)
        )
        if roots_only:
            stmt = stmt.where(ContentBlock.kind == "root")
        if not include_unpublished:
            stmt = stmt.where(ContentBlock.is_published.is_(True))

        with self._guard():
            return self.session.execute(stmt.limit(1)).scalar_one_or_none()

    def get_children(self, parent_id: str, *, include_unpublished: bool = True) -> List[ContentBlock]:
        """Direct children ordered by display_order, then insertion time."""
        stmt = (
            select(ContentBlock)
            .options(joinedload(ContentBlock.landing))
            .where(ContentBlock.parent_id == parent_id)
            .order_by(
                ContentBlock.display_order.asc(),
                ContentBlock.created_at.asc(),
                ContentBlock.id.asc(),
            )
        )
        if not include_unpublished:
            stmt = stmt.where(ContentBlock.is_published.is_(True))

        with self._guard():
            return list(self.session.execute(stmt).scalars())

    def slug_exists(self, slug: str) -> bool:
        with self._guard():
            found = self.session.execute(
                select(ContentBlock.id).where(ContentBlock.slug == slug).limit(1)
            ).first()
        return found is not None

    def query_blocks(
        self,
        *,
        renderer: Optional[str] = None,
        kind: Optional[str] = None,
        published: Optional[bool] = None,
        search: Optional[str] = None,
    ):
        query = ContentBlock.query
        if renderer:
            query = query.filter(ContentBlock.renderer == renderer)
        if kind:
            query = query.filter(ContentBlock.kind == kind)
        if published is not None:
            query = query.filter(ContentBlock.is_published.is_(published))
        if search:
            query = query.filter(db.cast(ContentBlock.data, db.String).ilike(f"%{search}%"))
        return query.order_by(ContentBlock.display_order.asc(), ContentBlock.updated_at.desc())

    def public_blocks(self) -> List[ContentBlock]:
        stmt = (
            select(ContentBlock)
            .where(
                ContentBlock.is_published.is_(True),
                ContentBlock.is_private.is_(False),
                ContentBlock.kind == "root",
            )
            .order_by(ContentBlock.display_order.asc(), ContentBlock.updated_at.desc())
        )
        with self._guard():
            return list(self.session.execute(stmt).scalars())

    def count_roots(self, *, public_only: bool = False) -> int:
        stmt = select(func.count(ContentBlock.id)).where(
            ContentBlock.is_published.is_(True),
            ContentBlock.kind == "root",
        )
        if public_only:
            stmt = stmt.where(ContentBlock.is_private.is_(False))
        with self._guard():
            return self.session.execute(stmt).scalar_one()

    # ------------------------
    # Mutations (inside the caller's transaction)
    # ------------------------

    def add(self, block: ContentBlock) -> ContentBlock:
        """
        Insert `block`. A taken slug raises SlugConflict; any other
        integrity error (bad parent, check constraint) propagates as is.
        """
        if self.slug_exists(block.slug):
            raise SlugConflict(f"Slug '{block.slug}' is already taken")

        self.session.add(block)
        try:
            self.session.flush()
        except IntegrityError as exc:
            # a concurrent insert may have claimed the slug since the check
            self.session.rollback()
            if self.slug_exists(block.slug):
                raise SlugConflict(f"Slug '{block.slug}' is already taken") from exc
            raise
        return block

    def delete(self, block: ContentBlock) -> None:
        self.session.delete(block)
        self.session.flush()

    def lock_block(self, block_id: str) -> Optional[ContentBlock]:
        with self._guard():
            return self.session.execute(
                select(ContentBlock).where(ContentBlock.id == block_id).with_for_update()
            ).scalar_one_or_none()

    # ------------------------
    # Landing selection
    # ------------------------

    def landing_selection(self, *, for_update: bool = False) -> Optional[LandingSelection]:
        stmt = select(LandingSelection).where(LandingSelection.id == LANDING_ROW_ID)
        if for_update:
            stmt = stmt.with_for_update()
        with self._guard():
            return self.session.execute(stmt).scalar_one_or_none()

    def landing_block(self) -> Optional[ContentBlock]:
        stmt = (
            select(ContentBlock)
            .join(LandingSelection, LandingSelection.block_id == ContentBlock.id)
            .where(
                LandingSelection.id == LANDING_ROW_ID,
                ContentBlock.is_published.is_(True),
            )
        )
        with self._guard():
            return self.session.execute(stmt).scalar_one_or_none()

    def assign_landing(self, block: ContentBlock) -> Optional[ContentBlock]:
        """
        Point the singleton selection at `block` and force it public.

        Returns the previously selected block, if any.
        """
        selection = self.landing_selection(for_update=True)
        if selection is None:
            selection = LandingSelection(id=LANDING_ROW_ID)
            self.session.add(selection)

        previous = selection.block if selection.block_id else None
        if previous is not None and previous.id != block.id:
            previous.touch()

        selection.block = block
        block.is_private = False
        block.touch()
        self.session.flush()
        return previous

    def clear_landing(self) -> Optional[ContentBlock]:
        selection = self.landing_selection(for_update=True)
        if selection is None or selection.block_id is None:
            return None

        previous = selection.block
        selection.block = None
        if previous is not None:
            previous.touch()
        self.session.flush()
        return previous

    # ------------------------
    # Clicks
    # ------------------------

    def record_click(
        self,
        block_id: str,
        *,
        event_type: str = "view",
        timestamp: Optional[datetime] = None,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        country: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ClickEvent:
        click = ClickEvent()
        click.block_id = block_id
        click.type = event_type
        click.timestamp = timestamp or utcnow()
        click.referrer = referrer[:500] if referrer else None
        click.user_agent = user_agent
        click.ip_address = ip_address[:45] if ip_address else None
        click.country = country
        click.meta = metadata or {}

        with transactional(self.session):
            self.session.add(click)
        return click

    def click_summary(self, block_id: str, *, since: datetime, recent_limit: int = 10) -> Dict[str, Any]:
        day = func.date(ClickEvent.timestamp)
        with self._guard():
            total = self.session.execute(
                select(func.count(ClickEvent.id)).where(ClickEvent.block_id == block_id)
            ).scalar_one()

            recent = list(
                self.session.execute(
                    select(ClickEvent)
                    .where(ClickEvent.block_id == block_id)
                    .order_by(ClickEvent.timestamp.desc())
                    .limit(recent_limit)
                ).scalars()
            )

            daily = self.session.execute(
                select(day, func.count(ClickEvent.id))
                .where(ClickEvent.block_id == block_id, ClickEvent.timestamp >= since)
                .group_by(day)
                .order_by(day)
            ).all()

            by_type = self.session.execute(
                select(ClickEvent.type, func.count(ClickEvent.id))
                .where(ClickEvent.block_id == block_id)
                .group_by(ClickEvent.type)
            ).all()

        return {
            "total_clicks": total,
            "recent_clicks": recent,
            "daily_stats": [{"date": str(d), "count": c} for d, c in daily],
            "by_type": {t: c for t, c in by_type},
        }
