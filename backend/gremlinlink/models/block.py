from gremlinlink.extensions import db
from .base import BaseModel

BLOCK_KINDS = ("root", "child")


class ContentBlock(BaseModel):
    """
    The single polymorphic content row.

    `renderer` is the discriminant; `data` is owned by that renderer and
    `metadata` carries SEO/analytics hints independent of it.
    """
    __tablename__ = "content_blocks"

    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    kind = db.Column(db.String(20), nullable=False, default="root", index=True)  # root | child
    parent_id = db.Column(
        db.String(36),
        db.ForeignKey("content_blocks.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    renderer = db.Column(db.String(50), nullable=False, index=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    # `metadata` is reserved on declarative classes
    meta = db.Column("metadata", db.JSON, nullable=False, default=dict)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_published = db.Column(db.Boolean, nullable=False, default=True, index=True)
    is_private = db.Column(db.Boolean, nullable=False, default=False, index=True)

    parent = db.relationship("ContentBlock", remote_side="ContentBlock.id", back_populates="children")
    children = db.relationship(
        "ContentBlock",
        back_populates="parent",
        order_by="ContentBlock.display_order",
        cascade="all, delete-orphan",
    )
    clicks = db.relationship(
        "ClickEvent",
        back_populates="block",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    landing = db.relationship("LandingSelection", back_populates="block", uselist=False)

    __table_args__ = (
        db.Index("idx_blocks_parent_order", "parent_id", "display_order"),
        db.CheckConstraint("kind IN ('root', 'child')", name="ck_blocks_kind"),
    )

    @property
    def is_landing_block(self):
        return self.landing is not None

    @property
    def is_root(self):
        return self.kind == "root"

    def __repr__(self):
        return f"<ContentBlock {self.slug} ({self.renderer})>"
