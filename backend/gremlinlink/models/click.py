from gremlinlink.extensions import db
from .base import BaseModel, utcnow


class ClickEvent(BaseModel):
    """Append-only analytics fact. Never updated once written."""
    __tablename__ = "clicks"

    block_id = db.Column(
        db.String(36),
        db.ForeignKey("content_blocks.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = db.Column(db.String(20), nullable=False, default="view")
    timestamp = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    referrer = db.Column(db.String(500), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)  # IPv6 compatible
    country = db.Column(db.String(2), nullable=True)
    meta = db.Column("metadata", db.JSON, nullable=False, default=dict)

    block = db.relationship("ContentBlock", back_populates="clicks")

    __table_args__ = (
        db.Index("idx_clicks_block_timestamp", "block_id", "timestamp"),
    )
