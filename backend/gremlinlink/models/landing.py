from gremlinlink.extensions import db
from .base import utcnow

LANDING_ROW_ID = 1


class LandingSelection(db.Model):
    """
    Singleton row naming the site's landing block.

    One row keyed by a constant primary key makes "at most one landing
    block" structural: changing the landing block is a single-row write.
    """
    __tablename__ = "landing_selection"

    id = db.Column(db.Integer, primary_key=True, default=LANDING_ROW_ID)
    block_id = db.Column(
        db.String(36),
        db.ForeignKey("content_blocks.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    block = db.relationship("ContentBlock", back_populates="landing")

    __table_args__ = (
        db.CheckConstraint(f"id = {LANDING_ROW_ID}", name="ck_landing_singleton"),
    )
