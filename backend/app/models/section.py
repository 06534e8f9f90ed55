from app.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class Section(BaseModel, TenantMixin):
    """
    One editable slot on a page.

    draft_content is what editors change. published_content is only ever
    written by publish/discard, and stays NULL until the first publish.
    status is cached from the two and recomputed on every write.
    """
    __tablename__ = "sections"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, index=True)
    key = db.Column(db.String(100), nullable=False)  # stable slot name, e.g. "hero"
    label = db.Column(db.String(200), nullable=False, default="")
    component = db.Column(db.String(100), nullable=False)  # HeroSection, PromoCard, ...
    position = db.Column(db.Integer, nullable=False, default=0)

    draft_content = db.Column(db.JSON, nullable=False, default=dict)
    published_content = db.Column(db.JSON(none_as_null=True), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="draft", index=True)

    published_at = db.Column(db.DateTime(timezone=True), nullable=True)
    updated_by = db.Column(db.String(36), nullable=True)

    page = db.relationship("Page", back_populates="sections")

    __table_args__ = (
        db.UniqueConstraint("page_id", "key", name="uq_section_key_per_page"),
        db.Index("idx_section_page_position", "page_id", "position"),
    )
