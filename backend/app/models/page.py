from app.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class Page(BaseModel, TenantMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    # draft | dirty | published, derived from the page's sections
    status = db.Column(db.String(20), default='draft', index=True)
    # Overrides the tenant's site_base_url for this page's preview
    base_url = db.Column(db.String(512), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "Section",
        back_populates="page",
        order_by="Section.position",
        cascade="all, delete-orphan"
    )
