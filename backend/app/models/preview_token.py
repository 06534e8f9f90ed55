from app.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class PreviewToken(BaseModel, TenantMixin):
    """
    Short-lived grant letting the public site render one section's draft.
    Rows are pruned once expired.
    """
    __tablename__ = "preview_tokens"

    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    page_id = db.Column(db.String(36), nullable=False)
    section_id = db.Column(db.String(36), nullable=False)
    issued_at = db.Column(db.DateTime(timezone=True), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    issued_by = db.Column(db.String(36), nullable=True)
