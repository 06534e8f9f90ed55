from app.extensions import db
from .base import BaseModel

class Tenant(BaseModel):
    """An organization owning a website."""
    __tablename__ = "tenants"

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True)

    # Where the organization's public site (the preview renderer) lives
    site_base_url = db.Column(db.String(512), nullable=True)

    enable_cms = db.Column(db.Boolean, default=True)
    enable_preview = db.Column(db.Boolean, default=True)

    # JSON field for future toggles (flexible)
    features = db.Column(db.JSON, default=dict)

    def has_feature(self, feature_name: str) -> bool:
        """
        Check if a feature is enabled for this tenant.
        """
        # Check JSON overrides first
        overrides = self.features or {}
        if overrides.get(feature_name) is not None:
            return bool(overrides[feature_name])

        # Fallback to attribute toggles
        return bool(getattr(self, f"enable_{feature_name}", False))
