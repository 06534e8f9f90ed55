# app/api/v1/site.py
from flask import g, jsonify
from app.models.page import Page
from app.normalizers.page import normalize_page
from app.utils.decorators import feature_enabled
from . import v1_bp


@v1_bp.route("/site/pages/<slug>", methods=["GET"])
@feature_enabled("cms")
def get_published_page(slug):
    """Live content for the public site; drafts never leave through here."""
    page = Page.query.filter_by(
        tenant_id=g.current_tenant.id,
        slug=slug,
    ).first_or_404()

    data = normalize_page(page, admin=False)
    if not data["sections"]:
        return jsonify({"error": "Page not published"}), 404

    return jsonify(data)
