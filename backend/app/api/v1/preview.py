# app/api/v1/preview.py
from flask import current_app, g, request, jsonify
from flask_jwt_extended import jwt_required
from app.application.preview.frame import SANDBOX_POLICY, build_preview_url, validate_base_url
from app.application.preview.tokens import get_preview_tokens
from app.domain.content.normalizer import normalize_content
from app.models.page import Page
from app.models.section import Section
from app.models.user import EDITOR_ROLES
from app.utils.decorators import tenant_required, roles_required, feature_enabled
from . import v1_bp

# Same answer for every failure so callers learn nothing about why
INVALID_PREVIEW = {"error": "Invalid preview token"}


@v1_bp.route("/preview/tokens", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("preview")
def create_preview_token():
    tenant = g.current_tenant
    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    org_id = data.get("org_id")
    page_id = data.get("page_id")
    section_id = data.get("section_id")

    if not org_id or not page_id or not section_id:
        return jsonify({"error": "org_id, page_id and section_id are required"}), 400

    if org_id != tenant.id:
        return jsonify({"error": "Tenant mismatch"}), 403

    section = Section.query.filter_by(
        id=section_id,
        page_id=page_id,
        tenant_id=tenant.id,
    ).first()

    if not section:
        return jsonify({"error": "Section not found"}), 404

    issued = get_preview_tokens().issue_token(
        tenant.id, page_id, section_id, issued_by=g.current_user.id
    )

    return jsonify(issued.to_dict()), 201


@v1_bp.route("/sections/<section_id>/preview-frame", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("preview")
def get_preview_frame(section_id):
    """Everything an edit view needs to embed the renderer for one section."""
    tenant = g.current_tenant
    section = Section.query.filter_by(id=section_id, tenant_id=tenant.id).first_or_404()
    page = section.page

    base_url = page.base_url or tenant.site_base_url or current_app.config["PREVIEW_SITE_URL"]

    try:
        validate_base_url(base_url)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 422

    issued = get_preview_tokens().issue_token(
        tenant.id, page.id, section.id, issued_by=g.current_user.id
    )
    src = build_preview_url(base_url, page.slug, section.key, issued.token)

    return jsonify({
        "src": src,
        "sandbox": SANDBOX_POLICY,
        "timeout_seconds": current_app.config["PREVIEW_LOAD_TIMEOUT_SECONDS"],
        **issued.to_dict(),
    })


@v1_bp.route("/preview/content", methods=["GET"])
@feature_enabled("preview")
def get_preview_content():
    """
    Called by the external renderer with the token from the frame URL.
    Returns the section's draft content.
    """
    tenant = g.current_tenant
    page_slug = request.args.get("page")
    section_key = request.args.get("section")
    token = request.args.get("token")

    if not page_slug or not section_key or not token:
        return jsonify(INVALID_PREVIEW), 403

    section = (
        Section.query
        .join(Page, Section.page_id == Page.id)
        .filter(
            Page.tenant_id == tenant.id,
            Page.slug == page_slug,
            Section.key == section_key,
        )
        .first()
    )

    # A missing section gets the same response as a bad token
    page_id = section.page_id if section else ""
    section_id = section.id if section else ""
    accepted = get_preview_tokens().validate_token(token, tenant.id, page_id, section_id)

    if not section or not accepted:
        return jsonify(INVALID_PREVIEW), 403

    response = jsonify({
        "key": section.key,
        "component": section.component,
        "label": section.label,
        "status": section.status,
        "content": normalize_content(
            section.component,
            section.draft_content,
            normalize_list_items=current_app.config.get("NORMALIZE_LIST_ITEMS", False),
        ),
    })
    response.headers["Cache-Control"] = "no-store"
    return response
