# app/api/v1/cms.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from app.utils.decorators import tenant_required, roles_required, feature_enabled
from app.utils.optimistic_lock import enforce_optimistic_lock
from app.models.page import Page
from app.models.section import Section
from app.models.user import EDITOR_ROLES
from app.normalizers.page import normalize_page
from app.normalizers.section import normalize_section
from app.normalizers.pagination import normalize_pagination
from app.application.cms.create_page import create_page as create_page_uc
from app.application.cms.update_page import update_page as update_page_uc
from app.application.cms.delete_page import delete_page as delete_page_uc
from app.application.cms.create_section import create_section as create_section_uc
from app.application.cms.update_section_draft import update_section_draft
from app.application.cms.publish_section import publish_section as publish_section_uc
from app.application.cms.discard_section import discard_section_changes
from app.application.cms.delete_section import delete_section as delete_section_uc
from app.application.cms.reorder_sections import reorder_sections as reorder_sections_uc
from app.application.cms.publish_all_sections import publish_all_sections
from app.application.cms.discard_all_changes import discard_all_changes
from . import v1_bp # import the versioned blueprint


def _page_or_404(page_id):
    return Page.query.filter_by(id=page_id, tenant_id=g.current_tenant.id).first_or_404()


def _section_or_404(section_id):
    return Section.query.filter_by(id=section_id, tenant_id=g.current_tenant.id).first_or_404()


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def create_page():
    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        page = create_page_uc(
            tenant_id=g.current_tenant.id,
            actor_id=g.current_user.id,
            data=data,
        )
    except ValueError as exc:
        status = 409 if "already exists" in str(exc) else 400
        return jsonify({"error": str(exc)}), status

    return jsonify({
        "id": page.id,
        "message": "Page created successfully"
    }), 201


@v1_bp.route("/pages", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def list_pages():
    status = request.args.get("status") # draft | dirty | published | None
    page_num = request.args.get("page", 1, type=int)
    per_page = min(request.args.get("per_page", 10, type=int), 100)

    query = Page.query.filter_by(tenant_id=g.current_tenant.id)
    if status:
        query = query.filter_by(status=status)

    pagination = query.order_by(Page.created_at.desc()).paginate(
        page=page_num, per_page=per_page, error_out=False
    )

    return jsonify(
        normalize_pagination(
            pagination.items,
            lambda p: normalize_page(p, admin=True, include_sections=False),
            page=page_num,
            per_page=per_page,
            total=pagination.total,
        )
    )


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def get_page(page_id):
    return jsonify(normalize_page(_page_or_404(page_id), admin=True))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def update_page(page_id):
    enforce_optimistic_lock(_page_or_404(page_id))

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        update_page_uc(
            tenant_id=g.current_tenant.id,
            page_id=page_id,
            data=data,
        )
    except ValueError as exc:
        status = 409 if "already exists" in str(exc) else 400
        return jsonify({"error": str(exc)}), status

    return jsonify({"message": "Page updated successfully"}), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def delete_page(page_id):
    delete_page_uc(tenant_id=g.current_tenant.id, page_id=page_id)
    return jsonify({"message": "Page deleted successfully"}), 200


@v1_bp.route("/pages/<page_id>/publish-all", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def publish_all(page_id):
    result = publish_all_sections(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        actor_id=g.current_user.id,
    )
    return jsonify(result), 200


@v1_bp.route("/pages/<page_id>/discard-all", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def discard_page_changes(page_id):
    result = discard_all_changes(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        actor_id=g.current_user.id,
    )
    return jsonify(result), 200


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/pages/<page_id>/sections", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def list_sections(page_id):
    page = _page_or_404(page_id)
    sections = sorted(page.sections, key=lambda s: s.position)

    return jsonify([normalize_section(s, admin=True) for s in sections])


@v1_bp.route("/pages/<page_id>/sections", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def create_section(page_id):
    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    if "position" in data and not isinstance(data["position"], int):
        return jsonify({"error": "position must be an integer"}), 400

    try:
        section = create_section_uc(
            tenant_id=g.current_tenant.id,
            page_id=page_id,
            actor_id=g.current_user.id,
            data=data,
        )
    except ValueError as exc:
        status = 409 if "already exists" in str(exc) else 400
        return jsonify({"error": str(exc)}), status

    return jsonify(normalize_section(section, admin=True)), 201


@v1_bp.route("/pages/<page_id>/sections/reorder", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def reorder_sections(page_id):
    data = request.get_json(silent=True)  # [{id: "...", position: 1}, ...]

    if not isinstance(data, list) or not all(
        isinstance(item, dict) and "id" in item and isinstance(item.get("position"), int)
        for item in data
    ):
        return jsonify({"error": "Invalid payload"}), 400

    order = reorder_sections_uc(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        items=data,
    )

    return jsonify({"message": "Sections reordered", "order": order}), 200


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def get_section(section_id):
    return jsonify(normalize_section(_section_or_404(section_id), admin=True))


@v1_bp.route("/sections/<section_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def update_section(section_id):
    enforce_optimistic_lock(_section_or_404(section_id))

    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    content = data.get("draft_content")

    if not isinstance(content, dict):
        return jsonify({"error": "draft_content must be an object"}), 400

    section = update_section_draft(
        tenant_id=g.current_tenant.id,
        section_id=section_id,
        actor_id=g.current_user.id,
        content=content,
    )

    return jsonify(normalize_section(section, admin=True)), 200


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def delete_section(section_id):
    delete_section_uc(tenant_id=g.current_tenant.id, section_id=section_id)
    return jsonify({"message": "Section deleted and positions re-compacted"}), 200


@v1_bp.route("/sections/<section_id>/publish", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def publish_section(section_id):
    result = publish_section_uc(
        tenant_id=g.current_tenant.id,
        section_id=section_id,
        actor_id=g.current_user.id,
    )
    return jsonify(result), 200


@v1_bp.route("/sections/<section_id>/discard", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def discard_section(section_id):
    result = discard_section_changes(
        tenant_id=g.current_tenant.id,
        section_id=section_id,
        actor_id=g.current_user.id,
    )
    return jsonify(result), 200
