# app/api/v1/components.py
from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required
from app.domain.content.normalizer import normalize_content
from app.domain.schemas.components import (
    get_field_keys,
    get_schema,
    list_component_types,
    schema_to_dict,
)
from app.utils.decorators import tenant_required, feature_enabled
from . import v1_bp


@v1_bp.route("/components", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def list_components():
    return jsonify([
        {"type": name, "fields": get_field_keys(name)}
        for name in list_component_types()
    ])


@v1_bp.route("/components/<component_type>/schema", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def get_component_schema(component_type):
    schema = get_schema(component_type)
    if schema is None:
        return jsonify({"error": f"Unknown component type: {component_type}"}), 404

    return jsonify({
        "type": component_type,
        "fields": schema_to_dict(schema),
    })


@v1_bp.route("/components/<component_type>/normalize", methods=["POST"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def normalize_component_content(component_type):
    """Fill unsaved form content with schema defaults (nothing is stored)."""
    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    content = data.get("content") or {}

    return jsonify({
        "type": component_type,
        "content": normalize_content(
            component_type,
            content,
            normalize_list_items=current_app.config.get("NORMALIZE_LIST_ITEMS", False),
        ),
    })
