from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity
from app.extensions import db
from app.models.user import User

def tenant_required(fn):
    """
    The token must belong to the request's tenant and to an active user.
    Loads g.current_user.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = getattr(g, "current_tenant", None)
        if not tenant:
            return jsonify({"error": "Tenant context missing"}), 400

        claims = get_jwt()
        if claims.get("tenant_id") != tenant.id:
            return jsonify({"error": "Tenant mismatch"}), 403

        user = db.session.get(User, get_jwt_identity())
        if not user or not user.is_active or user.tenant_id != tenant.id:
            return jsonify({"error": "User not found or disabled"}), 403

        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if get_jwt().get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def feature_enabled(feature_name):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tenant = g.current_tenant

            if not hasattr(tenant, f"enable_{feature_name}"):
                return jsonify({"error": "Feature not recognized"}), 400

            if not tenant.has_feature(feature_name):
                return jsonify({
                    "error": f"Feature '{feature_name}' is disabled for this tenant"
                }), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
