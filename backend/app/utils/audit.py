from flask import g
from app.extensions import db
from app.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    tenant_id: str,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    """
    Queue an audit row on the current session.
    Committed (or rolled back) together with the change it describes.
    """
    user = getattr(g, "current_user", None)

    log = AuditLog()
    log.actor_id = user.id if user is not None else None
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
