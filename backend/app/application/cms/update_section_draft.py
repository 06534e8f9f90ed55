# app/application/cms/update_section_draft.py
from typing import Any, Dict
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.models.section import Section
from app.domain.content.normalizer import normalize_content
from app.domain.invariants.exceptions import DraftSaveFailed
from app.domain.lifecycle.section import assert_section_action, derive_section_status
from app.utils.transaction import transactional
from app.utils.audit import log_action
from .common import lock_section, refresh_page_status


def update_section_draft(
    *,
    tenant_id: str,
    section_id: str,
    actor_id: str | None,
    content: Dict[str, Any],
) -> Section:
    """
    Replace a section's draft content.

    Responsibilities:
    - schema normalization before anything is stored
    - status recomputed from draft vs published
    - page status kept in step
    - audit logging
    """
    section = lock_section(tenant_id=tenant_id, section_id=section_id)
    assert_section_action(status=section.status, action="edit")

    normalized = normalize_content(
        section.component,
        content,
        normalize_list_items=current_app.config.get("NORMALIZE_LIST_ITEMS", False),
    )
    previous_status = section.status

    try:
        with transactional():
            section.draft_content = normalized
            section.status = derive_section_status(normalized, section.published_content)
            section.updated_by = actor_id

            refresh_page_status(section.page)

            log_action(
                tenant_id=tenant_id,
                action="section.update",
                entity_type="section",
                entity_id=section.id,
                payload={"from_status": previous_status, "to_status": section.status},
            )
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Draft save failed for section {section_id}: {exc}")
        raise DraftSaveFailed("Draft could not be saved, please retry") from exc

    return section
