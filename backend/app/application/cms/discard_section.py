# app/application/cms/discard_section.py
import copy
from typing import Dict
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.domain.invariants.exceptions import PublishFailed
from app.domain.lifecycle.section import assert_section_action, derive_section_status
from app.utils.transaction import transactional
from app.utils.audit import log_action
from .common import lock_section, refresh_page_status


def discard_section_changes(
    *,
    tenant_id: str,
    section_id: str,
    actor_id: str | None,
) -> Dict[str, str]:
    """
    Throw away unpublished edits: draft_content goes back to the live copy.
    Sections that were never published have nothing to go back to.
    """
    section = lock_section(tenant_id=tenant_id, section_id=section_id)
    assert_section_action(status=section.status, action="discard")

    try:
        with transactional():
            section.draft_content = copy.deepcopy(section.published_content)
            section.status = derive_section_status(
                section.draft_content, section.published_content
            )
            section.updated_by = actor_id

            refresh_page_status(section.page)

            log_action(
                tenant_id=tenant_id,
                action="section.discard",
                entity_type="section",
                entity_id=section.id,
            )
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Discard failed for section {section_id}: {exc}")
        raise PublishFailed("Changes could not be discarded, please retry") from exc

    return {"section_id": section.id, "status": section.status}
