# app/application/cms/publish_section.py
import copy
from typing import Dict
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.domain.invariants.exceptions import PublishFailed
from app.domain.lifecycle.section import assert_section_action, derive_section_status
from app.utils.clock import utc_now
from app.utils.transaction import transactional
from app.utils.audit import log_action
from .common import lock_section, refresh_page_status


def publish_section(
    *,
    tenant_id: str,
    section_id: str,
    actor_id: str | None,
) -> Dict[str, str]:
    """
    Make a section's draft live.

    draft_content is copied to published_content and status set to
    published in one transaction. If the write fails, the rollback leaves
    draft, published and status exactly as they were.
    """
    section = lock_section(tenant_id=tenant_id, section_id=section_id)
    assert_section_action(status=section.status, action="publish")

    previous_status = section.status

    try:
        with transactional():
            section.published_content = copy.deepcopy(section.draft_content)
            section.status = derive_section_status(
                section.draft_content, section.published_content
            )
            section.published_at = utc_now()
            section.updated_by = actor_id

            refresh_page_status(section.page)

            log_action(
                tenant_id=tenant_id,
                action="section.publish",
                entity_type="section",
                entity_id=section.id,
                payload={"from_status": previous_status},
            )
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Publish failed for section {section_id}: {exc}")
        raise PublishFailed("Section could not be published, please retry") from exc

    return {"section_id": section.id, "status": section.status}
