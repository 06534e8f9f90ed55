# app/application/cms/publish_all_sections.py
import copy
from typing import Dict
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.domain.invariants.exceptions import PublishFailed
from app.domain.lifecycle.section import PUBLISHED, derive_section_status
from app.utils.clock import utc_now
from app.utils.transaction import transactional
from app.utils.audit import log_action
from .common import lock_page, refresh_page_status


def publish_all_sections(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str | None,
) -> Dict[str, int | str]:
    """
    Publish every section of a page that is not live yet.
    All sections go live together or none does.
    """
    page = lock_page(tenant_id=tenant_id, page_id=page_id)
    pending = [s for s in page.sections if s.status != PUBLISHED]
    now = utc_now()

    try:
        with transactional():
            for section in pending:
                section.published_content = copy.deepcopy(section.draft_content)
                section.status = derive_section_status(
                    section.draft_content, section.published_content
                )
                section.published_at = now
                section.updated_by = actor_id

            refresh_page_status(page)

            log_action(
                tenant_id=tenant_id,
                action="page.publish_all",
                entity_type="page",
                entity_id=page.id,
                payload={"count": len(pending)},
            )
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Publish-all failed for page {page_id}: {exc}")
        raise PublishFailed("Page could not be published, please retry") from exc

    return {"page_id": page.id, "published": len(pending), "status": page.status}
