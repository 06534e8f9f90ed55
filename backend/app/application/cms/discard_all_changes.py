# app/application/cms/discard_all_changes.py
import copy
from typing import Dict
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.domain.invariants.exceptions import PublishFailed
from app.domain.lifecycle.section import DIRTY, derive_section_status
from app.utils.transaction import transactional
from app.utils.audit import log_action
from .common import lock_page, refresh_page_status


def discard_all_changes(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str | None,
) -> Dict[str, int | str]:
    """
    Revert every dirty section of a page to its live content.
    Never-published sections keep their draft.
    """
    page = lock_page(tenant_id=tenant_id, page_id=page_id)
    dirty = [s for s in page.sections if s.status == DIRTY]

    try:
        with transactional():
            for section in dirty:
                section.draft_content = copy.deepcopy(section.published_content)
                section.status = derive_section_status(
                    section.draft_content, section.published_content
                )
                section.updated_by = actor_id

            refresh_page_status(page)

            log_action(
                tenant_id=tenant_id,
                action="page.discard_all",
                entity_type="page",
                entity_id=page.id,
                payload={"count": len(dirty)},
            )
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Discard-all failed for page {page_id}: {exc}")
        raise PublishFailed("Changes could not be discarded, please retry") from exc

    return {"page_id": page.id, "discarded": len(dirty), "status": page.status}
