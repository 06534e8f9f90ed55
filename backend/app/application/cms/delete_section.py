# app/application/cms/delete_section.py
from app.extensions import db
from app.utils.order import compact_order
from app.utils.audit import log_action
from app.utils.transaction import transactional
from .common import lock_section, refresh_page_status


def delete_section(
    *,
    tenant_id: str,
    section_id: str,
) -> None:
    """
    Remove a whole section (draft and published content alike)
    and re-compact the remaining positions.
    """
    section = lock_section(tenant_id=tenant_id, section_id=section_id)
    page = section.page

    with transactional():
        page.sections.remove(section)
        db.session.delete(section)
        db.session.flush()

        compact_order(page.sections)
        refresh_page_status(page)

        log_action(
            tenant_id=tenant_id,
            action="section.delete",
            entity_type="section",
            entity_id=section_id,
            payload={"page_id": page.id, "key": section.key},
        )
