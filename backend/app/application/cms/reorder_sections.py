# app/application/cms/reorder_sections.py
from typing import Any, Dict, List
from app.domain.invariants.page import assert_page
from app.utils.order import compact_order
from app.utils.audit import log_action
from app.utils.transaction import transactional
from .common import lock_page


def reorder_sections(
    *,
    tenant_id: str,
    page_id: str,
    items: List[Dict[str, Any]],
) -> List[str]:
    """
    Apply [{id, position}, ...] then normalize positions to 1..N.
    Ids not on the page are ignored. Returns section ids in their new order.
    """
    page = lock_page(tenant_id=tenant_id, page_id=page_id)
    section_map = {s.id: s for s in page.sections}

    with transactional():
        for item in items:
            section = section_map.get(item.get("id"))
            if section is not None:
                section.position = int(item["position"])

        ordered = compact_order(page.sections)
        assert_page(page)

        log_action(
            tenant_id=tenant_id,
            action="section.reorder",
            entity_type="page",
            entity_id=page.id,
            payload={"count": len(items)},
        )

    return [s.id for s in ordered]
