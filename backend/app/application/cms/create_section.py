# app/application/cms/create_section.py
from typing import Any, Dict
from flask import current_app
from sqlalchemy.exc import IntegrityError
from app.extensions import db
from app.models.section import Section
from app.domain.content.normalizer import normalize_content
from app.domain.invariants.page import assert_page
from app.domain.lifecycle.section import DRAFT
from app.utils.order import compact_order
from app.utils.audit import log_action
from app.utils.transaction import transactional
from .common import lock_page, refresh_page_status


def create_section(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str | None,
    data: Dict[str, Any],
) -> Section:
    """
    Provision a section slot on a page.

    The section starts as a never-published draft whose content is the
    component's defaults merged over any initial content supplied.
    Component types without a schema are accepted; their content is kept as-is.
    """
    key = data.get("key")
    component = data.get("component")

    if not key or not component:
        raise ValueError("Both key and component are required")

    initial = data.get("content") or {}
    if not isinstance(initial, dict):
        raise ValueError("Section content must be an object")

    page = lock_page(tenant_id=tenant_id, page_id=page_id)

    if any(s.key == key for s in page.sections):
        raise ValueError(f"A section with key '{key}' already exists on this page")

    max_position = max((s.position for s in page.sections), default=0)
    requested = data.get("position")

    section = Section()
    section.tenant_id = tenant_id
    section.page_id = page.id
    section.key = key
    section.label = data.get("label") or key
    section.component = component
    section.position = requested if requested else max_position + 1
    section.draft_content = normalize_content(
        component,
        initial,
        normalize_list_items=current_app.config.get("NORMALIZE_LIST_ITEMS", False),
    )
    section.published_content = None
    section.status = DRAFT
    section.updated_by = actor_id

    try:
        with transactional():
            if requested:
                # Make room: the new section takes the requested slot
                for existing in page.sections:
                    if existing.position >= requested:
                        existing.position += 1

            db.session.add(section)
            page.sections.append(section)
            db.session.flush()  # ensures section.id is available

            compact_order(page.sections)
            refresh_page_status(page)
            assert_page(page)

            log_action(
                tenant_id=tenant_id,
                action="section.create",
                entity_type="section",
                entity_id=section.id,
                payload={
                    "page_id": page.id,
                    "key": section.key,
                    "component": section.component,
                },
            )
    except IntegrityError as exc:
        raise ValueError(f"A section with key '{key}' already exists on this page") from exc

    return section
