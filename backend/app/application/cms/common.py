# app/application/cms/common.py
from sqlalchemy import select
from app.extensions import db
from app.models.page import Page
from app.models.section import Section
from app.domain.invariants.exceptions import PageNotFound, SectionNotFound
from app.domain.lifecycle.section import derive_page_status


def lock_section(*, tenant_id: str, section_id: str) -> Section:
    """Fetch a section with a row-level lock so concurrent writers serialize."""
    section = (
        db.session.execute(
            select(Section)
            .where(Section.id == section_id, Section.tenant_id == tenant_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )

    if not section:
        raise SectionNotFound("Section not found")

    return section


def lock_page(*, tenant_id: str, page_id: str) -> Page:
    page = (
        db.session.execute(
            select(Page)
            .where(Page.id == page_id, Page.tenant_id == tenant_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )

    if not page:
        raise PageNotFound("Page not found")

    return page


def refresh_page_status(page: Page) -> str:
    page.status = derive_page_status(s.status for s in page.sections)
    return page.status
