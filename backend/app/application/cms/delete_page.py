from app.extensions import db
from app.domain.invariants.exceptions import PageNotFound
from app.models.page import Page
from app.utils.audit import log_action
from app.utils.transaction import transactional


def delete_page(
    *,
    tenant_id: str,
    page_id: str,
) -> None:
    """
    Hard-delete a page; its sections go with it (cascade).
    """

    page = Page.query.filter_by(
        id=page_id,
        tenant_id=tenant_id,
    ).first()

    if not page:
        raise PageNotFound("Page not found")

    with transactional():
        section_count = len(page.sections)
        db.session.delete(page)

        log_action(
            tenant_id=tenant_id,
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={"sections": section_count},
        )
