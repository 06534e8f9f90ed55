from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from app.extensions import db
from app.models.page import Page
from app.domain.invariants.page import assert_page
from app.utils.audit import log_action
from app.utils.transaction import transactional


def create_page(
    *,
    tenant_id: str,
    actor_id: str | None,
    data: Dict[str, Any],
) -> Page:
    """
    Create a new page in DRAFT state. Sections are provisioned separately.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug per tenant
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")

    if not title or not slug:
        raise ValueError("Both title and slug are required")

    page = Page()
    page.tenant_id = tenant_id
    page.title = title
    page.slug = slug
    page.base_url = data.get("base_url")
    page.status = "draft"
    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            assert_page(page)

            log_action(
                tenant_id=tenant_id,
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={"title": page.title, "slug": page.slug},
            )

        return page

    except IntegrityError as exc:
        # tenant_id + slug is unique
        raise ValueError("A page with this slug already exists") from exc
