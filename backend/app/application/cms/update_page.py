from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from app.models.page import Page
from app.domain.invariants.exceptions import PageNotFound
from app.utils.audit import log_action
from app.utils.transaction import transactional


# status is derived from sections and never set directly
ALLOWED_UPDATE_FIELDS = ("title", "slug", "base_url")


def update_page(
    *,
    tenant_id: str,
    page_id: str,
    data: Dict[str, Any],
) -> Page:
    """
    Update mutable fields on a page.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    """

    page = Page.query.filter_by(
        id=page_id,
        tenant_id=tenant_id,
    ).first()

    if not page:
        raise PageNotFound("Page not found")

    changed_fields: list[str] = []

    try:
        with transactional():
            for field in ALLOWED_UPDATE_FIELDS:
                if field in data and getattr(page, field) != data[field]:
                    setattr(page, field, data[field])
                    changed_fields.append(field)

            if not changed_fields:
                # Explicitly fail instead of silently succeeding
                raise ValueError("No valid fields provided for update")

            if not page.title or not page.slug:
                raise ValueError("Title and slug cannot be empty")

            log_action(
                tenant_id=tenant_id,
                action="page.update",
                entity_type="page",
                entity_id=page.id,
                payload={"fields": changed_fields},
            )
    except IntegrityError as exc:
        raise ValueError("A page with this slug already exists") from exc

    return page
