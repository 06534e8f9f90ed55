# app/domain/lifecycle/section.py
import json
from typing import Any, Iterable, Optional, Set

from app.domain.invariants.exceptions import IllegalTransition

DRAFT = "draft"
DIRTY = "dirty"
PUBLISHED = "published"

SECTION_STATUSES = (DRAFT, DIRTY, PUBLISHED)

# Explicit allowed state transitions ("edit" keeps draft/published/dirty
# moving among themselves; only these are named actions)
ALLOWED_SECTION_ACTIONS: dict[str, Set[str]] = {
    DRAFT: {"edit", "publish"},
    DIRTY: {"edit", "publish", "discard"},
    PUBLISHED: {"edit", "publish", "discard"},
}


def canonical_content(content: Any) -> str:
    """
    Deterministic JSON text for structural comparison.
    Key order is irrelevant; true and 1 stay distinct.
    """
    return json.dumps(content, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def content_equal(left: Any, right: Any) -> bool:
    return canonical_content(left) == canonical_content(right)


def derive_section_status(draft_content: Any, published_content: Optional[Any]) -> str:
    """
    Single source of truth for section status.

    published_content is None only while a section has never been published.
    """
    if published_content is None:
        return DRAFT
    if content_equal(draft_content, published_content):
        return PUBLISHED
    return DIRTY


def derive_page_status(section_statuses: Iterable[str]) -> str:
    statuses = list(section_statuses)
    if any(status == DIRTY for status in statuses):
        return DIRTY
    if statuses and all(status == PUBLISHED for status in statuses):
        return PUBLISHED
    return DRAFT


def assert_section_action(*, status: str, action: str) -> None:
    """
    Guards section lifecycle actions.
    """
    allowed = ALLOWED_SECTION_ACTIONS.get(status, set())

    if action not in allowed:
        raise IllegalTransition(
            f"Illegal section action: {action} while {status}"
        )
