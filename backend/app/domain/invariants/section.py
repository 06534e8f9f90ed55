from .exceptions import InvariantViolation
from app.domain.lifecycle.section import SECTION_STATUSES, derive_section_status

def assert_section(section):
    if not section.key:
        raise InvariantViolation("Section key is required.")

    if not section.component:
        raise InvariantViolation("Section component is required.")

    if not isinstance(section.draft_content, dict):
        raise InvariantViolation("Section draft content must be an object.")

    if section.published_content is not None and not isinstance(section.published_content, dict):
        raise InvariantViolation("Section published content must be an object.")

    if section.status not in SECTION_STATUSES:
        raise InvariantViolation(f"Unknown section status: {section.status}")

    expected = derive_section_status(section.draft_content, section.published_content)
    if section.status != expected:
        raise InvariantViolation(
            f"Section status {section.status} does not match its content ({expected})."
        )
