from .section import assert_section
from .exceptions import InvariantViolation

def assert_page(page):
    sections = page.sections

    positions = [section.position for section in sections]
    expected = list(range(1, len(positions) + 1))

    if sorted(positions) != expected:
        raise InvariantViolation(
            f"Section positions are not consecutive starting from 1: {positions}"
        )

    keys = [section.key for section in sections]
    if len(set(keys)) != len(keys):
        raise InvariantViolation(f"Section keys must be unique within a page: {keys}")

    for section in sections:
        assert_section(section)
