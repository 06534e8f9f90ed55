class InvariantViolation(Exception):
    """Raised when a domain invariant does not hold."""


class IllegalTransition(ValueError):
    """Raised when a lifecycle transition is not allowed."""


class SectionNotFound(LookupError):
    pass


class PageNotFound(LookupError):
    pass


class WriteFailed(RuntimeError):
    """
    A lifecycle write did not commit.
    Nothing was applied; the caller may retry.
    """


class PublishFailed(WriteFailed):
    """A publish or discard write did not commit."""


class DraftSaveFailed(WriteFailed):
    """A draft edit did not commit."""
