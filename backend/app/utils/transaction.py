from contextlib import contextmanager
from app.extensions import db

@contextmanager
def transactional():
    """
    Context manager for database transactions.
    Commits on success; on any error rolls back so nothing is applied.
    """
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
