import logging
from contextlib import contextmanager
from ideahive.extensions import db

logger = logging.getLogger(__name__)

@contextmanager
def transactional(label="relational write"):
    """
    Yields the SQLAlchemy session; commits on a clean exit,
    rolls back and re-raises otherwise.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("Rolled back %s", label)
        raise
