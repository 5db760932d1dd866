from contextlib import contextmanager
import logging
from sqlalchemy.exc import SQLAlchemyError
from models import db


@contextmanager
def transactional(message="DB transaction failed"):
    """Yield the session; commit on exit, roll back and re-raise on error."""
    session = db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logging.error("%s: %s", message, e, exc_info=True)
        session.rollback()
        raise
    except Exception:
        session.rollback()
        raise
