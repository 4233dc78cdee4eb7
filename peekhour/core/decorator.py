import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class DBException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def db_exception(func):
    """Translate database errors raised by a service method into DBException.

    The wrapped method's owner is expected to expose its session as ``self.db``;
    the session is rolled back before the exception is re-raised.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except IntegrityError:
            self.db.rollback()
            # Usually a unique constraint hit by a concurrent request
            raise DBException("Duplicate entry. This record already exists.", 400)
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"{func.__qualname__} failed", exc_info=True)
            raise DBException("Database error occurred", 500)

    return wrapper
