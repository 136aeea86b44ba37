import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from budgetsmart.domain.errors import FetchError

logger = logging.getLogger(__name__)


def raises_fetch_error(operation: str):
    """
    Wrap a repository read so storage failures surface as FetchError.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error("Error %s: %s", operation, e)
                raise FetchError(operation, e) from e

        return wrapper

    return decorator
