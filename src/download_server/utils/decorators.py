"""Decorator utilities for cross-cutting concerns."""
import functools
import logging
import time
from typing import Any, Callable, TypeVar, cast

from download_server.errors import ApiError, InternalError, UpstreamError

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Decorator to log function execution time.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that logs execution time
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            duration = time.time() - start_time
            logger.info(f"{func.__qualname__} completed in {duration:.2f}s")
            return result
        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"{func.__qualname__} failed after {duration:.2f}s: {str(e)}")
            raise
    return cast(F, wrapper)


def handle_route_errors(message: str) -> Callable[[F], F]:
    """Decorator giving a route handler its failure message.

    Client errors (validation, not found, unauthorized) pass through untouched.
    Upstream and unexpected failures are re-raised carrying `message`, with the
    original error text kept in the `error` field of the response.

    Args:
        message: Message reported when the handler fails, e.g. "Error adding file"

    Returns:
        Decorator function
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except UpstreamError as e:
                raise type(e)(message, error=e.error or e.message) from e
            except ApiError:
                raise
            except Exception as e:
                logger.exception(f"{func.__name__} failed unexpectedly")
                raise InternalError(message, error=str(e)) from e
        return cast(F, wrapper)

    return decorator
