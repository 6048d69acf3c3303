"""
API error handling utilities.

Decorator mapping domain exceptions to HTTPExceptions with consistent
logging across chat, mood and activity endpoints.

Dependencies: fastapi, backend.core.exceptions
System role: Domain error to HTTP status translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from backend.core.exceptions import (
    AuthenticationError,
    MessageNotFoundError,
    QueueDispatchError,
    SessionAccessDeniedError,
    SessionNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_domain_errors(func: F) -> F:
    """
    Decorator to translate domain errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with their details
    - Mapping specific exceptions to HTTP status codes
    - Hiding internal error text behind a generic 500 message
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ValidationError as e:
            logger.warning("Invalid request", extra={"error": e.message, **e.details})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except AuthenticationError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
                headers={"WWW-Authenticate": "Bearer"},
            )

        except SessionAccessDeniedError as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

        except (SessionNotFoundError, MessageNotFoundError) as e:
            logger.warning("Resource not found", extra={"error": e.message, **e.details})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except QueueDispatchError as e:
            logger.error("Task queue unavailable", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

        except Exception as e:
            logger.exception(
                "Unexpected failure in request handler",
                extra={"handler": func.__name__, "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )

    return wrapper  # type: ignore
