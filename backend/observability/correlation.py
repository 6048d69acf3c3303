"""
Correlation IDs for request and pipeline tracing.

The API sets one per request (taken from X-Correlation-ID when the client
sends a usable value). It travels in the pipeline payload so the worker
logs for an assistant reply share the ID of the request that queued it.

Dependencies: contextvars
System role: Request tracing across the API and the task queue
"""

from contextvars import ContextVar
import re
import uuid

MAX_CORRELATION_ID_LENGTH = 128
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]+$")

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def _is_usable(candidate: str | None) -> bool:
    return bool(
        candidate
        and len(candidate) <= MAX_CORRELATION_ID_LENGTH
        and _VALID_ID.match(candidate)
    )


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Client-supplied values that are empty, too long or contain characters
    outside [A-Za-z0-9._:-] are replaced with a fresh UUID so they never
    reach log lines or response headers verbatim.

    Returns:
        str: The ID now bound to the context
    """
    value = correlation_id if _is_usable(correlation_id) else str(uuid.uuid4())
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID, or an empty string outside a traced context."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
