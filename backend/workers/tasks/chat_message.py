"""
Chat message Celery task.

Task: therapy/session.message(payload)
Flow: validate payload -> restore correlation ID -> run MessagePipeline
in a fresh event loop with its own database engine. Celery autoretry
reruns the whole pipeline with exponential backoff; a missing target
message or a malformed payload fails at once.

Dependencies: celery, backend.core.therapy, backend.boundary.db, backend.workers
System role: Durable execution of message pipeline runs
"""

import asyncio
import logging

from pydantic import ValidationError as PayloadValidationError

from backend.boundary.db.connection import create_session_factory, get_async_engine
from backend.boundary.db.session_store import SessionStore
from backend.core.exceptions import MessageNotFoundError
from backend.core.therapy.analysis_engine import GeminiAnalysisEngine
from backend.core.therapy.message_pipeline import MessagePipeline
from backend.core.therapy.response_generator import GeminiResponseGenerator
from backend.core.therapy.schemas import THERAPY_MESSAGE_EVENT, PipelineRequest, PipelineResult
from backend.observability.correlation import clear_correlation_id, set_correlation_id
from backend.workers import celery_app, settings

logger = logging.getLogger(__name__)


async def run_pipeline(request: PipelineRequest) -> PipelineResult:
    """
    Run one pipeline attempt against a dedicated engine.

    asyncio.run creates a new loop per task, and pooled asyncpg
    connections cannot cross loops, so the engine lives for one run only.
    """
    engine = get_async_engine()
    try:
        pipeline = MessagePipeline(
            store=SessionStore(create_session_factory(engine)),
            analysis_engine=GeminiAnalysisEngine(settings.gemini),
            response_generator=GeminiResponseGenerator(settings.gemini),
            settings=settings.therapy,
        )
        return await pipeline.run(request)
    finally:
        await engine.dispose()


@celery_app.task(
    bind=True,
    name=THERAPY_MESSAGE_EVENT,
    max_retries=settings.celery.task_max_retries,
    autoretry_for=(Exception,),
    dont_autoretry_for=(MessageNotFoundError, PayloadValidationError),
    retry_backoff=settings.celery.task_retry_backoff,
    retry_backoff_max=settings.celery.task_retry_backoff_max,
    acks_late=True,
)
def process_chat_message(self, payload: dict) -> dict:
    """
    Process a queued chat message.

    Args:
        payload: PipelineRequest in camelCase JSON form

    Returns:
        dict: sessionId, messageIndex, status and duplicate flag
    """
    try:
        request = PipelineRequest.model_validate(payload)
    except PayloadValidationError as e:
        logger.error("Discarding malformed chat message payload", extra={"error": str(e)})
        raise

    set_correlation_id(request.correlation_id)
    log_ctx = {
        "session_id": str(request.session_id),
        "message_index": request.message_index,
        "attempt": self.request.retries + 1,
    }
    try:
        result = asyncio.run(run_pipeline(request))
    except MessageNotFoundError:
        logger.error("Chat message target missing, not retrying", extra=log_ctx)
        raise
    except Exception as exc:
        logger.warning(
            f"Chat message run failed, scheduling retry: {type(exc).__name__}: {exc}",
            extra=log_ctx,
        )
        raise
    finally:
        clear_correlation_id()

    return {
        "sessionId": str(result.session_id),
        "messageIndex": result.message_index,
        "status": result.status,
        "duplicate": result.duplicate,
    }
