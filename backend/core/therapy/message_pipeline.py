"""
Chat message processing pipeline.

Drives one assistant placeholder through pending -> processing ->
completed | failed:

    mark_processing -> analyze_message -> update_memory -> check_risk
        -> generate_response -> persist_completion

Analysis and response generation degrade to safe defaults instead of
failing. Any other error records the failed state on the message and is
re-raised so the task runner can retry the whole run. Each step is a
separate method and store writes are single-row updates, so no lock is
held across engine calls.

Dependencies: asyncio, backend.boundary.db.session_store, backend.core.therapy
System role: Message Pipeline state machine and step orchestration
"""

import asyncio
import json
import logging
from typing import Protocol

from backend.boundary.db.models.chat_message_model import MessageStatus
from backend.boundary.db.session_store import SessionStore
from backend.configs.therapy import TherapySettings
from backend.core.exceptions import MessageNotFoundError, MindwellException
from backend.core.therapy.json_extraction import parse_json_object
from backend.core.therapy.prompts import FAILURE_APOLOGY, FALLBACK_RESPONSE
from backend.core.therapy.risk_alert import RiskAlertNotifier
from backend.core.therapy.schemas import (
    AnalysisResult,
    PipelineRequest,
    PipelineResult,
    TherapyMemory,
)

logger = logging.getLogger(__name__)


class AnalysisEngine(Protocol):
    async def analyze(self, message_text: str, context: str) -> str: ...


class ResponseGenerator(Protocol):
    async def generate(
        self,
        system_prompt: str,
        message_text: str,
        analysis: AnalysisResult,
        memory: TherapyMemory,
        goals: list[str],
    ) -> str: ...


def describe_error(error: BaseException) -> str:
    """Short human-readable description stored in metadata.error."""
    if isinstance(error, MindwellException):
        return error.message
    return str(error) or type(error).__name__


class MessagePipeline:
    """
    Orchestrates one run of the message pipeline.

    Args:
        store: Session store for message reads and updates
        analysis_engine: Produces raw analysis text
        response_generator: Produces reply text
        risk_notifier: Receives high-risk alerts
        settings: Timeout and risk threshold configuration
    """

    def __init__(
        self,
        store: SessionStore,
        analysis_engine: AnalysisEngine,
        response_generator: ResponseGenerator,
        risk_notifier: RiskAlertNotifier | None = None,
        settings: TherapySettings | None = None,
    ) -> None:
        settings = settings or TherapySettings()
        self._store = store
        self._analysis_engine = analysis_engine
        self._response_generator = response_generator
        self._risk_notifier = risk_notifier or RiskAlertNotifier()
        self._timeout = settings.engine_timeout_seconds
        self._risk_threshold = settings.risk_alert_threshold

    async def run(self, request: PipelineRequest) -> PipelineResult:
        """
        Process the placeholder at (request.session_id, request.message_index).

        Returns:
            PipelineResult: Completed reply, or the persisted one when the
            message was already completed by an earlier delivery

        Raises:
            MessageNotFoundError: Target message does not exist (not retryable)
            Exception: Any other failure, after the failed state is recorded
        """
        log_ctx = {
            "session_id": str(request.session_id),
            "message_index": request.message_index,
            "history_len": len(request.history),
        }
        logger.info("Processing chat message", extra=log_ctx)

        try:
            duplicate = await self.mark_processing(request)
            if duplicate is not None:
                return duplicate

            analysis = await self.analyze_message(request)
            memory = self.update_memory(request.memory, analysis)
            await self.check_risk(request, memory)
            reply = await self.generate_response(request, analysis, memory)
            await self.persist_completion(request, reply, analysis, memory)
        except MessageNotFoundError:
            logger.error("Target message does not exist", extra=log_ctx)
            raise
        except Exception as e:
            logger.error(
                f"Chat message processing failed: {type(e).__name__}: {e}",
                extra=log_ctx,
            )
            await self.mark_failed(request, e)
            raise

        logger.info("Chat message completed", extra=log_ctx)
        return PipelineResult(
            session_id=request.session_id,
            message_index=request.message_index,
            status=MessageStatus.COMPLETED.value,
            content=reply,
            analysis=analysis,
            memory=memory,
        )

    async def mark_processing(self, request: PipelineRequest) -> PipelineResult | None:
        """
        Move the target message to processing.

        Returns:
            PipelineResult for an already completed message (duplicate
            delivery, nothing else to do), None otherwise
        """
        message = await self._store.get_message(request.session_id, request.message_index)
        if message is None:
            raise MessageNotFoundError(str(request.session_id), request.message_index)

        if message.status == MessageStatus.COMPLETED:
            logger.info(
                "Message already completed, skipping duplicate delivery",
                extra={"session_id": str(request.session_id), "message_index": request.message_index},
            )
            return PipelineResult(
                session_id=request.session_id,
                message_index=request.message_index,
                status=MessageStatus.COMPLETED.value,
                content=message.content,
                duplicate=True,
            )

        updated = await self._store.update_message_fields(
            request.session_id,
            request.message_index,
            status=MessageStatus.PROCESSING,
        )
        if not updated:
            raise MessageNotFoundError(str(request.session_id), request.message_index)
        return None

    async def analyze_message(self, request: PipelineRequest) -> AnalysisResult:
        """Analyze the message, falling back to the neutral analysis on any failure."""
        context = json.dumps({"memory": request.memory.to_payload(), "goals": request.goals})
        try:
            raw = await asyncio.wait_for(
                self._analysis_engine.analyze(request.message, context),
                timeout=self._timeout,
            )
            analysis = AnalysisResult.from_payload(parse_json_object(raw))
        except Exception as e:
            logger.warning(
                f"Message analysis failed, using neutral analysis: {type(e).__name__}: {e}",
                extra={"session_id": str(request.session_id), "message_index": request.message_index},
            )
            return AnalysisResult.neutral()

        logger.info(
            "Message analyzed",
            extra={
                "session_id": str(request.session_id),
                "emotional_state": analysis.emotional_state,
                "risk_level": analysis.risk_level,
            },
        )
        return analysis

    @staticmethod
    def update_memory(memory: TherapyMemory, analysis: AnalysisResult) -> TherapyMemory:
        """Fold the analysis into a new memory copy; the input memory is left unchanged."""
        return memory.with_analysis(analysis)

    async def check_risk(self, request: PipelineRequest, memory: TherapyMemory) -> bool:
        """
        Alert once when the memory risk level is above the threshold.

        Alerting errors are logged and never fail the run.

        Returns:
            bool: True if the risk level called for an alert
        """
        if memory.risk_level <= self._risk_threshold:
            return False

        try:
            await self._risk_notifier.notify(
                request.session_id,
                request.message_index,
                memory.risk_level,
                request.message,
            )
        except Exception:
            logger.exception(
                "Risk alert delivery failed",
                extra={"session_id": str(request.session_id), "risk_level": memory.risk_level},
            )
        return True

    async def generate_response(
        self,
        request: PipelineRequest,
        analysis: AnalysisResult,
        memory: TherapyMemory,
    ) -> str:
        """Generate the reply, falling back to FALLBACK_RESPONSE on any failure or empty output."""
        try:
            reply = await asyncio.wait_for(
                self._response_generator.generate(
                    request.system_prompt,
                    request.message,
                    analysis,
                    memory,
                    request.goals,
                ),
                timeout=self._timeout,
            )
        except Exception as e:
            logger.warning(
                f"Response generation failed, using fallback reply: {type(e).__name__}: {e}",
                extra={"session_id": str(request.session_id), "message_index": request.message_index},
            )
            return FALLBACK_RESPONSE

        if not reply or not reply.strip():
            logger.warning(
                "Response generator returned empty reply, using fallback reply",
                extra={"session_id": str(request.session_id), "message_index": request.message_index},
            )
            return FALLBACK_RESPONSE
        return reply.strip()

    async def persist_completion(
        self,
        request: PipelineRequest,
        reply: str,
        analysis: AnalysisResult,
        memory: TherapyMemory,
    ) -> None:
        """Write content, completed status and metadata in one update."""
        metadata = {
            "analysis": analysis.to_payload(),
            "currentGoal": request.goals[0] if request.goals else None,
            "progress": memory.progress_snapshot(),
        }
        updated = await self._store.update_message_fields(
            request.session_id,
            request.message_index,
            status=MessageStatus.COMPLETED,
            content=reply,
            metadata=metadata,
        )
        if not updated:
            raise MessageNotFoundError(str(request.session_id), request.message_index)

    async def mark_failed(self, request: PipelineRequest, error: BaseException) -> None:
        """Best-effort failed-state write; its own failure never masks the original error."""
        try:
            await self._store.update_message_fields(
                request.session_id,
                request.message_index,
                status=MessageStatus.FAILED,
                content=FAILURE_APOLOGY,
                metadata_patch={"error": describe_error(error)},
            )
        except Exception:
            logger.exception(
                "Failed to record failed message state",
                extra={"session_id": str(request.session_id), "message_index": request.message_index},
            )
