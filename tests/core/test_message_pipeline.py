"""
Tests for the chat message pipeline.

Runs MessagePipeline against a real SessionStore over in-memory SQLite
with mocked analysis and response engines.

System role: Verification of the message processing state machine
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from backend.boundary.db.models.chat_message_model import MessageRole, MessageStatus
from backend.boundary.db.session_store import SessionStore
from backend.core.exceptions import MessageNotFoundError, PersistenceError
from backend.core.therapy.message_pipeline import MessagePipeline, describe_error
from backend.core.therapy.prompts import FAILURE_APOLOGY, FALLBACK_RESPONSE
from backend.core.therapy.schemas import PipelineRequest, TherapyMemory

ANXIOUS_ANALYSIS = json.dumps({
    "emotionalState": "anxious",
    "themes": ["anxiety", "work"],
    "riskLevel": 6,
    "recommendedApproach": "cbt",
    "progressIndicators": [],
})

CALM_ANALYSIS = json.dumps({
    "emotionalState": "calm",
    "themes": ["sleep"],
    "riskLevel": 1,
    "recommendedApproach": "supportive",
    "progressIndicators": ["sleeping better"],
})


async def seed_placeholder(store: SessionStore, session_id, text: str = "I feel anxious about work") -> int:
    count = await store.append_messages(
        session_id,
        [
            {"role": MessageRole.USER, "content": text, "status": MessageStatus.COMPLETED},
            {"role": MessageRole.ASSISTANT, "content": "", "status": MessageStatus.PENDING},
        ],
    )
    return count - 1


class FailingCompletionStore(SessionStore):
    """SessionStore whose completion write fails."""

    async def update_message_fields(self, session_id, index, status=None, **kwargs):
        if status == MessageStatus.COMPLETED:
            raise PersistenceError("Failed to update message", operation="update_message_fields")
        return await super().update_message_fields(session_id, index, status=status, **kwargs)


class BrokenStore(SessionStore):
    """SessionStore that cannot write anything after the processing mark."""

    async def update_message_fields(self, session_id, index, status=None, **kwargs):
        if status == MessageStatus.PROCESSING:
            return await super().update_message_fields(session_id, index, status=status, **kwargs)
        raise PersistenceError("Database unavailable", operation="update_message_fields")


@pytest.fixture
def analysis_engine():
    engine = AsyncMock()
    engine.analyze = AsyncMock(return_value=ANXIOUS_ANALYSIS)
    return engine


@pytest.fixture
def response_generator():
    generator = AsyncMock()
    generator.generate = AsyncMock(return_value="  It sounds like work has been weighing on you.  ")
    return generator


@pytest.fixture
def risk_notifier():
    notifier = AsyncMock()
    notifier.notify = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def pipeline(session_store, analysis_engine, response_generator, risk_notifier, therapy_settings):
    return MessagePipeline(
        store=session_store,
        analysis_engine=analysis_engine,
        response_generator=response_generator,
        risk_notifier=risk_notifier,
        settings=therapy_settings,
    )


@pytest.fixture
async def request_for_placeholder(session_store, chat_session):
    index = await seed_placeholder(session_store, chat_session.id)
    return PipelineRequest(
        session_id=chat_session.id,
        message_index=index,
        message="I feel anxious about work",
        history=[{"role": "user", "content": "I feel anxious about work"}],
    )


class TestMessagePipelineHappyPath:
    """Test suite for completed runs."""

    @pytest.mark.asyncio
    async def test_anxious_message_completes_with_analysis_and_alert(
        self, pipeline, session_store, request_for_placeholder, risk_notifier
    ) -> None:
        # Act
        result = await pipeline.run(request_for_placeholder)

        # Assert
        assert result.status == "completed"
        assert result.content == "It sounds like work has been weighing on you."
        assert result.duplicate is False

        message = await session_store.get_message(
            request_for_placeholder.session_id, request_for_placeholder.message_index
        )
        assert message.status == MessageStatus.COMPLETED
        assert message.content == "It sounds like work has been weighing on you."
        assert message.message_metadata["analysis"]["emotionalState"] == "anxious"
        assert message.message_metadata["analysis"]["themes"] == ["anxiety", "work"]
        assert message.message_metadata["analysis"]["riskLevel"] == 6
        assert message.message_metadata["progress"] == {"emotionalState": "anxious", "riskLevel": 6}
        risk_notifier.notify.assert_awaited_once()
        assert risk_notifier.notify.await_args.args[2] == 6

    @pytest.mark.asyncio
    async def test_user_message_is_untouched(
        self, pipeline, session_store, request_for_placeholder
    ) -> None:
        await pipeline.run(request_for_placeholder)

        user_message = await session_store.get_message(request_for_placeholder.session_id, 0)
        assert user_message.role == MessageRole.USER
        assert user_message.content == "I feel anxious about work"
        assert user_message.status == MessageStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_low_risk_does_not_alert(
        self, pipeline, analysis_engine, request_for_placeholder, risk_notifier
    ) -> None:
        analysis_engine.analyze.return_value = CALM_ANALYSIS

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        risk_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_risk_at_threshold_does_not_alert(
        self, pipeline, analysis_engine, request_for_placeholder, risk_notifier
    ) -> None:
        analysis_engine.analyze.return_value = json.dumps({"riskLevel": 4})

        await pipeline.run(request_for_placeholder)

        risk_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_engines_receive_memory_and_prompt(
        self, pipeline, analysis_engine, response_generator, request_for_placeholder
    ) -> None:
        await pipeline.run(request_for_placeholder)

        message_text, context = analysis_engine.analyze.await_args.args
        assert message_text == "I feel anxious about work"
        assert json.loads(context)["memory"] == TherapyMemory().to_payload()

        system_prompt, _, analysis, memory, goals = response_generator.generate.await_args.args
        assert system_prompt == request_for_placeholder.system_prompt
        assert analysis.emotional_state == "anxious"
        assert memory.emotional_state_history == ("anxious",)
        assert goals == []

    @pytest.mark.asyncio
    async def test_analysis_without_emotional_state_leaves_history_alone(
        self, pipeline, analysis_engine, session_store, request_for_placeholder
    ) -> None:
        analysis_engine.analyze.return_value = json.dumps({"riskLevel": 3})

        result = await pipeline.run(request_for_placeholder)

        assert result.memory.emotional_state_history == ()
        message = await session_store.get_message(
            request_for_placeholder.session_id, request_for_placeholder.message_index
        )
        assert message.message_metadata["analysis"]["emotionalState"] == "neutral"
        assert message.message_metadata["progress"] == {"emotionalState": None, "riskLevel": 3}

    @pytest.mark.asyncio
    async def test_first_goal_is_recorded_as_current_goal(
        self, pipeline, session_store, request_for_placeholder
    ) -> None:
        request = request_for_placeholder.model_copy(update={"goals": ["sleep better", "walk daily"]})

        await pipeline.run(request)

        message = await session_store.get_message(request.session_id, request.message_index)
        assert message.message_metadata["currentGoal"] == "sleep better"

    @pytest.mark.asyncio
    async def test_request_memory_is_not_mutated(self, pipeline, request_for_placeholder) -> None:
        result = await pipeline.run(request_for_placeholder)

        assert request_for_placeholder.memory == TherapyMemory()
        assert result.memory.risk_level == 6


class TestMessagePipelineDegradation:
    """Test suite for analysis and response fallbacks."""

    @pytest.mark.asyncio
    async def test_analysis_engine_error_uses_neutral_analysis(
        self, pipeline, analysis_engine, session_store, request_for_placeholder, risk_notifier
    ) -> None:
        analysis_engine.analyze.side_effect = RuntimeError("model unavailable")

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        assert result.analysis.emotional_state == "neutral"
        message = await session_store.get_message(
            request_for_placeholder.session_id, request_for_placeholder.message_index
        )
        assert message.message_metadata["analysis"]["riskLevel"] == 0
        risk_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unparsable_analysis_uses_neutral_analysis(
        self, pipeline, analysis_engine, request_for_placeholder
    ) -> None:
        analysis_engine.analyze.return_value = "I could not produce JSON this time."

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        assert result.analysis.to_payload()["recommendedApproach"] == "supportive"

    @pytest.mark.asyncio
    async def test_analysis_timeout_uses_neutral_analysis(
        self, pipeline, analysis_engine, request_for_placeholder
    ) -> None:
        async def slow_analyze(message_text, context):
            await asyncio.sleep(5)
            return ANXIOUS_ANALYSIS

        analysis_engine.analyze = slow_analyze

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        assert result.analysis.emotional_state == "neutral"

    @pytest.mark.asyncio
    async def test_response_error_uses_fallback_reply(
        self, pipeline, response_generator, session_store, request_for_placeholder
    ) -> None:
        response_generator.generate.side_effect = RuntimeError("quota exceeded")

        result = await pipeline.run(request_for_placeholder)

        assert result.content == FALLBACK_RESPONSE
        message = await session_store.get_message(
            request_for_placeholder.session_id, request_for_placeholder.message_index
        )
        assert message.status == MessageStatus.COMPLETED
        assert message.content == FALLBACK_RESPONSE

    @pytest.mark.asyncio
    async def test_empty_reply_uses_fallback_reply(
        self, pipeline, response_generator, request_for_placeholder
    ) -> None:
        response_generator.generate.return_value = "   "

        result = await pipeline.run(request_for_placeholder)

        assert result.content == FALLBACK_RESPONSE

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_fail_run(
        self, pipeline, risk_notifier, request_for_placeholder
    ) -> None:
        risk_notifier.notify.side_effect = RuntimeError("pager down")

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        risk_notifier.notify.assert_awaited_once()


class TestMessagePipelineFailures:
    """Test suite for failed runs and retries."""

    @pytest.mark.asyncio
    async def test_completion_write_failure_marks_message_failed(
        self,
        session_factory,
        session_store,
        analysis_engine,
        response_generator,
        risk_notifier,
        therapy_settings,
        request_for_placeholder,
    ) -> None:
        # Arrange
        pipeline = MessagePipeline(
            store=FailingCompletionStore(session_factory),
            analysis_engine=analysis_engine,
            response_generator=response_generator,
            risk_notifier=risk_notifier,
            settings=therapy_settings,
        )

        # Act
        with pytest.raises(PersistenceError):
            await pipeline.run(request_for_placeholder)

        # Assert
        message = await session_store.get_message(
            request_for_placeholder.session_id, request_for_placeholder.message_index
        )
        assert message.status == MessageStatus.FAILED
        assert message.content == FAILURE_APOLOGY
        assert message.message_metadata["error"] == "Failed to update message"

    @pytest.mark.asyncio
    async def test_retry_after_failure_completes_same_placeholder(
        self,
        pipeline,
        session_factory,
        session_store,
        analysis_engine,
        response_generator,
        risk_notifier,
        therapy_settings,
        request_for_placeholder,
    ) -> None:
        failing = MessagePipeline(
            store=FailingCompletionStore(session_factory),
            analysis_engine=analysis_engine,
            response_generator=response_generator,
            risk_notifier=risk_notifier,
            settings=therapy_settings,
        )
        with pytest.raises(PersistenceError):
            await failing.run(request_for_placeholder)

        result = await pipeline.run(request_for_placeholder)

        assert result.status == "completed"
        chat = await session_store.get_session(request_for_placeholder.session_id)
        assert len(chat.messages) == 2
        assert chat.messages[1].status == MessageStatus.COMPLETED
        assert chat.messages[1].content == "It sounds like work has been weighing on you."

    @pytest.mark.asyncio
    async def test_failed_state_write_error_does_not_mask_original(
        self,
        session_factory,
        analysis_engine,
        response_generator,
        risk_notifier,
        therapy_settings,
        request_for_placeholder,
    ) -> None:
        pipeline = MessagePipeline(
            store=BrokenStore(session_factory),
            analysis_engine=analysis_engine,
            response_generator=response_generator,
            risk_notifier=risk_notifier,
            settings=therapy_settings,
        )

        with pytest.raises(PersistenceError) as exc_info:
            await pipeline.run(request_for_placeholder)

        assert exc_info.value.message == "Database unavailable"

    @pytest.mark.asyncio
    async def test_duplicate_delivery_is_a_no_op(
        self, pipeline, analysis_engine, response_generator, request_for_placeholder
    ) -> None:
        first = await pipeline.run(request_for_placeholder)
        analysis_engine.analyze.reset_mock()
        response_generator.generate.reset_mock()

        second = await pipeline.run(request_for_placeholder)

        assert second.duplicate is True
        assert second.content == first.content
        analysis_engine.analyze.assert_not_awaited()
        response_generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_message_raises_without_writes(
        self, pipeline, session_store, chat_session, analysis_engine
    ) -> None:
        request = PipelineRequest(session_id=chat_session.id, message_index=7, message="hello")

        with pytest.raises(MessageNotFoundError):
            await pipeline.run(request)

        analysis_engine.analyze.assert_not_awaited()
        chat = await session_store.get_session(chat_session.id)
        assert chat.messages == []


class TestDescribeError:
    """Test suite for describe_error()."""

    def test_domain_error_uses_message(self) -> None:
        assert describe_error(PersistenceError("Disk full", operation="append")) == "Disk full"

    def test_plain_error_uses_text(self) -> None:
        assert describe_error(RuntimeError("boom")) == "boom"

    def test_empty_error_uses_type_name(self) -> None:
        assert describe_error(TimeoutError()) == "TimeoutError"
