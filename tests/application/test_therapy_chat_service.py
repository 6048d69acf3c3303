"""
Test suite for TherapyChatService.

Tests message ingress, session lifecycle, status and history views against
in-memory SQLite with a mocked TaskDispatcher.

System role: Verification of chat service orchestration layer
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from backend.application.services.therapy_chat_service import TherapyChatService
from backend.boundary.db.CRUD.chat_message_crud import chat_message_crud
from backend.boundary.db.models.chat_message_model import MessageStatus
from backend.boundary.db.models.chat_session_model import SessionStatus
from backend.core.exceptions import (
    MessageNotFoundError,
    QueueDispatchError,
    SessionAccessDeniedError,
    SessionNotFoundError,
    ValidationError,
)
from backend.core.therapy.message_pipeline import MessagePipeline
from backend.core.therapy.prompts import FAILURE_APOLOGY, SYSTEM_PROMPT
from backend.core.therapy.schemas import THERAPY_MESSAGE_EVENT, PipelineRequest, TherapyMemory
from backend.observability.correlation import clear_correlation_id, set_correlation_id


@pytest.fixture
def chat_service(test_async_db, mock_dispatcher, therapy_settings) -> TherapyChatService:
    """Provide TherapyChatService over the test database."""
    return TherapyChatService(db=test_async_db, dispatcher=mock_dispatcher, settings=therapy_settings)


class TestSendMessage:
    """Test suite for TherapyChatService.send_message()."""

    @pytest.mark.asyncio
    async def test_first_message_appends_user_and_placeholder(
        self, chat_service, test_async_db, chat_session, user_id
    ) -> None:
        """Test two messages are appended and the placeholder index is returned."""
        # Act
        result = await chat_service.send_message(chat_session.id, user_id, "I feel anxious about work")

        # Assert
        assert result == {
            "session_id": chat_session.id,
            "message_index": 1,
            "status": "pending",
        }
        messages = await chat_message_crud.list_slice(test_async_db, chat_session.id)
        assert [(m.role.value, m.content, m.status.value) for m in messages] == [
            ("user", "I feel anxious about work", "completed"),
            ("assistant", "", "pending"),
        ]

    @pytest.mark.asyncio
    async def test_second_message_targets_index_three(
        self, chat_service, chat_session, user_id
    ) -> None:
        await chat_service.send_message(chat_session.id, user_id, "hello")

        result = await chat_service.send_message(chat_session.id, user_id, "still here")

        assert result["message_index"] == 3

    @pytest.mark.asyncio
    async def test_enqueues_pipeline_request(
        self, chat_service, chat_session, user_id, mock_dispatcher
    ) -> None:
        """Test the queued payload carries the message, history and fresh memory."""
        set_correlation_id("req-123")
        try:
            await chat_service.send_message(chat_session.id, user_id, "hello")
        finally:
            clear_correlation_id()

        mock_dispatcher.enqueue.assert_awaited_once()
        event_name, payload = mock_dispatcher.enqueue.await_args.args
        assert event_name == THERAPY_MESSAGE_EVENT

        request = PipelineRequest.model_validate(payload)
        assert request.session_id == chat_session.id
        assert request.message_index == 1
        assert request.message == "hello"
        assert [entry["role"] for entry in request.history] == ["user"]
        assert request.history[0]["content"] == "hello"
        assert request.memory == TherapyMemory()
        assert request.goals == []
        assert request.system_prompt == SYSTEM_PROMPT
        assert request.correlation_id == "req-123"

    @pytest.mark.parametrize("text", ["", "   \n\t", "x" * 6000])
    @pytest.mark.asyncio
    async def test_invalid_text_is_rejected_without_writes(
        self, chat_service, test_async_db, chat_session, user_id, mock_dispatcher, text
    ) -> None:
        with pytest.raises(ValidationError):
            await chat_service.send_message(chat_session.id, user_id, text)

        assert await chat_message_crud.count_for_session(test_async_db, chat_session.id) == 0
        mock_dispatcher.enqueue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_message_at_length_limit_is_accepted(
        self, chat_service, chat_session, user_id
    ) -> None:
        result = await chat_service.send_message(chat_session.id, user_id, "x" * 5000)

        assert result["status"] == "pending"

    @pytest.mark.asyncio
    async def test_empty_message_error_text(self, chat_service, chat_session, user_id) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await chat_service.send_message(chat_session.id, user_id, "")

        assert exc_info.value.message == "Message cannot be empty"

    @pytest.mark.asyncio
    async def test_too_long_error_text(self, chat_service, chat_session, user_id) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await chat_service.send_message(chat_session.id, user_id, "x" * 5001)

        assert exc_info.value.message == "Message too long (max 5000 characters)"

    @pytest.mark.asyncio
    async def test_unknown_session_raises_not_found(self, chat_service, user_id) -> None:
        with pytest.raises(SessionNotFoundError):
            await chat_service.send_message(uuid.uuid4(), user_id, "hello")

    @pytest.mark.asyncio
    async def test_foreign_session_is_denied_without_writes(
        self, chat_service, test_async_db, chat_session, other_user_id, mock_dispatcher
    ) -> None:
        with pytest.raises(SessionAccessDeniedError):
            await chat_service.send_message(chat_session.id, other_user_id, "hello")

        assert await chat_message_crud.count_for_session(test_async_db, chat_session.id) == 0
        mock_dispatcher.enqueue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dispatch_failure_marks_placeholder_failed(
        self, chat_service, test_async_db, chat_session, user_id, mock_dispatcher
    ) -> None:
        """Test an enqueue failure leaves a failed placeholder instead of a stuck pending one."""
        # Arrange
        mock_dispatcher.enqueue.side_effect = QueueDispatchError(
            THERAPY_MESSAGE_EVENT, {"error": "connection refused"}
        )

        # Act
        with pytest.raises(QueueDispatchError):
            await chat_service.send_message(chat_session.id, user_id, "hello")

        # Assert
        placeholder = await chat_message_crud.get_at(test_async_db, chat_session.id, 1)
        assert placeholder.status == MessageStatus.FAILED
        assert placeholder.content == FAILURE_APOLOGY
        assert "error" in placeholder.message_metadata


class TestSessionLifecycle:
    """Test suite for session create, list and status updates."""

    @pytest.mark.asyncio
    async def test_create_and_list_sessions(self, chat_service, user_id, other_user_id) -> None:
        session_id = await chat_service.create_session(user_id)
        await chat_service.create_session(other_user_id)

        sessions = await chat_service.list_sessions(user_id)

        assert [s["session_id"] for s in sessions] == [session_id]
        assert sessions[0]["status"] == "active"

    @pytest.mark.asyncio
    async def test_update_session_status(self, chat_service, chat_session, user_id) -> None:
        result = await chat_service.update_session_status(
            chat_session.id, user_id, SessionStatus.ARCHIVED
        )

        assert result["status"] == "archived"

    @pytest.mark.asyncio
    async def test_update_foreign_session_is_denied(
        self, chat_service, chat_session, other_user_id
    ) -> None:
        with pytest.raises(SessionAccessDeniedError):
            await chat_service.update_session_status(
                chat_session.id, other_user_id, SessionStatus.COMPLETED
            )

    @pytest.mark.asyncio
    async def test_get_session_includes_indexed_messages(
        self, chat_service, chat_session, user_id
    ) -> None:
        await chat_service.send_message(chat_session.id, user_id, "hello")

        result = await chat_service.get_session(chat_session.id, user_id)

        assert result["session_id"] == chat_session.id
        assert [(m["index"], m["role"], m["status"]) for m in result["messages"]] == [
            (0, "user", "completed"),
            (1, "assistant", "pending"),
        ]


class TestStatusAndHistory:
    """Test suite for the read-only status and history views."""

    @pytest.mark.asyncio
    async def test_pending_status_after_send(self, chat_service, chat_session, user_id) -> None:
        await chat_service.send_message(chat_session.id, user_id, "hello")

        status = await chat_service.get_message_status(chat_session.id, user_id, 1)

        assert status["status"] == "pending"
        assert status["content"] == ""
        assert status["metadata"] is None
        assert status["timestamp"] is not None

    @pytest.mark.asyncio
    async def test_status_of_missing_index_raises(self, chat_service, chat_session, user_id) -> None:
        with pytest.raises(MessageNotFoundError):
            await chat_service.get_message_status(chat_session.id, user_id, 4)

    @pytest.mark.asyncio
    async def test_negative_index_is_rejected(self, chat_service, chat_session, user_id) -> None:
        with pytest.raises(ValidationError):
            await chat_service.get_message_status(chat_session.id, user_id, -1)

    @pytest.mark.parametrize("message_index", [2**31, 2**63])
    @pytest.mark.asyncio
    async def test_index_beyond_position_range_is_rejected(
        self, chat_service, chat_session, user_id, message_index
    ) -> None:
        with pytest.raises(ValidationError):
            await chat_service.get_message_status(chat_session.id, user_id, message_index)

    @pytest.mark.asyncio
    async def test_status_of_foreign_session_is_denied(
        self, chat_service, chat_session, other_user_id
    ) -> None:
        with pytest.raises(SessionAccessDeniedError):
            await chat_service.get_message_status(chat_session.id, other_user_id, 0)

    @pytest.mark.asyncio
    async def test_history_slice(self, chat_service, chat_session, user_id) -> None:
        for text in ("one", "two", "three"):
            await chat_service.send_message(chat_session.id, user_id, text)

        history = await chat_service.get_history(chat_session.id, user_id, limit=2, skip=2)

        assert history["total"] == 6
        assert history["limit"] == 2
        assert history["skip"] == 2
        assert [m["index"] for m in history["messages"]] == [2, 3]
        assert history["messages"][0]["content"] == "two"

    @pytest.mark.asyncio
    async def test_history_defaults_to_page_size(self, chat_service, chat_session, user_id) -> None:
        history = await chat_service.get_history(chat_session.id, user_id)

        assert history["limit"] == 50
        assert history["messages"] == []
        assert history["total"] == 0

    @pytest.mark.parametrize(("limit", "skip"), [(0, 0), (101, 0), (10, -1), (10, 2**63)])
    @pytest.mark.asyncio
    async def test_history_rejects_bad_paging(
        self, chat_service, chat_session, user_id, limit, skip
    ) -> None:
        with pytest.raises(ValidationError):
            await chat_service.get_history(chat_session.id, user_id, limit=limit, skip=skip)


class TestEndToEnd:
    """Ingress followed by a pipeline run over the same database."""

    @pytest.mark.asyncio
    async def test_queued_payload_runs_to_completion(
        self, chat_service, chat_session, user_id, mock_dispatcher, session_store, therapy_settings
    ) -> None:
        # Arrange
        await chat_service.send_message(chat_session.id, user_id, "I can't sleep lately")
        _, payload = mock_dispatcher.enqueue.await_args.args

        analysis_engine = AsyncMock()
        analysis_engine.analyze = AsyncMock(
            return_value='```json\n{"emotionalState": "tired", "themes": ["sleep"], "riskLevel": 2}\n```'
        )
        response_generator = AsyncMock()
        response_generator.generate = AsyncMock(return_value="Sleep troubles are exhausting.")
        pipeline = MessagePipeline(
            store=session_store,
            analysis_engine=analysis_engine,
            response_generator=response_generator,
            settings=therapy_settings,
        )

        # Act
        await pipeline.run(PipelineRequest.model_validate(payload))
        status = await chat_service.get_message_status(chat_session.id, user_id, 1)

        # Assert
        assert status["status"] == "completed"
        assert status["content"] == "Sleep troubles are exhausting."
        assert status["metadata"]["analysis"]["emotionalState"] == "tired"
        assert status["metadata"]["progress"] == {"emotionalState": "tired", "riskLevel": 2}
