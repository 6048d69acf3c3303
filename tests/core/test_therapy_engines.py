"""
Tests for the Gemini-backed analysis and response engines.

A LangChain fake chat model stands in for Gemini so the prompt | model
chains run without network access.
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from backend.core.therapy.analysis_engine import GeminiAnalysisEngine
from backend.core.therapy.llm import content_text
from backend.core.therapy.response_generator import GeminiResponseGenerator
from backend.core.therapy.schemas import AnalysisResult, TherapyMemory


class TestGeminiAnalysisEngine:
    """Test suite for GeminiAnalysisEngine."""

    @pytest.mark.asyncio
    async def test_returns_raw_model_text(self) -> None:
        model = FakeListChatModel(responses=['  {"emotionalState": "sad"}  '])
        engine = GeminiAnalysisEngine(model=model)

        output = await engine.analyze("I miss my friend", '{"memory": {}, "goals": []}')

        assert output == '{"emotionalState": "sad"}'


class TestGeminiResponseGenerator:
    """Test suite for GeminiResponseGenerator."""

    @pytest.mark.asyncio
    async def test_returns_stripped_reply(self) -> None:
        model = FakeListChatModel(responses=["\nThat sounds lonely.\n"])
        generator = GeminiResponseGenerator(model=model)

        reply = await generator.generate(
            "You are a supportive therapist.",
            "I miss my friend",
            AnalysisResult(emotional_state="sad"),
            TherapyMemory(),
            ["reconnect with friends"],
        )

        assert reply == "That sounds lonely."


class TestContentText:
    """Test suite for content_text()."""

    def test_string_content(self) -> None:
        assert content_text("hello") == "hello"

    def test_part_list_content(self) -> None:
        assert content_text(["a", {"type": "text", "text": "b"}, {"type": "image"}]) == "ab"

    def test_unknown_content(self) -> None:
        assert content_text(None) == ""
