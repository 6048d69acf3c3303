"""
Therapeutic response generator.

Dependencies: langchain_core, langchain_google_genai
System role: Response Generator external capability
"""

import json
import logging

from langchain_core.language_models import BaseChatModel

from backend.configs.llm import GeminiSettings
from backend.core.therapy.llm import build_chat_model, content_text
from backend.core.therapy.prompts import RESPONSE_PROMPT
from backend.core.therapy.schemas import AnalysisResult, TherapyMemory

logger = logging.getLogger(__name__)


class GeminiResponseGenerator:
    """
    Reply generator backed by a LangChain chat model.

    Args:
        settings: Gemini configuration used when no model is given
        model: Preconfigured chat model
    """

    def __init__(
        self,
        settings: GeminiSettings | None = None,
        model: BaseChatModel | None = None,
    ) -> None:
        if model is None:
            settings = settings or GeminiSettings()
            model = build_chat_model(settings, settings.response_temperature)
        self._chain = RESPONSE_PROMPT | model

    async def generate(
        self,
        system_prompt: str,
        message_text: str,
        analysis: AnalysisResult,
        memory: TherapyMemory,
        goals: list[str],
    ) -> str:
        """
        Generate the assistant reply.

        Returns:
            str: Reply text, stripped (may be empty)
        """
        result = await self._chain.ainvoke({
            "system_prompt": system_prompt,
            "message": message_text,
            "analysis": json.dumps(analysis.to_payload()),
            "memory": json.dumps(memory.to_payload()),
            "goals": json.dumps(goals),
        })
        text = content_text(result.content).strip()
        logger.debug("Response generator output", extra={"output_len": len(text)})
        return text
