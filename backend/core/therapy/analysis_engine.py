"""
Message analysis engine.

Asks Gemini for a JSON assessment (emotional state, themes, risk level,
recommended approach, progress indicators) of one user message. Returns
the raw model text; parsing and defaulting belong to the pipeline.

Dependencies: langchain_core, langchain_google_genai
System role: Analysis Engine external capability
"""

import logging

from langchain_core.language_models import BaseChatModel

from backend.configs.llm import GeminiSettings
from backend.core.therapy.llm import build_chat_model, content_text
from backend.core.therapy.prompts import ANALYSIS_PROMPT

logger = logging.getLogger(__name__)


class GeminiAnalysisEngine:
    """
    Analysis engine backed by a LangChain chat model.

    Args:
        settings: Gemini configuration used when no model is given
        model: Preconfigured chat model (tests inject fakes here)
    """

    def __init__(
        self,
        settings: GeminiSettings | None = None,
        model: BaseChatModel | None = None,
    ) -> None:
        if model is None:
            settings = settings or GeminiSettings()
            model = build_chat_model(settings, settings.analysis_temperature)
        self._chain = ANALYSIS_PROMPT | model

    async def analyze(self, message_text: str, context: str) -> str:
        """
        Analyze a message.

        Args:
            message_text: Raw user message
            context: JSON string of {memory, goals}

        Returns:
            str: Model output, expected to contain a JSON object
        """
        result = await self._chain.ainvoke({"message": message_text, "context": context})
        text = content_text(result.content).strip()
        logger.debug("Analysis engine output", extra={"output_len": len(text)})
        return text
