"""
Gemini chat model construction.

Dependencies: langchain_google_genai, backend.configs
System role: Shared model factory for the analysis and response engines
"""

from typing import Any

from langchain_google_genai import ChatGoogleGenerativeAI

from backend.configs.llm import GeminiSettings


def build_chat_model(settings: GeminiSettings, temperature: float) -> ChatGoogleGenerativeAI:
    """
    Create a Gemini chat model.

    Without an explicit api_key the client falls back to the
    GOOGLE_API_KEY environment variable.
    """
    kwargs: dict[str, Any] = {"model": settings.model, "temperature": temperature}
    if settings.api_key:
        kwargs["google_api_key"] = settings.api_key
    return ChatGoogleGenerativeAI(**kwargs)


def content_text(content: Any) -> str:
    """
    Flatten chat message content to plain text.

    Content is either a string or a list of parts, each a string or a
    dict carrying a "text" key.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""
