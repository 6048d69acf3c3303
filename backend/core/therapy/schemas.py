"""
Therapy pipeline schemas.

AnalysisResult validates untrusted analysis engine output field by field,
TherapyMemory is the immutable per-run working state, and PipelineRequest
is the queued payload of one pipeline run.

Dependencies: pydantic
System role: Data contracts for the message pipeline
"""

from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from backend.core.exceptions import ParseError
from backend.core.therapy.prompts import SYSTEM_PROMPT

THERAPY_MESSAGE_EVENT = "therapy/session.message"

MIN_RISK_LEVEL = 0
MAX_RISK_LEVEL = 10


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


class AnalysisResult(BaseModel):
    """
    Structured assessment of one message.

    Every field has a safe default and a malformed field falls back to its
    default on its own, so partially valid engine output still yields the
    valid parts. Serialized with camelCase keys.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    emotional_state: str = Field(default="neutral", alias="emotionalState")
    themes: list[str] = Field(default_factory=list)
    risk_level: int = Field(
        default=0,
        alias="riskLevel",
        ge=MIN_RISK_LEVEL,
        le=MAX_RISK_LEVEL,
        description="Risk on a 0-10 ordinal scale",
    )
    recommended_approach: str = Field(default="supportive", alias="recommendedApproach")
    progress_indicators: list[str] = Field(default_factory=list, alias="progressIndicators")
    # False when emotional_state is only the "neutral" fill-in for a missing or unusable value
    emotional_state_reported: bool = Field(default=False, exclude=True, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _mark_reported_state(cls, data: Any) -> Any:
        if isinstance(data, dict):
            state = data.get("emotionalState", data.get("emotional_state"))
            reported = isinstance(state, str) and bool(state.strip())
            data = {**data, "emotional_state_reported": reported}
        return data

    @field_validator("emotional_state", mode="before")
    @classmethod
    def _coerce_emotional_state(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return "neutral"

    @field_validator("recommended_approach", mode="before")
    @classmethod
    def _coerce_approach(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return "supportive"

    @field_validator("themes", "progress_indicators", mode="before")
    @classmethod
    def _coerce_string_list(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _coerce_risk_level(cls, value: Any) -> int:
        # bool is an int subclass but never a risk score
        if isinstance(value, bool):
            return MIN_RISK_LEVEL
        try:
            level = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return MIN_RISK_LEVEL
        return max(MIN_RISK_LEVEL, min(MAX_RISK_LEVEL, level))

    @classmethod
    def neutral(cls) -> "AnalysisResult":
        """Default analysis used whenever the engine output is unusable."""
        return cls(emotional_state="neutral")

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisResult":
        """
        Build an analysis from decoded engine JSON.

        Raises:
            ParseError: If payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ParseError("Analysis payload must be a JSON object")
        return cls.model_validate(payload)

    def to_payload(self) -> dict[str, Any]:
        """camelCase dict as stored in message metadata."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class TherapyMemory:
    """
    Working memory threaded through one pipeline run.

    Never mutated in place: with_analysis returns an updated copy so
    concurrent runs cannot share state.

    Attributes:
        emotional_state_history: Emotional state labels, oldest first
        conversation_themes: Accumulated themes (duplicates tolerated)
        risk_level: Latest non-zero risk level reported
        preferences: Free-form user preferences
        current_technique: Therapeutic technique in use, if any
    """

    emotional_state_history: tuple[str, ...] = ()
    conversation_themes: tuple[str, ...] = ()
    risk_level: int = 0
    preferences: dict[str, Any] = field(default_factory=dict)
    current_technique: str | None = None

    def with_analysis(self, analysis: AnalysisResult) -> "TherapyMemory":
        """Return a copy of this memory updated with one analysis."""
        updates: dict[str, Any] = {"preferences": dict(self.preferences)}
        if analysis.emotional_state_reported:
            updates["emotional_state_history"] = (
                *self.emotional_state_history,
                analysis.emotional_state,
            )
        if analysis.themes:
            updates["conversation_themes"] = (*self.conversation_themes, *analysis.themes)
        if analysis.risk_level:
            updates["risk_level"] = analysis.risk_level
        return replace(self, **updates)

    @property
    def latest_emotional_state(self) -> str | None:
        return self.emotional_state_history[-1] if self.emotional_state_history else None

    def progress_snapshot(self) -> dict[str, Any]:
        """Progress values persisted with a completed reply."""
        return {
            "emotionalState": self.latest_emotional_state,
            "riskLevel": self.risk_level,
        }

    def to_payload(self) -> dict[str, Any]:
        """Nested JSON shape carried in queued payloads and engine context."""
        return {
            "userProfile": {
                "emotionalState": list(self.emotional_state_history),
                "riskLevel": self.risk_level,
                "preferences": dict(self.preferences),
            },
            "sessionContext": {
                "conversationThemes": list(self.conversation_themes),
                "currentTechnique": self.current_technique,
            },
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> "TherapyMemory":
        """Rebuild memory from its payload shape; missing parts use defaults."""
        if not payload:
            return cls()
        profile = payload.get("userProfile") or {}
        context = payload.get("sessionContext") or {}
        risk = AnalysisResult.model_validate({"riskLevel": profile.get("riskLevel", 0)}).risk_level
        technique = context.get("currentTechnique")
        return cls(
            emotional_state_history=tuple(_string_list(profile.get("emotionalState"))),
            conversation_themes=tuple(_string_list(context.get("conversationThemes"))),
            risk_level=risk,
            preferences=dict(profile.get("preferences") or {}),
            current_technique=technique if isinstance(technique, str) else None,
        )


class PipelineRequest(BaseModel):
    """
    Payload of a therapy/session.message event.

    The run is keyed by (session_id, message_index); retries target the
    same placeholder instead of appending.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    session_id: UUID = Field(alias="sessionId")
    message_index: int = Field(alias="messageIndex", ge=0)
    message: str
    history: list[dict[str, Any]] = Field(default_factory=list)
    memory: TherapyMemory = Field(default_factory=TherapyMemory)
    goals: list[str] = Field(default_factory=list)
    system_prompt: str = Field(default=SYSTEM_PROMPT, alias="systemPrompt")
    correlation_id: str | None = Field(default=None, alias="correlationId")

    @field_validator("memory", mode="before")
    @classmethod
    def _load_memory(cls, value: Any) -> TherapyMemory:
        if isinstance(value, TherapyMemory):
            return value
        return TherapyMemory.from_payload(value if isinstance(value, dict) else None)

    @field_serializer("memory")
    def _dump_memory(self, memory: TherapyMemory) -> dict[str, Any]:
        return memory.to_payload()

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe camelCase payload for the task queue."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    session_id: UUID
    message_index: int
    status: str
    content: str
    analysis: AnalysisResult | None = None
    memory: TherapyMemory | None = None
    duplicate: bool = False
