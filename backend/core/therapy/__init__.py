"""
Therapy chat core.

Message pipeline, its engines and the schemas they exchange.
"""

from backend.core.therapy.message_pipeline import MessagePipeline
from backend.core.therapy.schemas import (
    THERAPY_MESSAGE_EVENT,
    AnalysisResult,
    PipelineRequest,
    PipelineResult,
    TherapyMemory,
)

__all__ = [
    "MessagePipeline",
    "THERAPY_MESSAGE_EVENT",
    "AnalysisResult",
    "PipelineRequest",
    "PipelineResult",
    "TherapyMemory",
]
