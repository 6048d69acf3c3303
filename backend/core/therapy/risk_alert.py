"""
Risk alert side channel.

Dependencies: logging
System role: Notifies operators about high-risk messages
"""

import logging
from uuid import UUID

logger = logging.getLogger(__name__)


class RiskAlertNotifier:
    """Emits high-risk alerts as WARNING log records."""

    async def notify(
        self,
        session_id: UUID,
        message_index: int,
        risk_level: int,
        message_text: str,
    ) -> None:
        logger.warning(
            "High risk level detected in chat message",
            extra={
                "session_id": str(session_id),
                "message_index": message_index,
                "risk_level": risk_level,
                "message_preview": message_text[:200],
            },
        )
