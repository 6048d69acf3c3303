"""Bearer token verification."""

from backend.core.security.tokens import decode_token, issue_token

__all__ = ["decode_token", "issue_token"]
