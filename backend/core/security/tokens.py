"""
HS256 JWT issue/verify.

Tokens are issued by the account service; this backend only verifies
them to learn the caller's user id. issue_token exists for tests and
local tooling.

Dependencies: hmac, hashlib, backend.configs.auth
System role: Bearer token verification
"""

import base64
import hmac
import json
import time
from hashlib import sha256
from typing import Any

from backend.configs.auth import AuthSettings
from backend.core.exceptions import AuthenticationError


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(secret: str, signing_input: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), sha256).digest()


def issue_token(user_id: str, settings: AuthSettings, ttl_seconds: int | None = None) -> str:
    """
    Issue a signed token for user_id.

    Args:
        user_id: Value of the userId and sub claims
        settings: Secret and default lifetime
        ttl_seconds: Lifetime override; negative values produce expired tokens

    Returns:
        str: Compact JWT
    """
    now = int(time.time())
    ttl = settings.token_ttl_seconds if ttl_seconds is None else ttl_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    claims = {"userId": user_id, "sub": user_id, "iat": now, "exp": now + ttl}
    signing_input = ".".join(
        [
            _b64url(json.dumps(header, separators=(",", ":"), sort_keys=True).encode()),
            _b64url(json.dumps(claims, separators=(",", ":"), sort_keys=True).encode()),
        ]
    )
    return signing_input + "." + _b64url(_sign(settings.jwt_secret, signing_input))


def decode_token(token: str, settings: AuthSettings) -> dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        AuthenticationError: Malformed token, wrong algorithm, bad
            signature, expired, or no user id claim
    """
    try:
        header_b64, payload_b64, sig_b64 = token.split(".")
        header = json.loads(_b64url_decode(header_b64))
        signature = _b64url_decode(sig_b64)
    except ValueError as e:
        raise AuthenticationError("Invalid token") from e

    if not isinstance(header, dict) or header.get("alg") != settings.jwt_algorithm:
        raise AuthenticationError("Invalid token algorithm")

    expected = _sign(settings.jwt_secret, header_b64 + "." + payload_b64)
    if not hmac.compare_digest(expected, signature):
        raise AuthenticationError("Invalid token signature")

    try:
        claims = json.loads(_b64url_decode(payload_b64))
    except ValueError as e:
        raise AuthenticationError("Invalid token payload") from e
    if not isinstance(claims, dict):
        raise AuthenticationError("Invalid token payload")

    exp = claims.get("exp")
    if exp is not None and (not isinstance(exp, (int, float)) or exp < time.time()):
        raise AuthenticationError("Token expired")

    user_id = claims.get("userId") or claims.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no user id")
    claims["userId"] = str(user_id)
    return claims
