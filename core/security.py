"""
Security utilities.

Signed interview access tokens and PII masking for log output.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional, Set

import jwt

from core.utils.datetime import now

logger = logging.getLogger(__name__)


# PII fields that should be masked in logs
PII_FIELDS: Set[str] = {
    "email", "candidate_email", "phone", "name", "candidate_name",
    "first_name", "last_name", "full_name", "address", "token",
}


def mask_pii(data: Any, depth: int = 0) -> Any:
    """
    Recursively mask PII fields in data structures.

    Args:
        data: Data to mask (dict, list, or primitive)
        depth: Current recursion depth (max 10)

    Returns:
        Data with PII fields masked
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if str(key).lower() in PII_FIELDS:
                if isinstance(value, str) and len(value) > 0:
                    # Partial masking: show first char and length indicator
                    masked[key] = f"{value[0]}***[{len(value)}]"
                else:
                    masked[key] = "[MASKED]"
            else:
                masked[key] = mask_pii(value, depth + 1)
        return masked
    elif isinstance(data, list):
        return [mask_pii(item, depth + 1) for item in data[:5]]  # Limit list items
    else:
        return data


# ==================== Interview access tokens ===================== #
class InvalidAccessToken(Exception):
    """Raised when an access token is malformed, tampered with or expired."""


@dataclass
class AccessTokenPayload:
    email: str
    interview_id: str


class InterviewLinkSigner:
    """Issues and verifies expiring JWTs carried in interview access links."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_hours: int = 336):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_hours = ttl_hours

    def issue(self, email: str, interview_id: Any, ttl_hours: Optional[int] = None) -> str:
        """
        Create a token bound to one candidate email and one interview.

        Args:
            email: Candidate email (``sub`` claim)
            interview_id: Interview the token opens (``iid`` claim)
            ttl_hours: Lifetime override

        Returns:
            Encoded JWT
        """
        issued_at = now()
        claims = {
            "sub": email,
            "iid": str(interview_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(hours=ttl_hours or self.ttl_hours),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> AccessTokenPayload:
        """
        Decode and validate a token.

        Raises:
            InvalidAccessToken: If the signature, claims or expiry are invalid
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iid", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidAccessToken("Access link has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidAccessToken("Access link is invalid") from e
        return AccessTokenPayload(email=claims["sub"], interview_id=claims["iid"])
