"""Interview access links and the credentials they carry."""

import logging
import uuid
from typing import Optional
from urllib.parse import quote

from api.services.interviews.errors import InterviewAccessDenied
from core.security import InterviewLinkSigner, InvalidAccessToken

logger = logging.getLogger(__name__)


class AccessLinkService:
    """
    Builds lobby links and checks the credential presented with them.

    The link shape is fixed:
    ``{base_url}/candidate/interview/{id}/lobby?email={value}``. With signing
    enabled ``value`` is a signed token, otherwise the URL-encoded email.
    """

    def __init__(
        self,
        base_url: str,
        signer: Optional[InterviewLinkSigner] = None,
        signing_enabled: bool = True,
    ):
        if signing_enabled and signer is None:
            raise ValueError("A link signer is required when signing is enabled")
        self.base_url = base_url.rstrip("/")
        self.signer = signer
        self.signing_enabled = signing_enabled

    def build(self, interview_id: uuid.UUID, email: str) -> str:
        """Build the lobby link for one interview."""
        if self.signing_enabled:
            credential = self.signer.issue(email, interview_id)
        else:
            credential = email
        return (
            f"{self.base_url}/candidate/interview/{interview_id}/lobby"
            f"?email={quote(credential, safe='')}"
        )

    def resolve_email(
        self, credential: Optional[str], interview_id: Optional[uuid.UUID] = None
    ) -> str:
        """
        Turn a presented credential into the candidate email it stands for.

        A signed token must be valid and, when ``interview_id`` is given,
        bound to that interview. A raw email is only accepted while signing
        is disabled.

        Raises:
            InterviewAccessDenied: If the credential is missing or not acceptable
        """
        if not credential:
            raise InterviewAccessDenied("Missing interview credential")
        credential = credential.strip()

        if "@" in credential:
            if self.signing_enabled:
                logger.warning(f"Rejected raw email credential for interview {interview_id}")
                raise InterviewAccessDenied("A signed interview link is required")
            return credential

        if self.signer is None:
            raise InterviewAccessDenied("Invalid interview credential")
        try:
            payload = self.signer.verify(credential)
        except InvalidAccessToken as e:
            raise InterviewAccessDenied(str(e)) from e

        if interview_id is not None and payload.interview_id != str(interview_id):
            raise InterviewAccessDenied("Interview link does not match this interview")
        return payload.email

