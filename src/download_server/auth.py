"""Admin authorization: credential verifiers and the FastAPI dependency using them."""
import hmac
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from download_server.dependencies import get_request_payload
from download_server.errors import AuthorizationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class CredentialVerifier:
    """Base class for admin credential checks (to be extended by specific implementations)"""

    def verify(self, candidate: str) -> bool:
        raise NotImplementedError


class SharedSecretVerifier(CredentialVerifier):
    """Accepts exactly one process-wide secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("Admin secret must not be empty")
        self._secret = secret.encode("utf-8")

    def verify(self, candidate: str) -> bool:
        return hmac.compare_digest(candidate.encode("utf-8"), self._secret)


def extract_credential(payload: Dict[str, Any], authorization: Optional[str]) -> Optional[str]:
    """Secret from `Authorization: Bearer ...`, falling back to a `secret` body or form field."""
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    secret = payload.get("secret")
    return secret if isinstance(secret, str) else None


async def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
    payload: Dict[str, Any] = Depends(get_request_payload),
) -> None:
    """Dependency guarding the admin routes."""
    candidate = extract_credential(payload, authorization)
    verifier: CredentialVerifier = request.app.state.credential_verifier
    if not candidate or not verifier.verify(candidate):
        logger.warning(f"Rejected admin request {request.method} {request.url.path}")
        raise AuthorizationError("Unauthorized: Invalid admin secret")
