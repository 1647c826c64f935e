import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .configuration import Settings, get_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def token_matches(expected: str, presented: str) -> bool:
    """
    Check a presented bearer token against the configured one.

    An empty configured token accepts any token; the header is still required.
    """
    if not expected:
        return bool(presented)
    return secrets.compare_digest(expected.encode(), presented.encode())


def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not token_matches(settings.api_token, credentials.credentials):
        logger.warning("Rejected request with invalid bearer token")
        raise HTTPException(
            status_code=401,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
