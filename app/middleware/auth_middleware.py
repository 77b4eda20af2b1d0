"""
Bearer-token authentication for FastAPI routes
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from app.api.dependencies import get_identity_service
from app.core.exceptions import APIException, UnauthorizedError
from app.models.auth import IdentityRecord
from app.services.identity_service import IdentityService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identities: IdentityService = Depends(get_identity_service),
) -> IdentityRecord:
    """
    Dependency resolving the caller's identity from the Authorization header.
    The returned record carries the raw JWT in ``token`` so it can be passed
    on to row-level-security scoped clients.
    """
    if not credentials or not credentials.credentials:
        raise UnauthorizedError("Authentication required")

    try:
        return await identities.get_user_from_token(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        logger.error(f"Authentication failed: {e}")
        raise UnauthorizedError("Authentication required")
