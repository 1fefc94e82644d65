"""
Murmur Backend — Request Dependencies
=======================================

What:  FastAPI dependencies shared by every authenticated route.

Authentication boundary:
    Tokens are issued by the external auth service. Here we only verify
    the `Authorization: Bearer <jwt>` header with the shared secret and
    read the caller's id from the `userId` claim. Handlers receive that id
    and never see the token.

    Missing header, bad signature, expired token or a claim that is not a
    UUID all raise AuthenticationError (→ 401).
"""

import logging
import uuid
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Claim carrying the caller's id in tokens issued by the auth service
USER_ID_CLAIM = "userId"

security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """Verify signature and expiry; return the token payload."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info("Rejected bearer token: %s", str(e))
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": str(e)},
        )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> uuid.UUID:
    """Return the authenticated caller's user id."""
    if credentials is None:
        raise AuthenticationError(message="Not authenticated")

    payload = decode_token(credentials.credentials)
    try:
        return uuid.UUID(str(payload.get(USER_ID_CLAIM)))
    except ValueError:
        raise AuthenticationError(
            message="Invalid token payload",
            context={"claim": USER_ID_CLAIM},
        )


# Annotated aliases used in route signatures
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
