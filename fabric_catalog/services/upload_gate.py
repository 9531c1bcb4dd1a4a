"""
Upload authorization gate.

The upload service asks this gate before accepting an image. The gate only
resolves who is calling; it never sees file bytes or where they are stored.
"""
import logging
from dataclasses import dataclass

import jwt
from fastapi import Header

from fabric_catalog.config import Config
from fabric_catalog.errors import ErrorType
from fabric_catalog.exceptions import AppException

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    user_id: str


def resolve_identity(authorization: str | None) -> Identity | None:
    """Verify a `Bearer <jwt>` header and return the caller, or None.

    Raises:
        AppException: if no signing secret is configured
    """
    if not Config.AUTH_SECRET:
        raise AppException(ErrorType.NOT_CONFIGURED, "Upload authentication not configured")

    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    try:
        payload = jwt.decode(token.strip(), Config.AUTH_SECRET, algorithms=[Config.AUTH_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Upload token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid upload token: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return Identity(user_id=str(user_id))


async def require_uploader(authorization: str | None = Header(default=None)) -> Identity:
    """FastAPI dependency: reject the request unless the caller is identified."""
    identity = resolve_identity(authorization)
    if identity is None:
        logger.warning("Unauthorized upload attempt")
        raise AppException(ErrorType.UNAUTHORIZED, "Unauthorized")
    return identity
