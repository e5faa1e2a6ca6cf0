from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from crewwell.core.config import Settings, get_settings

logger = logging.getLogger(__name__)
bearer = HTTPBearer(auto_error=False)


def verify_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify an HS256 bearer token and return its subject.
    """
    if not settings.JWT_SECRET:
        raise HTTPException(status_code=401, detail="Token verification is not configured")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise HTTPException(status_code=401, detail="Token has expired") from exc
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")
    try:
        uuid.UUID(str(user_id))
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Token subject is not a user ID") from e
    return {"user_id": str(user_id), "role": payload.get("role")}


def create_access_token(user_id: str, settings: Settings, **claims: Any) -> str:
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET is not configured")
    return jwt.encode({"sub": str(user_id), **claims}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


async def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Resolve the caller from a bearer token; in dev, an anonymous caller is the dev user.
    """
    if not creds or creds.scheme.lower() != "bearer":
        if settings.APP_ENV == "dev":
            logger.info("No credentials in dev mode, using dev user")
            return {"user_id": settings.DEV_USER_ID}
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    return verify_token(creds.credentials, settings)
