"""Bearer-token identification of the calling user.

Tokens are issued by the account service; CardBox only verifies them and
reads the user id from the ``sub`` claim.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from cardbox.config import settings

# Security event logger
security_logger = logging.getLogger("cardbox.security")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 120


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def get_current_user_id(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> str | None:
    """Get the user id from the bearer token, or None if absent or invalid."""
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        security_logger.info("Rejected bearer token: %s", e)
        return None

    subject: str | None = payload.get("sub")
    if not subject:
        security_logger.info("Rejected bearer token without subject")
        return None
    return str(subject)


def require_auth(
    user_id: Annotated[str | None, Depends(get_current_user_id)],
) -> str:
    """Require authentication - raises 401 if not authenticated."""
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


RequireAuth = Annotated[str, Depends(require_auth)]
