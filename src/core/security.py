"""Bearer token identity for authenticated operations.

Tokens are issued by the external identity provider and signed with the
shared ``SECRET_KEY``. The ``sub`` claim carries the user id that owns
saved workflows and templates.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

from .config import get_settings


# Optional scheme so read-only endpoints work anonymously
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class CurrentUser(BaseModel):
    """Identity extracted from a verified access token."""
    id: str
    email: Optional[str] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Used by development tooling and tests; production tokens come from
    the identity provider.
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=30)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """Verify a token and return the identity it carries."""
    settings = get_settings()
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    return CurrentUser(id=str(user_id), email=payload.get("email"))


async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[CurrentUser]:
    """Return the caller's identity, or None for anonymous requests."""
    if not token:
        return None
    return decode_access_token(token)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
) -> CurrentUser:
    """Return the caller's identity, rejecting anonymous requests."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_access_token(token)
