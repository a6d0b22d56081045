"""Security utilities for password hashing, JWT handling and login sessions."""

import secrets
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Annotated

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from disrespect_tracker.config import get_settings
from disrespect_tracker.database import get_db
from disrespect_tracker.utils.weeks import ensure_utc, utcnow

if TYPE_CHECKING:
    from disrespect_tracker.models.user import Session, User

# OAuth2 scheme for Bearer token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def generate_token(nbytes: int = 32) -> str:
    """Return a random hex token for sessions and password resets."""
    return secrets.token_hex(nbytes)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        data: Payload data to encode in the token. The "sub" (subject) claim
              must be a string (e.g., {"sub": str(user_id)}) and "sid" names
              the session the token belongs to.
        expires_delta: Optional custom expiration time. Defaults to settings value.

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string to decode

    Returns:
        Decoded token payload if valid, None if invalid or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except JWTError:
        return None


async def create_session(db: AsyncSession, user_id: int, now: datetime | None = None) -> str:
    """Persist a login session for ``user_id`` and return a signed access token for it."""
    from disrespect_tracker.models.user import Session

    settings = get_settings()
    now = now or utcnow()
    lifetime = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    session = Session(
        user_id=user_id,
        token=generate_token(),
        expires_at=now + lifetime,
        created_at=now,
    )
    db.add(session)
    await db.flush()

    return create_access_token(
        data={"sub": str(user_id), "sid": session.token},
        expires_delta=lifetime,
    )


async def delete_user_sessions(db: AsyncSession, user_id: int) -> None:
    """Invalidate every login session of ``user_id``."""
    from disrespect_tracker.models.user import Session

    await db.execute(delete(Session).where(Session.user_id == user_id))


async def get_current_session(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
) -> "Session":
    """Resolve the login session behind a bearer token.

    This is a FastAPI dependency that validates the JWT token from the
    Authorization header and returns the matching, unexpired session with
    its user loaded.

    Raises:
        HTTPException 401: If the token is invalid or its session is gone or expired
    """
    # Import here to avoid circular import
    from sqlalchemy.orm import selectinload

    from disrespect_tracker.models.user import Session

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id_str: str | None = payload.get("sub")
    session_token: str | None = payload.get("sid")
    if user_id_str is None or session_token is None:
        raise credentials_exception

    try:
        user_id = int(user_id_str)
    except ValueError:
        raise credentials_exception from None

    result = await db.execute(
        select(Session).where(Session.token == session_token).options(selectinload(Session.user))
    )
    session = result.scalar_one_or_none()

    if session is None or session.user_id != user_id or session.user is None:
        raise credentials_exception

    if ensure_utc(session.expires_at) < utcnow():
        raise credentials_exception

    return session


async def get_current_user(
    session: Annotated["Session", Depends(get_current_session)],
):
    """Get the current authenticated user from its login session."""
    return session.user


async def get_current_active_user(
    current_user: Annotated["User", Depends(get_current_user)],
):
    """Get the current active user.

    This dependency builds on get_current_user and additionally checks
    that the user account is active.

    Args:
        current_user: User from get_current_user dependency

    Returns:
        The authenticated active User object

    Raises:
        HTTPException 403: If user account is inactive
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )
    return current_user


# Type aliases for use in route dependencies
CurrentUser = Annotated["User", Depends(get_current_active_user)]
CurrentSession = Annotated["Session", Depends(get_current_session)]
