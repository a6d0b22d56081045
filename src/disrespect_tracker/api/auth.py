"""Authentication API endpoints."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from disrespect_tracker.config import get_settings
from disrespect_tracker.database import get_db
from disrespect_tracker.models.user import PasswordReset, User
from disrespect_tracker.schemas.user import (
    ForgotPasswordRequest,
    MessageResponse,
    RegisterResponse,
    ResetPasswordRequest,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from disrespect_tracker.services.errors import ExpiredError
from disrespect_tracker.services.friend_graph import FriendGraph
from disrespect_tracker.utils.security import (
    CurrentSession,
    CurrentUser,
    create_session,
    delete_user_sessions,
    generate_token,
    hash_password,
    verify_password,
)
from disrespect_tracker.utils.weeks import ensure_utc, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    """Register a new user.

    Creates a new user account with the provided username, email, name and
    password. When an invite token is supplied and still valid, the new user
    and the invite's sender become friends straight away; a bad invite never
    blocks registration.

    Raises:
        HTTPException 409: If username or email already exists
    """
    # Check if email already exists
    email_query = select(User).where(User.email == user_data.email)
    email_result = await db.execute(email_query)
    if email_result.scalar_one_or_none():
        raise HTTPException(
            status_code=409,
            detail="Email already registered",
        )

    # Check if username already exists
    username_query = select(User).where(User.username == user_data.username)
    username_result = await db.execute(username_query)
    if username_result.scalar_one_or_none():
        raise HTTPException(
            status_code=409,
            detail="Username already taken",
        )

    # Create new user with hashed password
    new_user = User(
        username=user_data.username,
        email=user_data.email,
        name=user_data.name,
        hashed_password=hash_password(user_data.password),
        searchable=True,
        is_active=True,
        created_at=utcnow(),
    )
    db.add(new_user)
    await db.flush()

    invite_redeemed = False
    if user_data.invite_token:
        invite_redeemed = await FriendGraph(db).redeem_invite(user_data.invite_token, new_user.id)

    access_token = await create_session(db, new_user.id)
    logger.info("Registered user %s", new_user.id)

    return RegisterResponse(
        user=UserResponse.model_validate(new_user),
        access_token=access_token,
        invite_redeemed=invite_redeemed,
    )


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate user and return a JWT token backed by a new session.

    Accepts either username or email in the username field.

    Raises:
        HTTPException 401: If credentials are invalid
        HTTPException 403: If user account is inactive
    """
    # Look up user by username or email
    query = select(User).where(
        or_(
            User.username == credentials.username.lower(),
            User.email == credentials.username.lower(),
        )
    )
    result = await db.execute(query)
    user = result.scalar_one_or_none()

    # Validate user exists and password is correct
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Invalid username or password",
        )

    # Check if user is active
    if not user.is_active:
        raise HTTPException(
            status_code=403,
            detail="User account is inactive",
        )

    access_token = await create_session(db, user.id)
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """End the current login session; its token stops working immediately."""
    await db.delete(session)
    return MessageResponse()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information.

    Requires a valid JWT token in the Authorization header.
    """
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    current_user: CurrentUser,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the current user's display name or search visibility."""
    if user_data.name is not None:
        current_user.name = user_data.name
    if user_data.searchable is not None:
        current_user.searchable = user_data.searchable

    await db.flush()
    return UserResponse.model_validate(current_user)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Start a password reset.

    Always reports success so the endpoint cannot be used to discover which
    emails have accounts. For a known email any earlier reset tokens are
    replaced by a new one.
    """
    settings = get_settings()

    result = await db.execute(select(User).where(User.email == request_data.email.lower()))
    user = result.scalar_one_or_none()
    if user is None:
        return MessageResponse()

    await db.execute(delete(PasswordReset).where(PasswordReset.user_id == user.id))

    now = utcnow()
    reset = PasswordReset(
        user_id=user.id,
        token=generate_token(),
        expires_at=now + timedelta(minutes=settings.password_reset_expire_minutes),
        used=False,
        created_at=now,
    )
    db.add(reset)
    await db.flush()

    # Email delivery is handled outside this service; the link is only logged
    reset_url = f"{settings.app_url.rstrip('/')}/reset-password?token={reset.token}"
    logger.info("Password reset requested for user %s", user.id)
    logger.debug("Password reset link for user %s: %s", user.id, reset_url)

    return MessageResponse()


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request_data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Set a new password using a reset token.

    The token is single use; every existing login session of the user is
    ended.

    Raises:
        HTTPException 400: If the token is unknown
        ExpiredError (410): If the token was already used or has expired
    """
    result = await db.execute(
        select(PasswordReset).where(PasswordReset.token == request_data.token)
    )
    reset = result.scalar_one_or_none()

    if reset is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset link")

    if reset.used or ensure_utc(reset.expires_at) < utcnow():
        raise ExpiredError("Reset link has expired")

    user = await db.get(User, reset.user_id)
    if user is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset link")

    user.hashed_password = hash_password(request_data.password)
    reset.used = True
    await delete_user_sessions(db, user.id)
    await db.flush()

    logger.info("Password reset completed for user %s", user.id)
    return MessageResponse()
