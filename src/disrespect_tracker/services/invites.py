"""Invite link issuance and lookup."""

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from disrespect_tracker.config import get_settings
from disrespect_tracker.database import get_db
from disrespect_tracker.models.invite import Invite
from disrespect_tracker.services.errors import ExpiredError, NotFoundError
from disrespect_tracker.utils.weeks import ensure_utc, utcnow

logger = logging.getLogger(__name__)


class InviteService:
    """Creates invite tokens and resolves them back to their issuer."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self.clock = clock

    async def create_invite(self, user_id: int) -> Invite:
        """Issue a new invite for ``user_id`` valid for the configured number of days."""
        settings = get_settings()
        now = self.clock()
        invite = Invite(
            user_id=user_id,
            token=secrets.token_hex(16),
            expires_at=now + timedelta(days=settings.invite_expire_days),
            created_at=now,
        )
        self.db.add(invite)
        await self.db.flush()

        logger.info("User %s created an invite expiring %s", user_id, invite.expires_at)
        return invite

    async def get_valid_invite(self, token: str) -> Invite:
        """Look up an invite by token, with its issuer loaded.

        Raises:
            NotFoundError: If no invite has this token.
            ExpiredError: If the invite is past its expiry.
        """
        result = await self.db.execute(
            select(Invite).where(Invite.token == token).options(selectinload(Invite.user))
        )
        invite = result.scalar_one_or_none()

        if invite is None:
            raise NotFoundError("Invalid invite")

        if ensure_utc(self.clock()) > ensure_utc(invite.expires_at):
            raise ExpiredError("Invite expired")

        return invite


async def get_invite_service(db: AsyncSession = Depends(get_db)) -> InviteService:
    """Dependency that provides an InviteService bound to the request session."""
    return InviteService(db)
