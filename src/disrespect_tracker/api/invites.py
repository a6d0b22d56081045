"""Invite API endpoints."""

from fastapi import APIRouter, Depends

from disrespect_tracker.config import get_settings
from disrespect_tracker.schemas.invite import InviteResponse, InviteValidationResponse
from disrespect_tracker.schemas.user import UserSummary
from disrespect_tracker.services.invites import InviteService, get_invite_service
from disrespect_tracker.utils.security import CurrentUser

router = APIRouter(prefix="/invites", tags=["invites"])


@router.post("", response_model=InviteResponse, status_code=201)
async def create_invite(
    current_user: CurrentUser,
    invite_service: InviteService = Depends(get_invite_service),
) -> InviteResponse:
    """Create an invite link for the current user.

    Anyone registering through the link becomes the current user's friend.
    Requires authentication.
    """
    invite = await invite_service.create_invite(current_user.id)
    base_url = get_settings().app_url.rstrip("/")

    return InviteResponse(
        token=invite.token,
        invite_url=f"{base_url}/invite/{invite.token}",
        expires_at=invite.expires_at,
    )


@router.get("/{token}", response_model=InviteValidationResponse)
async def validate_invite(
    token: str,
    invite_service: InviteService = Depends(get_invite_service),
) -> InviteValidationResponse:
    """Check an invite token before registering.

    Does not require authentication. Returns 404 for unknown tokens and 410
    for expired ones.
    """
    invite = await invite_service.get_valid_invite(token)
    return InviteValidationResponse(
        inviter=UserSummary.model_validate(invite.user),
        expires_at=invite.expires_at,
    )
