"""Pydantic schemas for invite API endpoints."""

from pydantic import BaseModel, Field

from disrespect_tracker.schemas.common import UTCDateTime
from disrespect_tracker.schemas.user import UserSummary


class InviteResponse(BaseModel):
    """A freshly created invite link."""

    token: str = Field(description="Invite token")
    invite_url: str = Field(description="Link to share")
    expires_at: UTCDateTime = Field(description="When the invite stops working")


class InviteValidationResponse(BaseModel):
    """Result of checking an invite token."""

    valid: bool = Field(default=True, description="Whether the invite can be redeemed")
    inviter: UserSummary = Field(description="User who sent the invite")
    expires_at: UTCDateTime = Field(description="When the invite stops working")
