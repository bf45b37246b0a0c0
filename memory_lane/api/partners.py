"""REST endpoints for invite-code partner pairing.

Paths:
    POST /api/partners/profile               create or refresh a profile
    GET  /api/partners/{user_id}/invite-code get (or issue) the invite code
    POST /api/partners/accept                accept a partner's code
    GET  /api/partners/{user_id}             partner status and info
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from memory_lane.domain.couple import Couple, UserProfile
from memory_lane.store.memory_store import MemoryStore
from memory_lane.store.partner_store import PairingError, PartnerStore, ProfileNotFoundError

logger = logging.getLogger(__name__)


class ProfileRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)
    display_name: Optional[str] = Field(default=None, max_length=128)


class AcceptInviteRequest(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=16)
    user_id: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)


def create_partners_router(partners: PartnerStore, memories: Optional[MemoryStore] = None) -> APIRouter:
    """Pairing endpoints.  With *memories*, both partners' solo memories join the couple's timeline on accept."""
    router = APIRouter(prefix="/api/partners", tags=["partners"])

    @router.post("/profile")
    async def upsert_profile(body: ProfileRequest) -> UserProfile:
        return await partners.ensure_profile(body.user_id, body.email, body.display_name)

    @router.get("/{user_id}/invite-code")
    async def invite_code(user_id: str) -> dict[str, Any]:
        try:
            code = await partners.get_or_create_invite_code(user_id)
        except ProfileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return {"user_id": user_id, "invite_code": code}

    @router.post("/accept")
    async def accept_invite(body: AcceptInviteRequest) -> Couple:
        try:
            couple = await partners.accept_invite(body.invite_code, body.user_id, body.email)
        except PairingError as exc:
            logger.info("Invite acceptance by %s rejected: %s", body.user_id, exc)
            raise HTTPException(status_code=409, detail=str(exc))
        if memories is not None:
            for user_id in couple.user_ids:
                await memories.reassign_owner(user_id, couple.couple_id)
        return couple

    @router.get("/{user_id}")
    async def partner_status(user_id: str) -> dict[str, Any]:
        profile = await partners.get_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail=f"User profile {user_id} not found")
        info = None
        if profile.couple_id is not None:
            info = await partners.partner_info(profile.couple_id, user_id)
        return {
            "user_id": user_id,
            "has_partner": profile.is_partnered,
            "couple_id": profile.couple_id,
            "partner": info,
        }

    return router
