"""Partner pairing records: user profiles and the couples they form."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from memory_lane.foundation.clock import utc_now


class UserProfile(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)
    display_name: Optional[str] = Field(default=None, max_length=128)
    couple_id: Optional[str] = None
    invite_code: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_partnered(self) -> bool:
        return self.couple_id is not None


class Couple(BaseModel):
    """Two linked users sharing one memory timeline."""

    couple_id: str
    user_ids: tuple[str, str]
    partner1_email: str
    partner2_email: str
    created_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    def partner_of(self, user_id: str) -> Optional[str]:
        if user_id not in self.user_ids:
            return None
        for uid in self.user_ids:
            if uid != user_id:
                return uid
        return None


class PartnerInfo(BaseModel):
    email: str
    display_name: Optional[str] = None
