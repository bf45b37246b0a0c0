"""Profiles, invite codes and couples.

Pairing flow:
    1. Each user has a profile (ensure_profile on first sign-in).
    2. The inviter asks for an invite code; it is generated once and reused.
    3. The partner accepts the code; a Couple is created and both profiles
       point at it.  From then on both users share owner_id = couple_id.

All mutations happen under one asyncio.Lock so two concurrent accepts can
never link the same user twice.
"""

from __future__ import annotations

import asyncio
import logging

from memory_lane.domain.couple import Couple, PartnerInfo, UserProfile
from memory_lane.foundation.identifiers import new_id, new_invite_code

logger = logging.getLogger(__name__)


class ProfileNotFoundError(KeyError):
    def __init__(self, user_id: str) -> None:
        super().__init__(user_id)
        self.user_id = user_id

    def __str__(self) -> str:
        return f"User profile {self.user_id} not found"


class PairingError(ValueError):
    """Base class for invite acceptance failures.  The message is user-facing."""


class InvalidInviteCodeError(PairingError):
    def __init__(self) -> None:
        super().__init__("Invalid invite code")


class InviterAlreadyPartneredError(PairingError):
    def __init__(self) -> None:
        super().__init__("This user is already partnered")


class AcceptorAlreadyPartneredError(PairingError):
    def __init__(self) -> None:
        super().__init__("You are already partnered")


class SelfPartnerError(PairingError):
    def __init__(self) -> None:
        super().__init__("You cannot partner with yourself")


class PartnerStore:
    """Async-safe, in-memory store for user profiles and couples."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._profiles: dict[str, UserProfile] = {}
        self._couples: dict[str, Couple] = {}

    # ── Profiles ─────────────────────────────────────────────────────────

    async def ensure_profile(self, user_id: str, email: str, display_name: str | None = None) -> UserProfile:
        """Create the profile if missing; otherwise refresh email/display name."""
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                profile = UserProfile(user_id=user_id, email=email, display_name=display_name)
                self._profiles[user_id] = profile
                logger.info("Created profile for user %s", user_id)
            else:
                profile.email = email
                if display_name is not None:
                    profile.display_name = display_name
            return profile.model_copy()

    async def get_profile(self, user_id: str) -> UserProfile | None:
        async with self._lock:
            profile = self._profiles.get(user_id)
            return profile.model_copy() if profile else None

    async def get_or_create_invite_code(self, user_id: str) -> str:
        async with self._lock:
            profile = self._require(user_id)
            if profile.invite_code:
                return profile.invite_code

            taken = {p.invite_code for p in self._profiles.values() if p.invite_code}
            code = new_invite_code()
            while code in taken:
                code = new_invite_code()
            profile.invite_code = code
            logger.info("Issued invite code for user %s", user_id)
            return code

    # ── Couples ──────────────────────────────────────────────────────────

    async def accept_invite(self, invite_code: str, acceptor_id: str, acceptor_email: str) -> Couple:
        """Link the code's owner with *acceptor_id*.  Raises a PairingError subclass."""
        code = invite_code.strip().upper()
        async with self._lock:
            inviter = next(
                (p for p in self._profiles.values() if p.invite_code == code),
                None,
            )
            if inviter is None:
                raise InvalidInviteCodeError()
            if inviter.is_partnered:
                raise InviterAlreadyPartneredError()

            acceptor = self._profiles.get(acceptor_id)
            if acceptor is not None and acceptor.is_partnered:
                raise AcceptorAlreadyPartneredError()
            if inviter.user_id == acceptor_id:
                raise SelfPartnerError()

            if acceptor is None:
                acceptor = UserProfile(user_id=acceptor_id, email=acceptor_email)
                self._profiles[acceptor_id] = acceptor

            couple = Couple(
                couple_id=new_id(),
                user_ids=(inviter.user_id, acceptor_id),
                partner1_email=inviter.email,
                partner2_email=acceptor_email,
            )
            self._couples[couple.couple_id] = couple
            inviter.couple_id = couple.couple_id
            acceptor.couple_id = couple.couple_id

        logger.info("Linked users %s and %s as couple %s", inviter.user_id, acceptor_id, couple.couple_id)
        return couple

    async def partner_info(self, couple_id: str, current_user_id: str) -> PartnerInfo | None:
        async with self._lock:
            couple = self._couples.get(couple_id)
            if couple is None:
                return None
            partner_id = couple.partner_of(current_user_id)
            partner = self._profiles.get(partner_id) if partner_id else None
            if partner is None:
                return None
            return PartnerInfo(email=partner.email, display_name=partner.display_name)

    async def partner_id_of(self, user_id: str) -> str | None:
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None or profile.couple_id is None:
                return None
            couple = self._couples.get(profile.couple_id)
            return couple.partner_of(user_id) if couple else None

    async def has_partner(self, user_id: str) -> bool:
        async with self._lock:
            profile = self._profiles.get(user_id)
            return profile is not None and profile.is_partnered

    async def owner_id_for(self, user_id: str) -> str:
        """Timeline owner for *user_id*: the couple id once partnered, else the user id."""
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is not None and profile.couple_id:
                return profile.couple_id
            return user_id

    # ── Internals ────────────────────────────────────────────────────────

    def _require(self, user_id: str) -> UserProfile:
        """Must be called while holding self._lock."""
        profile = self._profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile
