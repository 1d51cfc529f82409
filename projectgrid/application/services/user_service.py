"""User application service: profile, password change, two-factor preference."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from projectgrid.application.dtos.user import UserProfile
from projectgrid.application.interfaces.repositories import IUserRepository
from projectgrid.application.interfaces.services import IPasswordHasher
from projectgrid.application.services.one_time_code import OneTimeCodeService
from projectgrid.domain.entities.user import UserEntity
from projectgrid.domain.exceptions import (
    InvalidCurrentPasswordException,
    PasswordsDoNotMatchException,
    UserNotFoundException,
)
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.telemetry.tracing import traced
from projectgrid.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class UserService:
    """Operations on the authenticated user's own account."""

    def __init__(
        self,
        user_repo: IUserRepository,
        hasher: IPasswordHasher,
        codes: OneTimeCodeService,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._codes = codes
        self._clock = clock

    async def _load(self, user_id: str) -> UserEntity:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException()
        return user

    async def get_profile(self, user_id: str) -> UserProfile:
        return UserProfile.from_entity(await self._load(user_id))

    async def update_profile(self, user_id: str, name: str) -> UserProfile:
        """Rename the user. Raises ValidationException on a blank name."""
        user = await self._load(user_id)
        user.rename(name, self._clock())
        await self._user_repo.save(user)
        return UserProfile.from_entity(user)

    @traced("user.change_password")
    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        """Replace the password after checking the current one.

        Raises:
            PasswordsDoNotMatchException: new and confirm differ.
            InvalidCurrentPasswordException: current password is wrong.
        """
        if new_password != confirm_password:
            raise PasswordsDoNotMatchException("Passwords do not match")
        user = await self._load(user_id)
        if not await asyncio.to_thread(
            self._hasher.verify, current_password, user.password_hash
        ):
            raise InvalidCurrentPasswordException()
        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        user.change_password_hash(password_hash, self._clock())
        await self._user_repo.save(user)
        logger.info("Password changed for user %s", user.id)

    @traced("user.set_two_factor_preference")
    async def set_two_factor_preference(self, user_id: str, enable: bool) -> bool:
        """Start enrollment (email a code) or disable 2FA.

        Returns:
            True when a code was sent and must be confirmed with
            confirm_two_factor(); False when 2FA was disabled.
        """
        user = await self._load(user_id)
        now = self._clock()
        if enable:
            await self._codes.issue(user, now)
            return True
        user.set_two_factor(False, now)
        await self._user_repo.save(user)
        logger.info("2FA disabled for user %s", user.id)
        return False

    @traced("user.confirm_two_factor")
    async def confirm_two_factor(self, user_id: str, otp: str) -> UserProfile:
        """Check the enrollment code and enable 2FA."""
        user = await self._load(user_id)
        now = self._clock()
        self._codes.consume(user, otp, now)
        user.set_two_factor(True, now)
        await self._user_repo.save(user)
        logger.info("2FA enabled for user %s", user.id)
        return UserProfile.from_entity(user)
