"""Emailed one-time codes for the second login factor and 2FA enrollment."""

from __future__ import annotations

from datetime import datetime, timedelta

from projectgrid.application.interfaces.repositories import IUserRepository
from projectgrid.application.interfaces.services import (
    INotificationService,
    IPasswordHasher,
)
from projectgrid.application.services.account_emails import AccountEmailRenderer
from projectgrid.domain.entities.user import PendingCodeState, UserEntity
from projectgrid.domain.exceptions import (
    InvalidOtpException,
    NotificationDeliveryFailedException,
    OtpExpiredException,
    OtpNotRequestedException,
)
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.utils.generators import generate_one_time_code

logger = get_logger(__name__)


class OneTimeCodeService:
    """Issues a code (hash stored on the user, plain code emailed) and consumes it."""

    def __init__(
        self,
        user_repo: IUserRepository,
        hasher: IPasswordHasher,
        notifier: INotificationService,
        renderer: AccountEmailRenderer,
        ttl: timedelta,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._notifier = notifier
        self._renderer = renderer
        self._ttl = ttl

    async def issue(self, user: UserEntity, now: datetime) -> None:
        """Replace any pending code with a new one and email it.

        Raises:
            NotificationDeliveryFailedException: If the email could not be sent.
        """
        code = generate_one_time_code()
        user.set_pending_code(self._hasher.hash_code(code), now + self._ttl)
        await self._user_repo.save(user)
        subject, body = self._renderer.two_factor_code(
            user.name, code, int(self._ttl.total_seconds() // 60)
        )
        if not await self._notifier.send(user.email, subject, body):
            raise NotificationDeliveryFailedException("Failed to send OTP email")
        logger.info("One-time code sent to user %s", user.id)

    def consume(self, user: UserEntity, code: str, now: datetime) -> None:
        """Check code against the pending one and clear it on success.

        The caller persists the user afterwards.

        Raises:
            OtpNotRequestedException: No code pending.
            OtpExpiredException: Pending code past its expiry.
            InvalidOtpException: Code does not match.
        """
        state = user.pending_code_state(now)
        if state is PendingCodeState.NONE:
            raise OtpNotRequestedException()
        if state is PendingCodeState.EXPIRED:
            raise OtpExpiredException()
        if not self._hasher.verify_code(code or "", user.two_factor_code_hash or ""):
            raise InvalidOtpException()
        user.clear_pending_code()
