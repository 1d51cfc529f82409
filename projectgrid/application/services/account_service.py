"""Account lifecycle: register, login, verify email, password reset.

States: Unregistered -> PendingVerification -> Verified, with the reset
sub-flow Verified -> ResetRequested -> Verified. Every store call and
email send is awaited in order. A failed send stops the flow with
NotificationDeliveryFailedException and leaves records already written
in place.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from projectgrid.application.dtos.auth import (
    AccountPolicy,
    LoginResult,
    SessionIssued,
    TwoFactorChallenge,
    VerificationResent,
)
from projectgrid.application.dtos.user import UserProfile
from projectgrid.application.interfaces.repositories import (
    IUserRepository,
    IVerificationTokenRepository,
)
from projectgrid.application.interfaces.services import (
    INotificationService,
    IPasswordHasher,
    ITokenIssuer,
)
from projectgrid.application.services.account_emails import AccountEmailRenderer
from projectgrid.application.services.one_time_code import OneTimeCodeService
from projectgrid.domain.entities.user import UserEntity
from projectgrid.domain.entities.verification_token import VerificationTokenEntity
from projectgrid.domain.enums import TokenPurpose
from projectgrid.domain.exceptions import (
    DuplicateEmailException,
    EmailNotVerifiedException,
    InvalidCredentialsException,
    InvalidOrExpiredTokenException,
    NotificationDeliveryFailedException,
    PasswordsDoNotMatchException,
    RegistrationDeniedException,
    ResetAlreadyInProgressException,
    TokenExpiredException,
    UnknownEmailException,
    UserNotFoundException,
    ValidationException,
)
from projectgrid.domain.value_objects.core import EmailAddress
from projectgrid.domain.value_objects.token import (
    TokenClaims,
    TokenFailure,
    TokenFailureReason,
)
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.telemetry.tracing import add_span_attributes, add_span_event, traced
from projectgrid.shared.utils.datetime import utc_now
from projectgrid.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

UNVERIFIED_LOGIN_MESSAGE = (
    "Please verify your email before logging in. "
    "A verification email has already been sent."
)
UNVERIFIED_RESET_MESSAGE = (
    "Email is not verified. Please verify your email before resetting the password."
)


def _minutes(policy_ttl) -> int:
    return int(policy_ttl.total_seconds() // 60)


class AccountService:
    """Orchestrates the account flows over the credential and token stores.

    Collaborators and policy are injected; nothing here reads settings.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        token_repo: IVerificationTokenRepository,
        token_issuer: ITokenIssuer,
        hasher: IPasswordHasher,
        notifier: INotificationService,
        renderer: AccountEmailRenderer,
        policy: AccountPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = user_repo
        self._tokens = token_repo
        self._issuer = token_issuer
        self._hasher = hasher
        self._notifier = notifier
        self._renderer = renderer
        self._policy = policy or AccountPolicy()
        self._clock = clock
        self._codes = OneTimeCodeService(
            user_repo, hasher, notifier, renderer, self._policy.two_factor_ttl
        )

    # --- helpers ---

    def _ttl(self, purpose: TokenPurpose):
        if purpose is TokenPurpose.EMAIL_VERIFICATION:
            return self._policy.email_verification_ttl
        if purpose is TokenPurpose.PASSWORD_RESET:
            return self._policy.password_reset_ttl
        if purpose is TokenPurpose.LOGIN:
            return self._policy.login_ttl
        return self._policy.two_factor_ttl

    async def _store_token(
        self, user: UserEntity, purpose: TokenPurpose, now: datetime
    ) -> str:
        """Mint a token for purpose and persist its record; returns the token string."""
        ttl = self._ttl(purpose)
        token = self._issuer.issue(user.id, purpose, ttl)
        await self._tokens.add(
            VerificationTokenEntity(
                id=generate_cuid(),
                user_id=user.id,
                token=token,
                purpose=purpose,
                expires_at=now + ttl,
                created_at=now,
            )
        )
        return token

    async def _send_verification(self, user: UserEntity, token: str) -> None:
        subject, body = self._renderer.verification(
            user.name, token, _minutes(self._policy.email_verification_ttl)
        )
        if not await self._notifier.send(user.email, subject, body):
            raise NotificationDeliveryFailedException("Failed to send verification email")
        add_span_event("verification_email_sent")

    def _claims_or_raise(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        result = self._issuer.verify(token, purpose)
        if isinstance(result, TokenFailure):
            add_span_attributes(token_failure=result.reason.value)
            if result.reason is TokenFailureReason.WRONG_PURPOSE:
                raise InvalidOrExpiredTokenException(
                    "Invalid token purpose", reason=result.reason.value
                )
            raise InvalidOrExpiredTokenException(reason=result.reason.value)
        return result

    async def _consume_stored_token(
        self, token: str, purpose: TokenPurpose, now: datetime, expired_message: str
    ) -> tuple[UserEntity, VerificationTokenEntity]:
        """Verify a stored token and load its user; the record is not yet deleted."""
        claims = self._claims_or_raise(token, purpose)
        record = await self._tokens.find_by_user_and_token(claims.subject, token)
        if record is None or record.purpose is not purpose:
            raise InvalidOrExpiredTokenException(
                "Invalid or expired verification token", reason="not_found"
            )
        if record.is_expired(now):
            raise TokenExpiredException(expired_message)
        user = await self._users.get_by_id(claims.subject)
        if user is None:
            raise UserNotFoundException()
        return user, record

    async def _start_session(self, user: UserEntity, now: datetime) -> SessionIssued:
        user.record_login(now)
        await self._users.save(user)
        token = self._issuer.issue(user.id, TokenPurpose.LOGIN, self._policy.login_ttl)
        logger.info("Login succeeded for user %s", user.id)
        return SessionIssued(token=token, user=UserProfile.from_entity(user))

    # --- flows ---

    @traced("account.register")
    async def register(self, name: str, email: str, password: str) -> UserProfile:
        """Create an unverified user and email a verification link.

        Raises:
            RegistrationDeniedException: Email domain is on the block list.
            DuplicateEmailException: Email already registered (no mutation).
            NotificationDeliveryFailedException: Send failed; user and token stay.
        """
        try:
            address = EmailAddress.parse(email)
        except ValueError as e:
            raise ValidationException(str(e), field="email") from e
        if address.domain in self._policy.blocked_email_domains:
            logger.warning("Registration denied for blocked domain %s", address.domain)
            raise RegistrationDeniedException()
        if await self._users.get_by_email(address.value) is not None:
            raise DuplicateEmailException()

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        now = self._clock()
        user = UserEntity(
            id=generate_cuid(),
            email=address.value,
            name=(name or "").strip(),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        await self._users.create(user)
        add_span_attributes(user_id=user.id)
        logger.info("User registered: %s", user.id)

        token = await self._store_token(user, TokenPurpose.EMAIL_VERIFICATION, now)
        await self._send_verification(user, token)
        return UserProfile.from_entity(user)

    @traced("account.login")
    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate by email and password.

        Unverified users never get a session: an active verification token
        is reported as EmailNotVerifiedException, otherwise a fresh one is
        sent (VerificationResent). Users with 2FA get a TwoFactorChallenge.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password.
            EmailNotVerifiedException: Unverified with a token still active.
            NotificationDeliveryFailedException: Resend or code email failed.
        """
        user = await self._users.get_by_email((email or "").strip().lower())
        if user is None:
            await asyncio.to_thread(self._hasher.verify, password, self._hasher.dummy_hash)
            raise InvalidCredentialsException()
        add_span_attributes(user_id=user.id)
        now = self._clock()

        if not user.is_email_verified:
            existing = await self._tokens.find_by_user_and_purpose(
                user.id, TokenPurpose.EMAIL_VERIFICATION
            )
            if existing is not None and existing.is_active(now):
                raise EmailNotVerifiedException(UNVERIFIED_LOGIN_MESSAGE)
            if existing is not None:
                await self._tokens.delete(existing.id)
            token = await self._store_token(user, TokenPurpose.EMAIL_VERIFICATION, now)
            await self._send_verification(user, token)
            logger.info("Verification email re-sent to user %s", user.id)
            return VerificationResent(user_id=user.id)

        if not await asyncio.to_thread(self._hasher.verify, password, user.password_hash):
            raise InvalidCredentialsException()

        if user.is_two_factor_enabled:
            await self._codes.issue(user, now)
            otp_token = self._issuer.issue(
                user.id, TokenPurpose.TWO_FACTOR, self._policy.two_factor_ttl
            )
            return TwoFactorChallenge(user_id=user.id, otp_token=otp_token)

        return await self._start_session(user, now)

    @traced("account.verify_login_otp")
    async def verify_login_otp(self, otp: str, otp_token: str) -> SessionIssued:
        """Second login step: check the emailed code and issue the session."""
        claims = self._claims_or_raise(otp_token, TokenPurpose.TWO_FACTOR)
        user = await self._users.get_by_id(claims.subject)
        if user is None:
            raise UserNotFoundException()
        now = self._clock()
        self._codes.consume(user, otp, now)
        return await self._start_session(user, now)

    @traced("account.verify_email")
    async def verify_email(self, token: str) -> UserProfile:
        """Mark the token's user verified and delete the token.

        Raises:
            InvalidOrExpiredTokenException: Bad token, wrong purpose, or no record.
            TokenExpiredException: Record past its expiry.
            UserNotFoundException: Token's user no longer exists.
            AlreadyVerifiedException: Already verified (no mutation).
        """
        now = self._clock()
        user, record = await self._consume_stored_token(
            token, TokenPurpose.EMAIL_VERIFICATION, now, "Verification token has expired"
        )
        user.mark_email_verified(now)
        await self._users.save(user)
        await self._tokens.delete(record.id)
        logger.info("Email verified for user %s", user.id)
        return UserProfile.from_entity(user)

    @traced("account.request_password_reset")
    async def request_password_reset(self, email: str) -> None:
        """Email a reset link to a verified user.

        Raises:
            UnknownEmailException: No such user.
            EmailNotVerifiedException: User not verified.
            ResetAlreadyInProgressException: An unexpired reset token exists.
            NotificationDeliveryFailedException: Send failed; token stays.
        """
        user = await self._users.get_by_email((email or "").strip().lower())
        if user is None:
            raise UnknownEmailException()
        if not user.is_email_verified:
            raise EmailNotVerifiedException(UNVERIFIED_RESET_MESSAGE)
        add_span_attributes(user_id=user.id)

        now = self._clock()
        existing = await self._tokens.find_by_user_and_purpose(
            user.id, TokenPurpose.PASSWORD_RESET
        )
        if existing is not None:
            if existing.is_active(now):
                raise ResetAlreadyInProgressException()
            await self._tokens.delete(existing.id)

        token = await self._store_token(user, TokenPurpose.PASSWORD_RESET, now)
        subject, body = self._renderer.password_reset(
            user.name, token, _minutes(self._policy.password_reset_ttl)
        )
        if not await self._notifier.send(user.email, subject, body):
            raise NotificationDeliveryFailedException("Failed to send password reset email")
        logger.info("Password reset requested for user %s", user.id)

    @traced("account.confirm_password_reset")
    async def confirm_password_reset(
        self, token: str, new_password: str, confirm_password: str
    ) -> UserProfile:
        """Set a new password using a reset token, then delete the token.

        Raises:
            PasswordsDoNotMatchException: Checked before anything else.
            InvalidOrExpiredTokenException, TokenExpiredException,
            UserNotFoundException: As for verify_email.
        """
        if new_password != confirm_password:
            raise PasswordsDoNotMatchException()
        now = self._clock()
        user, record = await self._consume_stored_token(
            token, TokenPurpose.PASSWORD_RESET, now, "Reset token has expired"
        )
        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        user.change_password_hash(password_hash, now)
        await self._users.save(user)
        await self._tokens.delete(record.id)
        logger.info("Password reset completed for user %s", user.id)
        return UserProfile.from_entity(user)
