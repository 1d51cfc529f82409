"""Signed token issuing and verification (HS256 JWT via python-jose).

Secret, algorithm and clock are injected at construction; nothing here
reads settings. Expiry is checked against the injected clock rather than
jose's own, so tests can move time.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from projectgrid.domain.enums import TokenPurpose
from projectgrid.domain.value_objects.token import (
    TokenClaims,
    TokenFailure,
    TokenFailureReason,
)
from projectgrid.shared.utils.datetime import from_timestamp_utc, to_timestamp, utc_now

_INVALID = TokenFailure(TokenFailureReason.INVALID)
_EXPIRED = TokenFailure(TokenFailureReason.EXPIRED)
_WRONG_PURPOSE = TokenFailure(TokenFailureReason.WRONG_PURPOSE)


class JWTTokenIssuer:
    """Creates and validates tokens carrying {sub, purpose, iat, exp}."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject_user_id: str, purpose: TokenPurpose, ttl: timedelta) -> str:
        """Mint a token for subject_user_id valid for ttl from now.

        Args:
            subject_user_id: User ID placed in the sub claim.
            purpose: Flow the token is valid for.
            ttl: Lifetime; exp = now + ttl in epoch seconds.

        Returns:
            Encoded JWT string.
        """
        if not subject_user_id:
            raise ValueError("subject_user_id must be non-empty")
        issued_at = to_timestamp(self._clock())
        claims: dict[str, Any] = {
            "sub": subject_user_id,
            "purpose": TokenPurpose(purpose).value,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
        }
        return cast(str, jwt.encode(claims, self._secret, algorithm=self._algorithm))

    def verify(
        self, token: str, purpose: TokenPurpose | None = None
    ) -> TokenClaims | TokenFailure:
        """Decode and check a token. Never raises on malformed input.

        Returns:
            TokenClaims on success; TokenFailure(INVALID) for bad signature,
            malformed token or missing/unknown claims; TokenFailure(EXPIRED)
            once the clock reaches exp; TokenFailure(WRONG_PURPOSE) when
            purpose is given and differs from the token's.
        """
        if not isinstance(token, str) or not token:
            return _INVALID
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                # exp is checked against the injected clock below.
                options={"verify_exp": False},
            )
        except JWTError:
            return _INVALID

        subject = payload.get("sub")
        exp = payload.get("exp")
        iat = payload.get("iat", exp)
        if not isinstance(subject, str) or not subject:
            return _INVALID
        if not isinstance(exp, int | float) or not isinstance(iat, int | float):
            return _INVALID
        try:
            token_purpose = TokenPurpose(payload.get("purpose"))
        except ValueError:
            return _INVALID

        if to_timestamp(self._clock()) >= exp:
            return _EXPIRED
        if purpose is not None and token_purpose is not TokenPurpose(purpose):
            return _WRONG_PURPOSE
        return TokenClaims(
            subject=subject,
            purpose=token_purpose,
            issued_at=from_timestamp_utc(iat),
            expires_at=from_timestamp_utc(exp),
        )
