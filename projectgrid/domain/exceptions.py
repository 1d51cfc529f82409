"""Domain exceptions for the ProjectGrid application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Every exception carries a stable ``kind`` from a small taxonomy
(validation, conflict, auth, not_found, delivery, internal) alongside its
machine-readable ``error_code``.
"""

from typing import Any


class ErrorKind:
    """Stable error categories exposed to API clients."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    DELIVERY = "delivery"
    INTERNAL = "internal"


class ProjectGridException(Exception):
    """Base exception for all ProjectGrid application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, kind and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    kind: str = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API error body."""
        return {
            "error": self.error_code,
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }


# --- validation ---


class ValidationException(ProjectGridException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class PasswordsDoNotMatchException(ProjectGridException):
    """Raised when a new password and its confirmation differ."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self, message: str = "New password and confirm password do not match"
    ) -> None:
        super().__init__(message, "PASSWORDS_DO_NOT_MATCH")


class RegistrationDeniedException(ProjectGridException):
    """Raised when the registration guard refuses a sign-up."""

    kind = ErrorKind.VALIDATION

    def __init__(self, reason: str = "blocked_domain") -> None:
        super().__init__(
            "Registration is not allowed for this email address",
            "REGISTRATION_DENIED",
            {"reason": reason},
        )


# --- conflict ---


class DuplicateEmailException(ProjectGridException):
    """Raised when registering an email that already belongs to a user."""

    kind = ErrorKind.CONFLICT

    def __init__(self) -> None:
        super().__init__("User already exists with this email", "DUPLICATE_EMAIL")


class ResetAlreadyInProgressException(ProjectGridException):
    """Raised when an unexpired password-reset token already exists."""

    kind = ErrorKind.CONFLICT

    def __init__(self) -> None:
        super().__init__(
            "A password reset request is already in progress. Please check your email.",
            "RESET_ALREADY_IN_PROGRESS",
        )


class AlreadyVerifiedException(ProjectGridException):
    """Raised when verifying an email that is already verified."""

    kind = ErrorKind.CONFLICT

    def __init__(self) -> None:
        super().__init__("Email is already verified", "ALREADY_VERIFIED")


# --- auth ---


class AuthenticationException(ProjectGridException):
    """Raised when authentication fails (e.g. missing or invalid bearer token)."""

    kind = ErrorKind.AUTH

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class InvalidCredentialsException(ProjectGridException):
    """Raised on unknown email or wrong password at login."""

    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS")


class EmailNotVerifiedException(ProjectGridException):
    """Raised when a flow requires a verified email address."""

    kind = ErrorKind.AUTH

    def __init__(self, message: str = "Email is not verified") -> None:
        super().__init__(message, "EMAIL_NOT_VERIFIED")


class InvalidOrExpiredTokenException(ProjectGridException):
    """Raised when a signed token fails verification or has no stored record."""

    kind = ErrorKind.AUTH

    def __init__(
        self, message: str = "Invalid or expired token", reason: str | None = None
    ) -> None:
        details = {"reason": reason} if reason else {}
        super().__init__(message, "INVALID_OR_EXPIRED_TOKEN", details)


class TokenExpiredException(ProjectGridException):
    """Raised when a stored verification token is past its expiry."""

    kind = ErrorKind.AUTH

    def __init__(self, message: str = "Verification token has expired") -> None:
        super().__init__(message, "TOKEN_EXPIRED")


class InvalidCurrentPasswordException(ProjectGridException):
    """Raised when a password change supplies the wrong current password."""

    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("Invalid old password", "INVALID_CURRENT_PASSWORD")


class OtpNotRequestedException(ProjectGridException):
    """Raised when verifying a one-time code that was never issued."""

    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("No OTP requested", "OTP_NOT_REQUESTED")


class OtpExpiredException(ProjectGridException):
    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("OTP expired", "OTP_EXPIRED")


class InvalidOtpException(ProjectGridException):
    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("Invalid OTP", "INVALID_OTP")


class AuthorizationException(ProjectGridException):
    """Raised when the user lacks required permissions for the operation."""

    kind = ErrorKind.AUTH

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'workspace', 'project').
            action: Optional action that was attempted (e.g. 'update', 'create').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


# --- not found ---


class ResourceNotFoundException(ProjectGridException):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workspace', 'project').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UserNotFoundException(ProjectGridException):
    """Raised when the user a token or request refers to does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, error_code: str = "USER_NOT_FOUND") -> None:
        super().__init__("User not found", error_code)


class UnknownEmailException(UserNotFoundException):
    """Raised when a password reset is requested for an unregistered email.

    Same kind as UserNotFoundException, but surfaced as a 400 like the
    other reset-request rejections.
    """

    def __init__(self) -> None:
        super().__init__("UNKNOWN_EMAIL")


# --- delivery ---


class NotificationDeliveryFailedException(ProjectGridException):
    """Raised when the mail dispatcher reports a failed send.

    Records persisted before the send are left in place.
    """

    kind = ErrorKind.DELIVERY

    def __init__(self, message: str = "Failed to send email") -> None:
        super().__init__(message, "DELIVERY_FAILED")


# --- internal ---


class StoreUnavailableException(ProjectGridException):
    """Raised when the document store is not configured or unreachable."""

    def __init__(self, message: str = "Database not available") -> None:
        super().__init__(message, "SERVICE_UNAVAILABLE")
