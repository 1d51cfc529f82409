"""Account email templates: template key -> subject/body (Jinja).

Bodies are HTML with autoescaping on; links and codes are passed in the
render context.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, Template

VERIFY_EMAIL = "verify_email"
PASSWORD_RESET = "password_reset"
TWO_FACTOR_CODE = "two_factor_code"

_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    VERIFY_EMAIL: (
        "Verify Your Email - ProjectGrid",
        "<p>Hi {{ name }},</p>"
        "<p>Thanks for signing up for ProjectGrid. Click the link below to verify "
        "your email address:</p>"
        '<p><a href="{{ link }}">Verify Email</a></p>'
        "<p>This link expires in {{ ttl_minutes }} minutes.</p>",
    ),
    PASSWORD_RESET: (
        "Password Reset Request - ProjectGrid",
        "<p>Hi {{ name }},</p>"
        "<p>We received a request to reset your password. Click the link below to "
        "choose a new one:</p>"
        '<p><a href="{{ link }}">Reset Password</a></p>'
        "<p>This link expires in {{ ttl_minutes }} minutes. If you did not request "
        "a reset, you can ignore this email.</p>",
    ),
    TWO_FACTOR_CODE: (
        "Your ProjectGrid verification code",
        "<p>Hi {{ name }},</p>"
        "<p>Your verification code is <strong>{{ code }}</strong>.</p>"
        "<p>It expires in {{ ttl_minutes }} minutes.</p>",
    ),
}


class AccountEmailRenderer:
    """Renders subject and HTML body for account emails from a template key."""

    def __init__(
        self,
        frontend_url: str,
        templates: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        """Initialize with the web client base URL and optional template overrides."""
        self._frontend_url = frontend_url.rstrip("/")
        self._templates = templates or _DEFAULT_TEMPLATES
        self._env = Environment(autoescape=True)
        self._compiled: dict[str, tuple[Template, Template]] = {}
        for key, (sub_str, body_str) in self._templates.items():
            self._compiled[key] = (
                self._env.from_string(sub_str),
                self._env.from_string(body_str),
            )

    def link(self, path: str, token: str) -> str:
        """Web client URL carrying a token, e.g. {frontend}/verify-email?token=..."""
        return f"{self._frontend_url}/{path.lstrip('/')}?token={token}"

    def render(self, template_key: str, **context: Any) -> tuple[str, str]:
        """Render subject and body for the template key. Raises KeyError if key unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown email template: {template_key}")
        subject_tpl, body_tpl = self._compiled[template_key]
        return subject_tpl.render(**context), body_tpl.render(**context)

    def verification(self, name: str, token: str, ttl_minutes: int) -> tuple[str, str]:
        return self.render(
            VERIFY_EMAIL,
            name=name,
            link=self.link("verify-email", token),
            ttl_minutes=ttl_minutes,
        )

    def password_reset(self, name: str, token: str, ttl_minutes: int) -> tuple[str, str]:
        return self.render(
            PASSWORD_RESET,
            name=name,
            link=self.link("reset-password", token),
            ttl_minutes=ttl_minutes,
        )

    def two_factor_code(self, name: str, code: str, ttl_minutes: int) -> tuple[str, str]:
        return self.render(TWO_FACTOR_CODE, name=name, code=code, ttl_minutes=ttl_minutes)
