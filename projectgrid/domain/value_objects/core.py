"""Domain value objects for the ProjectGrid application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# Pragmatic shape check; full RFC validation happens at the API edge (EmailStr).
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class EmailAddress:
    """Value object for a case-normalized email address.

    Construct with EmailAddress.parse() to trim and lower-case the input;
    the stored value is what uniqueness is enforced on.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Email must be a non-empty string")
        if self.value != self.value.strip().lower():
            raise ValueError("Email must be normalized (trimmed, lower-case)")
        if not _EMAIL_RE.match(self.value):
            raise ValueError(f"Invalid email address: {self.value!r}")

    @classmethod
    def parse(cls, raw: str) -> "EmailAddress":
        return cls((raw or "").strip().lower())

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value
