"""Domain value objects."""

from projectgrid.domain.value_objects.core import EmailAddress
from projectgrid.domain.value_objects.token import (
    TokenClaims,
    TokenFailure,
    TokenFailureReason,
)

__all__ = ["EmailAddress", "TokenClaims", "TokenFailure", "TokenFailureReason"]
