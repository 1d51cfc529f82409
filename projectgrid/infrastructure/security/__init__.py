"""Security: signed tokens and password hashing."""

from projectgrid.infrastructure.security.jwt import JWTTokenIssuer
from projectgrid.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    hash_one_time_code,
    verify_one_time_code,
    verify_password,
)

__all__ = [
    "BcryptPasswordHasher",
    "JWTTokenIssuer",
    "get_password_hash",
    "hash_one_time_code",
    "verify_one_time_code",
    "verify_password",
]
