"""Credential hashing for account passwords and emailed one-time codes."""

import hashlib
import hmac

import bcrypt

DEFAULT_ROUNDS = 12

# Never issued to a user; only compared against on unknown-email logins.
_DUMMY_SECRET = "projectgrid-dummy-password"


def _bcrypt_input(password: str) -> bytes:
    # bcrypt ignores everything past 72 bytes; a hex SHA-256 digest is 64.
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password for storage on the user record."""
    digest = bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=rounds))
    return digest.decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a login attempt with a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            _bcrypt_input(plain_password), hashed_password.encode("ascii")
        )
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


def hash_one_time_code(code: str, key: str) -> str:
    """HMAC-SHA256 of a one-time code, keyed with the application secret."""
    return hmac.new(
        key.encode("utf-8"), code.strip().encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_one_time_code(code: str, code_hash: str, key: str) -> bool:
    return hmac.compare_digest(hash_one_time_code(code, key), code_hash)


class BcryptPasswordHasher:
    """IPasswordHasher backed by bcrypt at a fixed cost factor.

    The cost factor comes from BCRYPT_ROUNDS; tests run with 4. One-time
    codes are keyed with SECRET_KEY.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS, code_key: str = "") -> None:
        self.rounds = rounds
        self._code_key = code_key
        self.dummy_hash = get_password_hash(_DUMMY_SECRET, rounds)

    def hash(self, password: str) -> str:
        return get_password_hash(password, self.rounds)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)

    def hash_code(self, code: str) -> str:
        return hash_one_time_code(code, self._code_key)

    def verify_code(self, code: str, code_hash: str) -> bool:
        return verify_one_time_code(code, code_hash, self._code_key)
