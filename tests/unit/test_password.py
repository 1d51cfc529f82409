"""Tests for bcrypt password hashing and one-time code digests."""

import hashlib

from projectgrid.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    hash_one_time_code,
    verify_one_time_code,
    verify_password,
)


def test_hash_is_salted_and_verifies() -> None:
    first = get_password_hash("longpassword1", rounds=4)
    second = get_password_hash("longpassword1", rounds=4)
    assert first != second
    assert "longpassword1" not in first
    assert verify_password("longpassword1", first)
    assert not verify_password("longpassword2", first)


def test_rounds_recorded_in_hash() -> None:
    assert get_password_hash("x" * 8, rounds=5).startswith("$2b$05$")


def test_long_passwords_are_not_truncated() -> None:
    base = "p" * 80
    hashed = get_password_hash(base, rounds=4)
    assert not verify_password(base[:72] + "different", hashed)


def test_verify_garbage_hash_is_false() -> None:
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_hasher_dummy_hash_never_matches_real_passwords() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    assert hasher.verify("projectgrid-dummy-password", hasher.dummy_hash)
    assert not hasher.verify("longpassword1", hasher.dummy_hash)
    assert hasher.verify("longpassword1", hasher.hash("longpassword1"))


def test_one_time_code_digest() -> None:
    digest = hash_one_time_code("123456", "k1")
    assert digest != "123456"
    assert len(digest) == 64
    assert verify_one_time_code("123456", digest, "k1")
    assert not verify_one_time_code("654321", digest, "k1")


def test_one_time_code_digest_is_keyed() -> None:
    bare = hashlib.sha256(b"123456").hexdigest()
    digest = hash_one_time_code("123456", "k1")
    assert digest != bare
    assert digest != hash_one_time_code("123456", "k2")
    assert not verify_one_time_code("123456", digest, "k2")


def test_hasher_codes_use_its_key() -> None:
    first = BcryptPasswordHasher(rounds=4, code_key="k1")
    second = BcryptPasswordHasher(rounds=4, code_key="k2")
    code_hash = first.hash_code(" 123456 ")
    assert first.verify_code("123456", code_hash)
    assert not second.verify_code("123456", code_hash)
