from __future__ import annotations

import pytest

from rentauth.core.security import hash_password, password_is_set, verify_password


@pytest.mark.parametrize("password", ["secret", "p@ss w0rd", "密码123", "x" * 64])
def test_hash_verifies_original_password(password):
    digest = hash_password(password)

    assert digest.startswith("argon2$")
    assert password not in digest
    assert verify_password(password, digest) is True


def test_other_password_does_not_verify():
    digest = hash_password("secret")

    assert verify_password("Secret", digest) is False
    assert verify_password("", digest) is False


def test_same_password_gets_distinct_salted_digests():
    first = hash_password("secret")
    second = hash_password("secret")

    assert first != second
    assert verify_password("secret", first)
    assert verify_password("secret", second)


@pytest.mark.parametrize("stored", [None, "", "plaintext", "argon2$not-a-real-hash"])
def test_missing_or_malformed_digest_returns_false(stored):
    assert verify_password("secret", stored) is False


def test_password_is_set():
    assert password_is_set(hash_password("secret"))
    assert not password_is_set(None)
    assert not password_is_set("  ")
