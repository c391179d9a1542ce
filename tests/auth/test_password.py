"""Password hashing and strength checks."""

import pytest

from smartcharge.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from smartcharge.errors import InvalidInputError


class TestHashing:
    def test_hash_is_argon2id(self):
        assert hash_password("secret123").startswith("$argon2id$")

    def test_same_password_hashes_differently(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_verify(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_verify_garbage_hash_is_false(self):
        assert not verify_password("secret123", "not-a-hash")

    def test_fresh_hash_needs_no_rehash(self):
        assert not check_needs_rehash(hash_password("secret123"))


class TestStrength:
    def test_six_characters_is_enough(self):
        validate_password_strength("abcdef")

    @pytest.mark.parametrize("password", ["", "     ", "abcde"])
    def test_rejects_short_or_blank(self, password):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength(password)

    def test_rejects_oversized(self):
        with pytest.raises(PasswordStrengthError, match="exceed"):
            validate_password_strength("x" * 129)

    def test_is_invalid_input(self):
        assert issubclass(PasswordStrengthError, InvalidInputError)
