"""
Tests for password hashing and token generation.
"""

import hashlib

from gatehouse.auth.passwords import ALPHANUMERIC, generate_token, hash_password, verify_password
from gatehouse.config import Settings


class TestHashPassword:
    def test_sha256_matches_stored_format(self):
        digest = hash_password("p", scheme="sha256")
        assert digest == hashlib.sha256(b"p").hexdigest()

    def test_sha256_is_deterministic(self):
        assert hash_password("secret", scheme="sha256") == hash_password("secret", scheme="sha256")

    def test_pbkdf2_is_salted(self):
        a = hash_password("secret", scheme="pbkdf2_sha256")
        b = hash_password("secret", scheme="pbkdf2_sha256")
        assert a != b
        assert a.startswith("pbkdf2_sha256$")

    def test_scheme_and_iterations_come_from_settings(self):
        settings = Settings(password_scheme="pbkdf2_sha256", pbkdf2_iterations=1_000)
        digest = hash_password("secret", settings=settings)
        assert digest.startswith("pbkdf2_sha256$1000$")
        assert verify_password("secret", digest)


class TestVerifyPassword:
    def test_both_schemes_verify(self):
        for scheme in ("sha256", "pbkdf2_sha256"):
            digest = hash_password("secret", scheme=scheme)
            assert verify_password("secret", digest)
            assert not verify_password("Secret", digest)

    def test_missing_or_malformed_digest(self):
        assert not verify_password("secret", None)
        assert not verify_password("secret", "")
        assert not verify_password("secret", "a:b:c")
        assert not verify_password("secret", "pbkdf2_sha256$many$salt$abc")
        assert not verify_password("secret", "pbkdf2_sha256$1000$salt")

    def test_iteration_count_is_read_from_digest(self):
        digest = hash_password("secret", settings=Settings(password_scheme="pbkdf2_sha256", pbkdf2_iterations=1_000))

        # a later change to the configured count does not strand old digests
        rehashed = hash_password("secret", settings=Settings(password_scheme="pbkdf2_sha256", pbkdf2_iterations=2_000))
        assert verify_password("secret", digest)
        assert verify_password("secret", rehashed)


class TestGenerateToken:
    def test_length_and_alphabet(self):
        token = generate_token(64)
        assert len(token) == 64
        assert set(token) <= set(ALPHANUMERIC)

    def test_tokens_differ(self):
        assert generate_token(64) != generate_token(64)

    def test_alphabet_is_62_chars(self):
        assert len(set(ALPHANUMERIC)) == 62
