"""
Tests for the IdentityProvider.

Tests cover:
- Registration rules (password length, duplicate email)
- Login with correct and wrong credentials
- Token validation and logout revocation
"""

import pytest
from jose import jwt

from innercompass.config import settings
from innercompass.errors import AuthError, AuthErrorReason
from innercompass.services.identity import IdentityProvider, hash_password, verify_password


@pytest.fixture
def provider(db_session_factory) -> IdentityProvider:
    return IdentityProvider(db_session_factory)


class TestPasswords:

    @pytest.mark.unit
    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)


class TestRegister:

    @pytest.mark.integration
    async def test_register_returns_identity(self, provider):
        identity = await provider.register("Mei@Example.com ", "secret123", "小美")

        assert identity.email == "mei@example.com"
        assert identity.display_name == "小美"
        assert identity.token

    @pytest.mark.integration
    async def test_short_password_rejected(self, provider):
        with pytest.raises(AuthError) as exc_info:
            await provider.register("mei@example.com", "12345", "小美")

        assert exc_info.value.reason is AuthErrorReason.WEAK_PASSWORD

    @pytest.mark.integration
    async def test_duplicate_email_rejected(self, provider):
        await provider.register("mei@example.com", "secret123", "小美")

        with pytest.raises(AuthError) as exc_info:
            await provider.register("MEI@example.com", "another1", "另一个")

        assert exc_info.value.reason is AuthErrorReason.DUPLICATE_EMAIL
        assert exc_info.value.message == "该邮箱已被注册"

    @pytest.mark.integration
    async def test_blank_display_name_falls_back_to_email(self, provider):
        identity = await provider.register("mei@example.com", "secret123", "  ")

        assert identity.display_name == "mei"


class TestLogin:

    @pytest.mark.integration
    async def test_login_success(self, provider):
        registered = await provider.register("mei@example.com", "secret123", "小美")

        identity = await provider.login("mei@example.com", "secret123")

        assert identity.user_id == registered.user_id

    @pytest.mark.integration
    async def test_wrong_password(self, provider):
        await provider.register("mei@example.com", "secret123", "小美")

        with pytest.raises(AuthError) as exc_info:
            await provider.login("mei@example.com", "nope-nope")

        assert exc_info.value.reason is AuthErrorReason.INVALID_CREDENTIALS

    @pytest.mark.integration
    async def test_unknown_email(self, provider):
        with pytest.raises(AuthError) as exc_info:
            await provider.login("ghost@example.com", "secret123")

        assert exc_info.value.reason is AuthErrorReason.INVALID_CREDENTIALS


class TestTokens:

    @pytest.mark.integration
    async def test_current_identity_from_token(self, provider):
        registered = await provider.register("mei@example.com", "secret123", "小美")

        identity = provider.current_identity(registered.token)

        assert identity == registered

    @pytest.mark.unit
    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    def test_invalid_tokens(self, provider, token):
        assert provider.current_identity(token) is None

    @pytest.mark.unit
    def test_token_signed_with_other_key(self, provider):
        forged = jwt.encode({"sub": "u1", "jti": "x"}, "other-secret", algorithm=settings.auth_algorithm)

        assert provider.current_identity(forged) is None

    @pytest.mark.integration
    async def test_logout_revokes_token(self, provider):
        identity = await provider.register("mei@example.com", "secret123", "小美")

        provider.logout(identity.token)

        assert provider.current_identity(identity.token) is None

    @pytest.mark.integration
    async def test_logout_keeps_other_tokens_valid(self, provider):
        first = await provider.register("mei@example.com", "secret123", "小美")
        second = await provider.login("mei@example.com", "secret123")

        provider.logout(first.token)

        assert provider.current_identity(second.token) is not None


class TestLongPasswords:
    """Passwords longer than bcrypt's 72-byte input limit."""

    @pytest.mark.unit
    def test_hash_accepts_long_multibyte_password(self):
        password = "密" * 30  # 90 bytes in UTF-8

        hashed = hash_password(password)

        assert verify_password(password, hashed)
        assert not verify_password("密" * 29, hashed)

    @pytest.mark.unit
    def test_long_passwords_differing_after_72_bytes(self):
        hashed = hash_password("a" * 72 + "x")

        assert not verify_password("a" * 72 + "y", hashed)

    @pytest.mark.integration
    async def test_register_and_login_with_long_password(self, provider):
        registered = await provider.register("long@example.com", "密" * 30, "L")

        identity = await provider.login("long@example.com", "密" * 30)

        assert identity.user_id == registered.user_id

    @pytest.mark.integration
    async def test_wrong_long_password_is_invalid_credentials(self, provider):
        await provider.register("long@example.com", "密" * 30, "L")

        with pytest.raises(AuthError) as exc_info:
            await provider.login("long@example.com", "码" * 30)

        assert exc_info.value.reason is AuthErrorReason.INVALID_CREDENTIALS
