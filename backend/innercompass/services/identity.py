"""Identity provider: email/password accounts and bearer tokens."""

import base64
import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from innercompass.config import settings
from innercompass.errors import AuthError, AuthErrorReason
from innercompass.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated user plus the token that proves it."""

    user_id: str
    email: str
    display_name: str
    token: str


def _bcrypt_input(password: str) -> bytes:
    # bcrypt only reads 72 bytes; a base64 SHA-256 digest is 44
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_bcrypt_input(password), password_hash.encode("utf-8"))


class IdentityProvider:
    """
    register / login / logout / current_identity.

    Tokens are signed JWTs. Logout revokes a token's ``jti`` for the lifetime
    of the process.
    """

    def __init__(self, db_session_factory: Callable[[], AsyncSession]) -> None:
        self._db_session_factory = db_session_factory
        self._revoked: set[str] = set()

    def _issue_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "name": user.display_name,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(minutes=settings.auth_token_ttl_minutes),
        }
        return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)

    async def register(self, email: str, password: str, display_name: str) -> Identity:
        email = email.strip().lower()
        if len(password) < settings.min_password_length:
            raise AuthError(AuthErrorReason.WEAK_PASSWORD)

        try:
            async with self._db_session_factory() as db:
                existing = await db.execute(select(User).where(User.email == email))
                if existing.scalar_one_or_none() is not None:
                    raise AuthError(AuthErrorReason.DUPLICATE_EMAIL)

                user = User(
                    email=email,
                    display_name=display_name.strip() or email.split("@")[0],
                    password_hash=hash_password(password),
                )
                db.add(user)
                await db.commit()
        except IntegrityError as e:
            # Lost a race with another registration for the same email
            raise AuthError(AuthErrorReason.DUPLICATE_EMAIL) from e
        except SQLAlchemyError as e:
            logger.error(f"[IdentityProvider] Registration failed for {email}: {e}")
            raise AuthError(AuthErrorReason.NETWORK) from e

        logger.info(f"[IdentityProvider] Registered user {user.id}")
        return Identity(user.id, user.email, user.display_name, self._issue_token(user))

    async def login(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        try:
            async with self._db_session_factory() as db:
                result = await db.execute(select(User).where(User.email == email))
                user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"[IdentityProvider] Login lookup failed for {email}: {e}")
            raise AuthError(AuthErrorReason.NETWORK) from e

        if user is None or not verify_password(password, user.password_hash):
            raise AuthError(AuthErrorReason.INVALID_CREDENTIALS)

        logger.info(f"[IdentityProvider] User {user.id} logged in")
        return Identity(user.id, user.email, user.display_name, self._issue_token(user))

    def logout(self, token: str) -> None:
        try:
            claims = jwt.decode(
                token, settings.auth_secret_key, algorithms=[settings.auth_algorithm]
            )
        except JWTError:
            return
        self._revoked.add(claims.get("jti", ""))

    def current_identity(self, token: str | None) -> Identity | None:
        """Validate a token. Returns None when it is missing, invalid, expired or revoked."""
        if not token:
            return None
        try:
            claims = jwt.decode(
                token, settings.auth_secret_key, algorithms=[settings.auth_algorithm]
            )
        except JWTError:
            return None
        if claims.get("jti") in self._revoked:
            return None
        return Identity(
            user_id=claims["sub"],
            email=claims.get("email", ""),
            display_name=claims.get("name", ""),
            token=token,
        )
