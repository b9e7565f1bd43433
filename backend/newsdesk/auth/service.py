"""
Authentication service.

Handles JWT generation/validation, password hashing and user records.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.core.config import settings
from newsdesk.core.models import User
from newsdesk.storage.repositories import UserRepository

logger = logging.getLogger(__name__)


class DuplicateEmailError(ValueError):
    pass


class AuthService:
    """Handles authentication logic."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    # ── Password ──

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")

    @staticmethod
    def verify_password(plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash
            return False

    # ── JWT ──

    @staticmethod
    def create_access_token(user_id: int) -> Tuple[str, int]:
        """Returns (token, expires_in_seconds)."""
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "type": "access",
            "exp": now + expires_delta,
            "iat": now,
        }
        token = jwt.encode(
            payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
        )
        return token, int(expires_delta.total_seconds())

    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        """Decode and validate a JWT. Returns payload or None."""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
            )
            return payload
        except jwt.ExpiredSignatureError:
            logger.debug("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            return None

    # ── Users ──

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.users.get(user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self.users.get_by_email(email)

    async def create_user(
        self,
        user_name: str,
        email: str,
        password: str,
        photo: Optional[str] = None,
    ) -> User:
        """Create a new user. Raises DuplicateEmailError if email is taken."""
        if await self.users.get_by_email(email):
            raise DuplicateEmailError("Email already exists.")

        try:
            user = await self.users.create(
                {
                    "user_name": user_name,
                    "email": email,
                    "password_hash": self.hash_password(password),
                    "photo": photo,
                }
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateEmailError("Email already exists.") from e

        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> Tuple[Optional[User], bool]:
        """Returns (user or None, password matched)."""
        user = await self.users.get_by_email(email)
        if user is None:
            return None, False
        return user, self.verify_password(password, user.password_hash)

    async def update_photo(self, user_id: int, photo: str) -> Optional[User]:
        user = await self.users.update_photo(user_id, photo)
        if user is not None:
            await self.session.commit()
        return user
