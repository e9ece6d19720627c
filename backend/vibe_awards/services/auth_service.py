"""Authentication service: JWT tokens, password hashing, user management."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.config import settings
from vibe_awards.core.exceptions import ValidationFailedError
from vibe_awards.models.user import User

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SELF_SERVICE_ROLES = ("developer", "voter")


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User) -> str:
    """Create a JWT access token carrying the user's id, uuid, username and role."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "uuid": user.uuid,
        "username": user.username,
        "role": user.role,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT token and return its claims, or None if invalid or expired."""
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None


def user_id_from_claims(claims: Optional[Dict[str, Any]]) -> Optional[int]:
    sub = (claims or {}).get("sub")
    if sub is None or not str(sub).isdigit():
        return None
    return int(sub)


class AuthService:
    """Handles user registration, login, and lookup."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="auth_service")

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        role: str = "developer",
    ) -> User:
        """Register a new user.

        Raises:
            ValidationFailedError: email/username taken or role not allowed
        """
        if role not in SELF_SERVICE_ROLES:
            raise ValidationFailedError("Invalid role")

        stmt = select(User.id).where(or_(User.email == email, User.username == username))
        result = await self.db.execute(stmt)
        if result.first() is not None:
            raise ValidationFailedError("Username or email already exists")

        user = User(
            email=email,
            username=username,
            hashed_password=hash_password(password),
            role=role,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(user)
                await self.db.flush()
        except IntegrityError as exc:
            raise ValidationFailedError("Username or email already exists") from exc

        self.logger.info("user_registered", user_id=user.id, role=role)
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Verify credentials and return user, or None if invalid."""
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            self.logger.info("login_failed", email=email)
            return None

        if not user.is_active:
            return None

        # Update last login
        user.last_login_at = datetime.now(timezone.utc)
        await self.db.flush()
        return user

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Fetch user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
