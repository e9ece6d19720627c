"""FastAPI dependency injection providers."""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.config import settings
from vibe_awards.core.exceptions import AuthenticationRequiredError, PermissionDeniedError
from vibe_awards.db.session import async_session_factory
from vibe_awards.models.user import User
from vibe_awards.services.auth_service import AuthService, decode_access_token, user_id_from_claims
from vibe_awards.services.identity import ActingIdentity, resolve_identity

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request-scoped usage.

    The session is committed on success or rolled back on error (including
    cancellation). Always closed after the request completes. Handlers that
    mutate state commit explicitly before responding; the commit here then
    has nothing left to do.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()


async def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
) -> Optional[User]:
    if not credentials:
        return None

    user_id = user_id_from_claims(decode_access_token(credentials.credentials))
    if user_id is None:
        return None

    user = await AuthService(db).get_user_by_id(user_id)
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate JWT token, return the authenticated user.

    Raises 401 if token is missing/invalid or user not found.
    """
    user = await _user_from_credentials(credentials, db)
    if user is None:
        raise AuthenticationRequiredError()
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user but returns None instead of raising 401.

    An invalid or expired token is treated the same as no token.
    """
    return await _user_from_credentials(credentials, db)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


def get_client_ip(request: Request) -> Optional[str]:
    """Client address of the request.

    The first X-Forwarded-For entry wins when TRUST_PROXY_HEADERS is set.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    return request.client.host if request.client else None


async def get_acting_identity(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
) -> ActingIdentity:
    """Resolve who is acting: the signed-in user, else the client address."""
    return resolve_identity(user.id if user else None, get_client_ip(request))
