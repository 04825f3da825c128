from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from homesphere.database.connection import get_db
from homesphere.models.agent import Agent
from homesphere.models.enums import UserRole
from homesphere.models.user import User
from homesphere.utils.errors import AuthError, AuthorizationError
from homesphere.utils.security import decode_access_token

# Missing credentials are reported as 401 by the dependencies below
security = HTTPBearer(auto_error=False)


@dataclass
class AgentUser:
    """
    A user with role AGENT.

    Sign-up creates the role first and the Agent row alongside it, so
    ``profile`` can be missing for accounts created out of band.
    """
    user: User
    profile: Optional[Agent]

    def require_profile(self) -> Agent:
        if self.profile is None:
            raise AuthorizationError("Agent profile not found. Complete agent registration first.")
        return self.profile


async def _load_user(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(
        select(User)
        .options(selectinload(User.agent))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user"""
    if credentials is None:
        raise AuthError("Access token required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid authentication credentials")

    user = await _load_user(session, user_id)
    if not user or not user.is_active:
        raise AuthError("User not found or inactive")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers and bad tokens yield None"""
    if credentials is None:
        return None
    try:
        return await get_current_user(credentials, session)
    except AuthError:
        return None


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == UserRole.ADMIN


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise AuthorizationError("Admin access required")
    return user


async def require_agent(user: User = Depends(get_current_user)) -> AgentUser:
    if user.role != UserRole.AGENT:
        raise AuthorizationError("Agent access required")
    return AgentUser(user=user, profile=user.agent)
