"""
Auth Service - registration, login and account token flows
"""
import logging
from datetime import timedelta
from typing import Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from homesphere.config import settings
from homesphere.database.connection import commit_session
from homesphere.models.agent import Agent
from homesphere.models.base import ensure_utc, new_id, utcnow
from homesphere.models.enums import UserRole, VerificationStatus
from homesphere.models.user import User
from homesphere.services import email_service
from homesphere.utils.errors import AuthError, ConflictError, ValidationError, field_error
from homesphere.utils.security import (
    create_access_token,
    generate_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.id, "email": user.email, "role": user.role.value})


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).options(selectinload(User.agent)).where(User.email == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def register_user(session: AsyncSession, data: Dict) -> Tuple[User, str, str]:
    """
    Create a user, plus a PENDING agent profile when registering as an agent.

    Returns the user, its access token and the email verification token.
    """
    email = data["email"].strip().lower()
    role = UserRole(data.get("role") or UserRole.USER.value)

    registration_number = (data.get("registration_number") or "").strip()
    if role == UserRole.AGENT and len(registration_number) < 3:
        raise ValidationError(
            errors=[field_error("registrationNumber", "Registration number is required for agents")]
        )

    if await get_user_by_email(session, email):
        raise ConflictError("User already exists with this email")

    if role == UserRole.AGENT:
        existing = await session.execute(
            select(Agent.id).where(Agent.registration_number == registration_number)
        )
        if existing.scalar_one_or_none():
            raise ConflictError("Registration number already exists")

    verification_token = generate_token()
    user = User(
        id=new_id(),
        email=email,
        hashed_password=get_password_hash(data["password"]),
        first_name=data["first_name"].strip(),
        last_name=data["last_name"].strip(),
        phone=data.get("phone"),
        role=role,
        email_verification_token=verification_token,
        email_verification_expires=utcnow() + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS),
    )
    # Issued before anything is written so a missing SECRET_KEY leaves no record behind
    token = issue_token(user)
    session.add(user)

    if role == UserRole.AGENT:
        years = data.get("years_of_experience")
        session.add(Agent(
            user_id=user.id,
            registration_number=registration_number,
            verification_status=VerificationStatus.PENDING,
            business_name=data.get("business_name"),
            phone=data.get("phone"),
            specialties=[f"{years} years experience"] if years else [],
        ))

    await commit_session(session, "User already exists with this email")
    logger.info(f"Registered {role.value} account {user.id}")
    return user, token, verification_token


async def login_user(session: AsyncSession, email: str, password: str) -> Tuple[User, str]:
    user = await get_user_by_email(session, email)

    # Same message for unknown email and wrong password
    if not user or not verify_password(password, user.hashed_password):
        raise AuthError("Invalid credentials")
    if not user.is_active:
        raise AuthError("Account is deactivated")

    return user, issue_token(user)


async def verify_email(session: AsyncSession, token: str) -> User:
    result = await session.execute(select(User).where(User.email_verification_token == token))
    user = result.scalar_one_or_none()

    expires = ensure_utc(user.email_verification_expires) if user else None
    if not user or not expires or expires < utcnow():
        raise ValidationError("Invalid or expired verification token")

    user.email_verified = True
    user.email_verification_token = None
    user.email_verification_expires = None
    await commit_session(session)
    return user


async def refresh_verification_token(session: AsyncSession, email: str) -> Optional[str]:
    """
    New verification token for an unverified account.

    Returns None for unknown or already verified addresses; callers answer
    the same way in every case.
    """
    user = await get_user_by_email(session, email)
    if not user or user.email_verified:
        return None

    user.email_verification_token = generate_token()
    user.email_verification_expires = utcnow() + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS)
    await commit_session(session)
    return user.email_verification_token


async def request_password_reset(session: AsyncSession, email: str) -> None:
    """Store a reset token and mail it; delivery failure is reported to the caller"""
    user = await get_user_by_email(session, email)
    if not user or not user.is_active:
        logger.info("Password reset requested for unknown or inactive account")
        return

    user.password_reset_token = generate_token()
    user.password_reset_expires = utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    await commit_session(session)

    await email_service.send_password_reset_email(user.email, user.password_reset_token)


async def reset_password(session: AsyncSession, token: str, new_password: str) -> None:
    result = await session.execute(select(User).where(User.password_reset_token == token))
    user = result.scalar_one_or_none()

    expires = ensure_utc(user.password_reset_expires) if user else None
    if not user or not expires or expires < utcnow():
        raise ValidationError("Invalid or expired reset token")

    user.hashed_password = get_password_hash(new_password)
    user.password_reset_token = None
    user.password_reset_expires = None
    await commit_session(session)
    logger.info(f"Password reset for user {user.id}")
