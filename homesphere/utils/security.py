import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from homesphere.config import settings
from homesphere.utils.errors import ConfigError


def _secret_key() -> str:
    if not settings.SECRET_KEY:
        raise ConfigError(details="SECRET_KEY is not set")
    return settings.SECRET_KEY


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its bcrypt hash; malformed hashes never match"""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None if it is malformed, forged or expired"""
    secret_key = _secret_key()
    try:
        return jwt.decode(token, secret_key, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def generate_token() -> str:
    """Opaque single-use token for email verification and password reset"""
    return secrets.token_urlsafe(32)
