from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: Optional[str] = None  # Checked when a token is issued or verified
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "HomeSphere"
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Listing defaults
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Token lifetimes
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = 24
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # SMTP (fastapi-mail)
    MAIL_SERVER: Optional[str] = None
    MAIL_PORT: int = 587
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[str] = None
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    MAIL_SUPPRESS_SEND: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        frozen = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def mail_configured(self) -> bool:
        """SMTP is usable only when server, sender and credentials are all set"""
        return all([self.MAIL_SERVER, self.MAIL_FROM, self.MAIL_USERNAME, self.MAIL_PASSWORD])


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process"""
    return Settings()


settings = get_settings()
