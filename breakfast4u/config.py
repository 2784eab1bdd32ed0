"""
Configuration management for the Breakfast4U marketplace API
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Breakfast4U API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./breakfast4u.db"

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Email (SMTP)
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT: float = 10.0
    EMAIL_FROM_NAME: str = "Breakfast4U"
    ADMIN_EMAIL: str = ""  # receives new contact form notifications

    # Orders
    ORDER_NUMBER_PREFIX: str = "B4U"
    ORDER_NUMBER_MAX_ATTEMPTS: int = 3

    # Store directory "open now" window (local hours, inclusive)
    OPEN_NOW_START_HOUR: int = 6
    OPEN_NOW_END_HOUR: int = 22

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
