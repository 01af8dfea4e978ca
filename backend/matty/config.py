"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./matty.db"
    CURRENT_USER_ID: str = "dev"  # whose membership decides user_status
    DEFAULT_TIMEZONE: str = "UTC"  # IANA tz for event dates
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000"

    class Config:
        env_file = ".env"


settings = Settings()
