"""
Application configuration using pydantic-settings.
Loads environment variables from the .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from .env"""

    # Database
    database_path: str = "./data/blog.db"

    # Rate limiting (admin writes, requests per minute per IP)
    rate_limit_enabled: bool = True
    admin_write_rate_limit: int = 30

    # Logging
    log_level: str = "INFO"
    log_file: str = "./data/app.log"

    # Security
    cors_origins: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def __init__(self, **kwargs):
        """Validates the write rate limit"""
        super().__init__(**kwargs)

        if self.admin_write_rate_limit < 1:
            raise ValueError(
                f"ADMIN_WRITE_RATE_LIMIT must be a positive number of requests. "
                f"Current value: {self.admin_write_rate_limit}"
            )


# Global settings instance
settings = Settings()
