from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, Field
from typing import Optional
from urllib.parse import urlparse

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "University Inventory Portal"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False, description="Enable debug mode (set to false in production)")
    ENVIRONMENT: str = Field(default="production", description="Environment: development, staging, production")

    # Inventory backend
    BACKEND_URL: str = Field(default="http://localhost:5000", description="Origin of the inventory REST backend")
    BACKEND_TIMEOUT: Optional[float] = Field(default=30.0, description="Backend request timeout in seconds (None disables)")

    # JWT
    JWT_SECRET_KEY: str = Field(..., min_length=32, description="JWT secret key (minimum 32 characters)")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"

    # Server
    PORT: int = Field(default=8000, description="Server port")

    # Logging
    LOG_LEVEL: Optional[str] = Field(default=None, description="Root log level (defaults to DEBUG in debug mode, else INFO)")
    LOG_DIR: Optional[str] = Field(default="logs", description="Directory for rotating log files (empty disables file logging)")
    LOG_MAX_BYTES: int = Field(default=10 * 1024 * 1024, description="Size at which a log file rotates")
    LOG_BACKUP_COUNT: int = 5
    BACKEND_LOG_LEVEL: Optional[str] = Field(default=None, description="Level for backend client logging (defaults to LOG_LEVEL)")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator('BACKEND_URL')
    @classmethod
    def validate_backend_url(cls, v: str) -> str:
        """Validate backend URL format."""
        if not v:
            raise ValueError("BACKEND_URL is required")
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("BACKEND_URL must be a valid URL (e.g., http://localhost:5000)")
        if parsed.scheme not in ['http', 'https']:
            raise ValueError("BACKEND_URL must use http or https protocol")
        return v.rstrip("/")

    @field_validator('BACKEND_TIMEOUT')
    @classmethod
    def validate_backend_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("BACKEND_TIMEOUT must be positive")
        return v

    @field_validator('LOG_LEVEL', 'BACKEND_LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> Optional[str]:
        if v and v.strip().upper() not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(LOG_LEVELS)}")
        return v.strip().upper() if v else None

    @field_validator('JWT_SECRET_KEY')
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Validate JWT secret key strength."""
        if not v or len(v) < 32:
            raise ValueError(
                "JWT_SECRET_KEY must be at least 32 characters long. "
                "Generate one using: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )
        return v

    @field_validator('FRONTEND_URL')
    @classmethod
    def validate_frontend_url(cls, v: str) -> str:
        """Validate frontend URL format."""
        if v:
            parsed = urlparse(v)
            if not parsed.scheme or not parsed.netloc:
                raise ValueError("FRONTEND_URL must be a valid URL")
        return v


def validate_settings() -> None:
    """Validate all required settings are present and valid."""
    from app.core.exceptions import ConfigurationError

    try:
        # Re-initialize settings to ensure validation
        global settings
        settings = Settings()
    except Exception as e:
        error_msg = str(e)
        if "required" in error_msg.lower() or "field required" in error_msg.lower():
            missing_field = ""
            for field in ['JWT_SECRET_KEY', 'BACKEND_URL']:
                if field.lower() in error_msg.lower():
                    missing_field = field
                    break

            raise ConfigurationError(
                f"Missing required environment variable: {missing_field or 'See error details'}\n"
                f"Please check your .env file and ensure all required variables are set.\n"
                f"Error: {error_msg}",
                error_code="MISSING_ENV_VAR"
            )
        raise ConfigurationError(
            f"Configuration error: {error_msg}\n"
            f"Please check your .env file configuration.",
            error_code="CONFIG_ERROR"
        )

    if not settings.BACKEND_URL.startswith('https://') and settings.ENVIRONMENT == "production" and not settings.DEBUG:
        from app.core.logging_config import get_logger
        get_logger(__name__).warning("BACKEND_URL does not use HTTPS in production")


# Initialize settings and validate
try:
    settings = Settings()
except Exception:
    # Settings will be validated in main.py startup
    settings = None
