"""
Document Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load .env before settings are read (local development)
load_dotenv()

logger = logging.getLogger(__name__)

MISSING_SERVICE_KEY_MESSAGE = "Server misconfiguration: missing service key"


class ServiceSettings(BaseSettings):
    """
    Document service configuration with validation.

    All settings can be overridden via environment variables.
    Validation happens at startup to fail fast on misconfiguration.
    """

    # === Supabase ===
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Service role key used for privileged storage/database calls"
    )

    # === Storage ===
    documents_bucket: str = Field(
        default="documents",
        description="Storage bucket holding user documents"
    )
    avatars_bucket: str = Field(
        default="avatars",
        description="Storage bucket holding profile photos"
    )
    max_upload_bytes: int = Field(
        default=15 * 1024 * 1024,
        ge=1024,
        le=50 * 1024 * 1024,
        description="Maximum accepted upload size in bytes (1 KiB - 50 MiB)"
    )
    signed_url_ttl_seconds: int = Field(
        default=600,
        ge=60,
        le=86400,
        description="Lifetime of minted signed URLs in seconds (60-86400)"
    )

    # === Runtime ===
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("supabase_url")
    @classmethod
    def validate_url_format(cls, v: Optional[str]) -> Optional[str]:
        """Basic URL format validation."""
        if v is None:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def supabase_configured(self) -> bool:
        """Both the project URL and the service role key are present."""
        return bool(self.supabase_url and self.supabase_service_role_key)

    @property
    def max_upload_megabytes(self) -> int:
        return self.max_upload_bytes // (1024 * 1024)

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.is_production:
            if not self.supabase_url:
                issues.append("CRITICAL: SUPABASE_URL required in production")
            if not self.supabase_service_role_key:
                issues.append("CRITICAL: SUPABASE_SERVICE_ROLE_KEY required in production")
            if self.cors_origins.strip() == "*":
                issues.append("WARNING: CORS_ORIGINS allows any origin")
        elif not self.supabase_service_role_key:
            issues.append("WARNING: SUPABASE_SERVICE_ROLE_KEY not set - document endpoints will answer 500")

        return issues

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        case_sensitive = False  # SUPABASE_URL = supabase_url


@lru_cache()
def get_settings() -> ServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    Use this function to access configuration throughout the app.
    """
    return ServiceSettings()


def validate_config_on_startup() -> None:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    # Log loaded configuration (redact secrets)
    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  supabase_url={settings.supabase_url}")
    logger.info(f"  service_key={'*****' if settings.supabase_service_role_key else 'missing'}")
    logger.info(f"  buckets={settings.documents_bucket},{settings.avatars_bucket}")
    logger.info(f"  max_upload_bytes={settings.max_upload_bytes}")
    logger.info(f"  signed_url_ttl={settings.signed_url_ttl_seconds}s")
