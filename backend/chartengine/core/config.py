"""
Centralized configuration management.

Inference thresholds and HTTP-layer limits are loaded and validated here.
The profiler reads its tunables from these settings unless a caller passes
its own ``Settings`` instance.
"""
import os
import logging
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Engine and API settings with validation."""

    # Profiling
    sample_size: int = Field(default=50, ge=1, le=100000, description="Rows inspected per profiling pass")
    numeric_match_threshold: float = Field(default=0.9, gt=0, le=1, description="Share of values that must parse as numbers")
    date_match_threshold: float = Field(default=1.0, gt=0, le=1, description="Share of values that must parse as dates")

    # Categorical cardinality: unique count must stay within
    # clamp(sample_len // 2, min, max) and below the percent cap.
    categorical_min_unique: int = Field(default=5, ge=1, description="Lower bound of the categorical unique-count cap")
    categorical_max_unique: int = Field(default=20, ge=1, description="Upper bound of the categorical unique-count cap")
    categorical_max_percent_unique: float = Field(default=50, gt=0, le=100, description="Maximum percent of distinct values")

    # Request limits
    max_rows_per_request: int = Field(default=100000, ge=1, le=10000000, description="Maximum rows accepted per request")
    rate_limit_per_minute: int = Field(default=60, ge=1, le=10000, description="Rate limit per minute per IP")
    request_timeout_seconds: int = Field(default=30, ge=1, le=3600, description="Request timeout in seconds")

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="'text' or 'json'")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError(f"LOG_FORMAT must be 'text' or 'json', got '{v}'")
        return v.lower()

    @model_validator(mode="after")
    def validate_categorical_bounds(self) -> "Settings":
        if self.categorical_min_unique > self.categorical_max_unique:
            raise ValueError(
                "categorical_min_unique must not exceed categorical_max_unique "
                f"({self.categorical_min_unique} > {self.categorical_max_unique})"
            )
        return self

    def categorical_unique_cap(self, sample_length: int) -> int:
        """Unique-value cap for a sample of ``sample_length`` rows."""
        return min(self.categorical_max_unique, max(self.categorical_min_unique, sample_length // 2))

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            sample_size=int(os.getenv("SAMPLE_SIZE", "50")),
            numeric_match_threshold=float(os.getenv("NUMERIC_MATCH_THRESHOLD", "0.9")),
            date_match_threshold=float(os.getenv("DATE_MATCH_THRESHOLD", "1.0")),
            categorical_min_unique=int(os.getenv("CATEGORICAL_MIN_UNIQUE", "5")),
            categorical_max_unique=int(os.getenv("CATEGORICAL_MAX_UNIQUE", "20")),
            categorical_max_percent_unique=float(os.getenv("CATEGORICAL_MAX_PERCENT_UNIQUE", "50")),
            max_rows_per_request=int(os.getenv("MAX_ROWS_PER_REQUEST", "100000")),
            rate_limit_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
            request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info("Configuration loaded and validated successfully")
    return _settings


def reload_settings() -> Settings:
    """Reload settings (useful for testing)."""
    global _settings
    _settings = None
    return get_settings()
