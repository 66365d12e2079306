"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Persistence
    database_url: str = Field(
        default="sqlite:///./data/trash.db",
        description="SQLAlchemy URL of the entry database"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )

    # Write retry configuration (SQLite lock contention)
    db_max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of attempts for a locked database write"
    )
    db_retry_min_wait: float = Field(
        default=0.05,
        description="Minimum wait time in seconds between write retries"
    )
    db_retry_max_wait: float = Field(
        default=1.0,
        description="Maximum wait time in seconds between write retries"
    )

    # Photo uploads
    upload_dir: str = Field(
        default="./data/photos",
        description="Directory where uploaded photos are stored"
    )
    max_photo_size_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum accepted photo size in bytes"
    )

    # Hotspot clustering
    hotspot_cell_size: float = Field(
        default=0.01,
        description="Edge of a clustering grid cell in degrees (~1.1 km at the equator)"
    )
    hotspot_radius_m: int = Field(
        default=1000,
        description="Display radius reported for every hotspot, in meters"
    )
    max_hotspots: int = Field(
        default=5,
        description="Number of hotspots returned by the statistics endpoint"
    )

    # Pagination
    default_page_size: int = Field(
        default=100,
        description="Entries per page when no limit is given"
    )
    max_page_size: int = Field(
        default=1000,
        description="Upper bound for the limit query parameter"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_to_file: bool = Field(
        default=True,
        description="Also write logs to a daily rotated file under log_dir"
    )
    log_dir: str = Field(
        default="./logs",
        description="Directory for log files"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether per-client rate limiting is applied"
    )
    rate_limit_requests: int = Field(
        default=10,
        description="Maximum requests per minute per client"
    )
    rate_limit_storage_uri: str = Field(
        default="memory://",
        description="Storage backend for rate limit counters (e.g. redis://host:6379)"
    )

    # Application Settings
    app_name: str = Field(
        default="Litter Log API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    environment: str = Field(
        default="development",
        description="Deployment environment name"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
