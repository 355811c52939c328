"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Storage settings are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_storage rejects an unknown storage
    backend and an S3 backend without a bucket.
    """

    # App
    app_name: str = "annoflow"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async; empty url disables the SQL engine)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Object storage backing the project data sources
    storage_backend: str = "local"
    storage_root: str = "/var/annoflow/storage"
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None

    # Workflow pipelines
    pipeline_alert_on_rollback_failure: bool = True
    default_annotation_data_source_name: str = "Default Annotation Source"
    default_review_data_source_name: str = "Default Review Source"

    # Management alerts: comma-separated addresses notified on critical alerts
    alert_recipients: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate storage backend selection and its required fields."""
        backend = self.storage_backend.lower()
        if backend not in ("local", "s3"):
            raise ValueError(
                f"storage_backend must be 'local' or 's3', got: {self.storage_backend!r}"
            )
        if backend == "s3" and not self.s3_bucket:
            raise ValueError("S3_BUCKET is required when storage_backend is 's3'.")
        return self

    @property
    def alert_recipient_list(self) -> list[str]:
        """Alert recipients parsed from the comma-separated setting."""
        return [r.strip() for r in self.alert_recipients.split(",") if r.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (call cache_clear() in tests to reload)."""
    return Settings()
