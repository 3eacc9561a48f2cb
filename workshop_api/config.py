"""
Configuration and settings for the workshop backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "default-secret-change-in-production"


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")

    # Firestore: all collections live under workshops/{subcollection_id}/
    firestore_subcollection_id: Optional[str] = Field(
        default=None, validation_alias="FIRESTORE_SUBCOLLECTION_ID"
    )
    firebase_service_account_path: Optional[str] = Field(
        default=None, validation_alias="FIREBASE_SERVICE_ACCOUNT_PATH"
    )
    gcp_project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "GCP_PROJECT_ID", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"
        ),
    )

    # Admin auth
    admin_password: Optional[str] = Field(default=None, validation_alias="ADMIN_PASSWORD")
    session_secret: str = Field(
        default=DEFAULT_SESSION_SECRET, validation_alias="SESSION_SECRET"
    )
    session_cookie_name: str = Field(
        default="admin-session", validation_alias="SESSION_COOKIE_NAME"
    )

    # HTTP surface
    frontend_url: str = Field(
        default="http://localhost:5173", validation_alias="FRONTEND_URL"
    )
    port: int = Field(default=8080, validation_alias="PORT")
    static_dir: Optional[str] = Field(default=None, validation_alias="STATIC_DIR")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="WORKSHOP_USE_IN_MEMORY_BACKENDS"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
