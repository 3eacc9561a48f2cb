"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from workshop_api.config import get_settings
from workshop_api.db import DbClient, FirestoreDbClient, InMemoryDbClient

_db_client: DbClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client shared across requests.

    Raises ConfigurationError on first use when Firestore is selected but
    FIRESTORE_SUBCOLLECTION_ID is unset.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    else:
        _db_client = FirestoreDbClient(
            settings.firestore_subcollection_id,
            service_account_path=settings.firebase_service_account_path,
            project_id=settings.gcp_project_id,
        )
    return _db_client


def reset_db_client() -> None:
    """Drop the cached client so the next request re-reads settings."""
    global _db_client
    _db_client = None
