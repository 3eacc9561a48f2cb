"""
Error types shared by the store adapters, services and HTTP layer.

Every `ApiError` is rendered as `{"error": message}` with its status code by
the handlers registered in `workshop_api.app`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised by a DbClient when the backing store operation fails."""


class ApiError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401


class ConfigurationError(ApiError):
    """A required environment value is missing."""

    status_code = 500


class StoreOperationError(ApiError):
    status_code = 500


@contextmanager
def store_operation(message: str) -> Iterator[None]:
    """
    Translate StoreError into a 500 carrying only `message`.

    The underlying exception is logged, never returned to the caller.
    """
    try:
        yield
    except StoreError as e:
        logger.error("%s: %s", message, e)
        raise StoreOperationError(message) from e
