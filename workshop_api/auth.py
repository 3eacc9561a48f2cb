"""
Admin authorization backed by a signed session cookie.

The cookie itself is read and written by Starlette's SessionMiddleware; this
module only wraps the per-request session mapping in an `AdminSession` and
gates protected routes on its flag.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from workshop_api.config import Settings, get_settings
from workshop_api.errors import ConfigurationError, UnauthorizedError

logger = logging.getLogger(__name__)

ADMIN_FLAG = "isAdmin"


class AdminSession:
    """Per-request view over the caller's cookie session."""

    def __init__(self, data: dict):
        self._data = data

    @property
    def is_authorized(self) -> bool:
        return self._data.get(ADMIN_FLAG) is True

    def authorize(self) -> None:
        self._data[ADMIN_FLAG] = True

    def clear(self) -> None:
        self._data.clear()


def get_admin_session(request: Request) -> AdminSession:
    return AdminSession(request.session)


def require_admin(session: AdminSession = Depends(get_admin_session)) -> None:
    """Reject the request with 401 unless the session carries the admin flag."""
    if not session.is_authorized:
        raise UnauthorizedError("Unauthorized")


def login(password: str, session: AdminSession, settings: Settings | None = None) -> None:
    """
    Mark `session` as authorized when `password` matches ADMIN_PASSWORD.

    Raises:
        ConfigurationError: no admin password is configured.
        UnauthorizedError: the password does not match.
    """
    settings = settings or get_settings()
    admin_password = settings.admin_password
    if not admin_password:
        logger.error("Admin login attempted but ADMIN_PASSWORD is not set")
        raise ConfigurationError("Admin password not configured")

    # TODO: compare with hmac.compare_digest if timing attacks enter the threat model.
    if password != admin_password:
        logger.info("Rejected admin login with invalid password")
        raise UnauthorizedError("Invalid password")

    session.authorize()
    logger.info("Admin logged in")


def logout(session: AdminSession) -> None:
    session.clear()
