"""Session validity checks run before every remote call.

The guard is the only component allowed to mutate a `Session`. On return the
session either holds a valid access token or the caller knows why it cannot.
"""

from __future__ import annotations

import asyncio
import logging

from core.domain.models import GuardResult
from core.interfaces.client import Session

logger = logging.getLogger(__name__)


class SessionGuard:
    """Refresh-token / access-token state machine."""

    def __init__(self, *, refresh_timeout_seconds: float | None = None) -> None:
        self._refresh_timeout = refresh_timeout_seconds

    async def ensure_valid(self, session: Session) -> GuardResult:
        # A dead refresh token never reaches the access-token branch.
        if session.is_refresh_token_expired():
            logger.warning("Refresh token expired; interactive re-authentication required")
            return GuardResult.needs_reauth()

        if session.is_access_token_expired():
            logger.info("Access token expired; refreshing")
            try:
                await asyncio.wait_for(session.refresh_access_token(), self._refresh_timeout)
            except asyncio.TimeoutError as exc:
                logger.warning("Access token refresh timed out after %ss", self._refresh_timeout)
                return GuardResult.refresh_failed(str(exc) or "Access token refresh timed out.")
            except Exception as exc:
                logger.warning("Access token refresh failed: %s", exc)
                return GuardResult.refresh_failed(str(exc) or exc.__class__.__name__)
            logger.info("Access token refreshed")

        return GuardResult.make_ready()
