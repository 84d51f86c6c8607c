"""Confirmation load/act orchestration.

One `ConfirmationSync` per account. It runs single-shot load cycles

    IDLE -> CHECKING_SESSION -> {ABORTED | FETCHING_CONFIRMATIONS} -> {DELIVERED | FAILED}

and the accept/deny actions, each of which ends with a fresh load. Every
remote error is converted into a `LoadResult`/`ActionResult` value here; the
presentation layer only ever sees values.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from core.config import SyncSettings
from core.domain.models import (
    ActionKind,
    ActionResult,
    Confirmation,
    FailureKind,
    GuardResult,
    GuardStatus,
    LoadResult,
    LoadTrigger,
    SyncState,
)
from core.interfaces.client import Account, ReauthHandler
from core.services.session_guard import SessionGuard

logger = logging.getLogger(__name__)


@dataclass
class SyncHooks:
    """Optional callbacks for presentation layers (progress, results)."""

    state_changed: Callable[[SyncState], Any] | None = None
    result: Callable[[LoadResult], Any] | None = None
    action: Callable[[ActionResult], Any] | None = None


async def _notify(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    # A broken presentation hook must not cost the caller its result.
    try:
        outcome = callback(*args)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception("Sync hook %r failed", callback)


class ConfirmationSync:
    """Fetch-act-refresh cycle for a single account."""

    def __init__(
        self,
        account: Account,
        *,
        settings: SyncSettings | None = None,
        guard: SessionGuard | None = None,
        reauth_handler: ReauthHandler | None = None,
        hooks: SyncHooks | None = None,
    ) -> None:
        self._account = account
        self._settings = settings or SyncSettings()
        self._guard = guard or SessionGuard(
            refresh_timeout_seconds=self._settings.refresh_timeout_seconds
        )
        self._reauth_handler = reauth_handler
        self._hooks = hooks or SyncHooks()
        self._state = SyncState.IDLE
        self._lock = asyncio.Lock()

    @property
    def account(self) -> Account:
        return self._account

    @property
    def state(self) -> SyncState:
        """State reached by the most recent (or running) cycle."""

        return self._state

    @property
    def is_loading(self) -> bool:
        return self._lock.locked()

    async def load(self, trigger: LoadTrigger = LoadTrigger.MANUAL) -> LoadResult:
        """Run one load cycle and return its result.

        Overlapping loads of the same account are queued behind the running
        one, or discarded with a `SKIPPED` result, per `overlap_policy`.
        The reload that follows an action is always queued.
        """

        discard = self._settings.overlap_policy == "discard" and trigger is not LoadTrigger.POST_ACTION
        if discard and self._lock.locked():
            logger.info(
                "Load for %s discarded (trigger=%s): another load is running",
                self._account.account_name,
                trigger.value,
            )
            return LoadResult.skipped()

        async with self._lock:
            result = await self._run_cycle(trigger)
        await _notify(self._hooks.result, result)
        return result

    async def accept(self, confirmation: Confirmation) -> ActionResult:
        return await self._act(ActionKind.ACCEPT, confirmation)

    async def deny(self, confirmation: Confirmation) -> ActionResult:
        return await self._act(ActionKind.DENY, confirmation)

    async def _set_state(self, state: SyncState) -> None:
        self._state = state
        await _notify(self._hooks.state_changed, state)

    async def _check_session(self) -> GuardResult:
        session = self._account.session
        guard = await self._guard.ensure_valid(session)
        if guard.status is not GuardStatus.NEEDS_REAUTH:
            return guard

        if self._reauth_handler is None:
            return guard

        logger.info("Requesting re-authentication for %s", self._account.account_name)
        try:
            accepted = await self._reauth_handler(self._account)
        except Exception as exc:
            logger.warning("Re-authentication for %s failed: %s", self._account.account_name, exc)
            return guard
        if not accepted:
            logger.info("Re-authentication declined for %s", self._account.account_name)
            return guard

        # Still expired after the prompt means the cycle ends here.
        return await self._guard.ensure_valid(session)

    async def _run_cycle(self, trigger: LoadTrigger) -> LoadResult:
        name = self._account.account_name
        logger.debug("Load cycle for %s started (trigger=%s)", name, trigger.value)

        await self._set_state(SyncState.CHECKING_SESSION)
        guard = await self._check_session()
        if not guard.ready:
            await self._set_state(SyncState.ABORTED)
            logger.warning("Load cycle for %s aborted: %s", name, guard.status.value)
            return LoadResult.aborted(guard)

        await self._set_state(SyncState.FETCHING_CONFIRMATIONS)
        try:
            fetched = await asyncio.wait_for(
                self._account.fetch_confirmations(),
                self._settings.request_timeout_seconds,
            )
            # Clients may hand back raw payloads; a malformed one fails the cycle.
            fetched = tuple(
                entry if isinstance(entry, Confirmation) else Confirmation.model_validate(entry)
                for entry in fetched or ()
            )
        except asyncio.TimeoutError as exc:
            await self._set_state(SyncState.FAILED)
            logger.warning("Fetching confirmations for %s timed out", name)
            return LoadResult.failure(str(exc) or "Request timed out.")
        except Exception as exc:
            await self._set_state(SyncState.FAILED)
            logger.warning("Fetching confirmations for %s failed: %s", name, exc)
            return LoadResult.failure(str(exc) or exc.__class__.__name__)

        await self._set_state(SyncState.DELIVERED)
        if not fetched:
            logger.info("No pending confirmations for %s", name)
            return LoadResult.empty()

        logger.info("Fetched %d confirmation(s) for %s", len(fetched), name)
        return LoadResult.listing(fetched)

    async def _act(self, action: ActionKind, confirmation: Confirmation) -> ActionResult:
        name = self._account.account_name
        call: Callable[[Confirmation], Awaitable[bool]] = (
            self._account.accept_confirmation
            if action is ActionKind.ACCEPT
            else self._account.deny_confirmation
        )

        acknowledged = False
        error: str | None = None
        try:
            acknowledged = bool(
                await asyncio.wait_for(call(confirmation), self._settings.request_timeout_seconds)
            )
        except asyncio.TimeoutError as exc:
            error = str(exc) or "Request timed out."
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__

        if error is not None:
            logger.warning("%s of confirmation %s for %s failed: %s", action.value, confirmation.id, name, error)
        elif not acknowledged:
            logger.info("%s of confirmation %s for %s was not acknowledged", action.value, confirmation.id, name)
        else:
            logger.info("%s of confirmation %s for %s acknowledged", action.value, confirmation.id, name)

        # The server's listing is authoritative: reload whatever the outcome.
        reload = await self.load(LoadTrigger.POST_ACTION)

        outcome = ActionResult(
            action=action,
            confirmation_id=confirmation.id,
            acknowledged=acknowledged,
            reload=reload,
            error=error,
            failure=None if acknowledged else FailureKind.ACTION_FAILED,
        )
        await _notify(self._hooks.action, outcome)
        return outcome
