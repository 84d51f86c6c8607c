"""Domain models (Pydantic v2 + frozen dataclasses).

Why Pydantic for `Confirmation`:
- Remote clients hand us loosely-typed payloads; validating at the edge keeps
  the orchestration logic free of `None` checks.
- `model_dump(mode="json")` gives a stable export for the CLI.

Note:
- These models describe *what* a load cycle produced, not *how* it was
  fetched. No model here holds a reference to the remote client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

NOTHING_TO_CONFIRM = "Nothing to confirm/cancel"
SESSION_EXPIRED = (
    "Your session has expired. Log in again to refresh the session, "
    "or use the refresh option of the selected account."
)


class Confirmation(BaseModel):
    """Immutable snapshot of one pending action reported by the remote service."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier assigned by the remote service.",
    )
    headline: str = Field(
        default="",
        description="Human-readable headline (e.g. the trade partner).",
    )
    creator: str = Field(
        default="",
        description="Reference to the object that created the confirmation.",
    )
    icon: str | None = Field(
        default=None,
        description="Icon URL, if the remote service provides one.",
    )
    summary: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Ordered summary lines.",
    )
    accept: str = Field(
        default="Accept",
        description="Label for the accept action.",
    )
    cancel: str = Field(
        default="Cancel",
        description="Label for the deny/cancel action.",
    )

    @property
    def summary_text(self) -> str:
        return "\n".join(self.summary)

    @property
    def title(self) -> str:
        """Headline and creator on two lines, as shown next to the icon."""

        return f"{self.headline}\n{self.creator}"


class GuardStatus(str, Enum):
    READY = "ready"
    NEEDS_REAUTH = "needs_reauth"
    REFRESH_FAILED = "refresh_failed"


class FailureKind(str, Enum):
    """Error taxonomy of a load/act cycle."""

    NEEDS_REAUTH = "needs_reauth"
    REFRESH_FAILED = "refresh_failed"
    FETCH_FAILED = "fetch_failed"
    ACTION_FAILED = "action_failed"


class LoadStatus(str, Enum):
    EMPTY = "empty"
    LIST = "list"
    FAILURE = "failure"
    ABORTED = "aborted"
    SKIPPED = "skipped"


class SyncState(str, Enum):
    IDLE = "idle"
    CHECKING_SESSION = "checking_session"
    ABORTED = "aborted"
    FETCHING_CONFIRMATIONS = "fetching_confirmations"
    DELIVERED = "delivered"
    FAILED = "failed"


class LoadTrigger(str, Enum):
    MANUAL = "manual"
    TIMER = "timer"
    POST_ACTION = "post_action"


class ActionKind(str, Enum):
    ACCEPT = "accept"
    DENY = "deny"


@dataclass(frozen=True)
class GuardResult:
    """Outcome of `SessionGuard.ensure_valid`."""

    status: GuardStatus
    message: str | None = None

    @property
    def ready(self) -> bool:
        return self.status is GuardStatus.READY

    @classmethod
    def make_ready(cls) -> "GuardResult":
        return cls(status=GuardStatus.READY)

    @classmethod
    def needs_reauth(cls) -> "GuardResult":
        return cls(status=GuardStatus.NEEDS_REAUTH, message=SESSION_EXPIRED)

    @classmethod
    def refresh_failed(cls, message: str) -> "GuardResult":
        return cls(status=GuardStatus.REFRESH_FAILED, message=message)


@dataclass(frozen=True)
class LoadResult:
    """Value handed to the caller at the end of a load cycle.

    Consumed once; the sync component keeps no copy of it.
    """

    status: LoadStatus
    confirmations: tuple[Confirmation, ...] = ()
    reason: FailureKind | None = None
    message: str | None = None

    @classmethod
    def empty(cls) -> "LoadResult":
        return cls(status=LoadStatus.EMPTY)

    @classmethod
    def listing(cls, confirmations: tuple[Confirmation, ...]) -> "LoadResult":
        return cls(status=LoadStatus.LIST, confirmations=tuple(confirmations))

    @classmethod
    def failure(cls, message: str) -> "LoadResult":
        return cls(status=LoadStatus.FAILURE, reason=FailureKind.FETCH_FAILED, message=message)

    @classmethod
    def aborted(cls, guard: GuardResult) -> "LoadResult":
        reason = (
            FailureKind.NEEDS_REAUTH
            if guard.status is GuardStatus.NEEDS_REAUTH
            else FailureKind.REFRESH_FAILED
        )
        return cls(status=LoadStatus.ABORTED, reason=reason, message=guard.message)

    @classmethod
    def skipped(cls) -> "LoadResult":
        return cls(status=LoadStatus.SKIPPED, message="A load for this account is already running.")

    @property
    def is_terminal(self) -> bool:
        """True when the caller should close or disable its view."""

        return self.status is LoadStatus.ABORTED

    def display_message(self) -> str | None:
        """User-facing text for the non-list outcomes."""

        if self.status is LoadStatus.EMPTY:
            return NOTHING_TO_CONFIRM
        if self.status is LoadStatus.FAILURE:
            return f"Something went wrong:\n{self.message}"
        return self.message


@dataclass(frozen=True)
class ActionResult:
    """Outcome of accept/deny plus the mandatory follow-up load."""

    action: ActionKind
    confirmation_id: str
    acknowledged: bool
    reload: LoadResult
    error: str | None = None
    failure: FailureKind | None = field(default=None)

    @property
    def failed(self) -> bool:
        return self.failure is not None
