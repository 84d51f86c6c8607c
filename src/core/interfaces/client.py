"""Contracts of the remote confirmation client.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- Any client library (or a test double) can be plugged in as long as it
  exposes these methods; the core never imports a concrete client.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import Confirmation


@runtime_checkable
class Session(Protocol):
    """Credential bundle owned by an account.

    Design rules:
    - Both expiry checks are pure queries.
    - `refresh_access_token` is async because it talks to the network; it
      raises on failure.
    """

    def is_refresh_token_expired(self) -> bool: ...

    def is_access_token_expired(self) -> bool: ...

    async def refresh_access_token(self) -> None: ...


@runtime_checkable
class Account(Protocol):
    """Remote account with exactly one `Session`."""

    account_name: str
    session: Session

    async def fetch_confirmations(self) -> Sequence[Confirmation] | None:
        """Return pending confirmations in the order chosen by the service."""

        ...

    async def accept_confirmation(self, confirmation: Confirmation) -> bool: ...

    async def deny_confirmation(self, confirmation: Confirmation) -> bool: ...


class ReauthHandler(Protocol):
    """Interactive re-authentication performed by the presentation layer.

    Returns False when the user declines; the cycle is then aborted.
    """

    async def __call__(self, account: Account) -> bool: ...
