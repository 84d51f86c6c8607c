"""Resolves the remote client from configuration.

Why an import path:
- The wire protocol lives in a separate client library; the CLI only needs a
  callable that builds an `Account` for a given account name.
- Tests and scripts can point it at a fake without touching the core.
"""

from __future__ import annotations

import importlib
from typing import Any, Callable

from core.config import SyncSettings
from core.interfaces.client import Account


class ClientFactoryError(RuntimeError):
    """The configured client factory is missing, not importable or invalid."""


def resolve_factory(path: str) -> Callable[[str], Any]:
    """Import `package.module:callable` and return the callable."""

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ClientFactoryError(f"Expected 'package.module:callable', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ClientFactoryError(f"Cannot import {module_name!r}: {exc}") from exc

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ClientFactoryError(f"{module_name!r} has no attribute {attr!r}") from exc

    if not callable(target):
        raise ClientFactoryError(f"{path!r} is not callable")
    return target


def load_account(
    account_name: str | None = None,
    *,
    settings: SyncSettings | None = None,
    factory_path: str | None = None,
) -> Account:
    """Build the `Account` for `account_name` with the configured factory."""

    settings = settings or SyncSettings()
    path = factory_path or settings.client_factory
    if not path:
        raise ClientFactoryError("No client factory configured (set TRADECONF_CLIENT_FACTORY).")

    name = account_name or settings.account_name
    if not name:
        raise ClientFactoryError("No account name given (set TRADECONF_ACCOUNT_NAME).")

    factory = resolve_factory(path)
    account = factory(name)
    if not isinstance(account, Account):
        raise ClientFactoryError(
            f"{path!r} returned {type(account).__name__}, which does not implement Account"
        )
    return account
