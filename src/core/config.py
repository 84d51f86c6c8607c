"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) without leaking them
  into the CLI.
- Lets the sync services and the client loader read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "TRADECONF_"


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "tradeconf"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tradeconf"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tradeconf"
    return Path.home() / ".config" / "tradeconf"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# tradeconf user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class SyncSettings(BaseSettings):
    """Settings of the confirmation sync.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars), no parsing in the core.
    - One config contract for the CLI, the poller and the services.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the per-user config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    account_name: str | None = Field(
        default=None,
        description="Account handed to the client factory when none is given on the CLI.",
    )
    client_factory: str | None = Field(
        default=None,
        description="Import path 'package.module:callable' returning an Account.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for fetch/accept/deny calls (seconds).",
    )
    refresh_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the access-token refresh (seconds).",
    )
    poll_interval_seconds: float = Field(
        default=60.0,
        ge=1,
        description="Interval between timer-triggered loads (seconds).",
    )
    overlap_policy: Literal["queue", "discard"] = Field(
        default="queue",
        description="What to do with a load requested while another is running.",
    )
    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Root log level for the CLI.",
    )
