"""Doctor command for configuration diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from adapters.client_loader import ClientFactoryError, resolve_factory
from core.config import ENV_PREFIX, SyncSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Configuration checks and setup.")

_console = Console()


def _check_factory(path: str | None) -> tuple[bool, str]:
    if not path:
        return False, f"Not set ({ENV_PREFIX}CLIENT_FACTORY)"
    try:
        resolve_factory(path)
    except ClientFactoryError as exc:
        return False, str(exc)
    return True, path


@app.command()
def run() -> None:
    """Show the effective configuration and whether the client factory imports."""

    settings = SyncSettings()

    table = Table(title="tradeconf doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_factory, detail_factory = _check_factory(settings.client_factory)
    table.add_row("Client factory", "OK" if ok_factory else "FAIL", Text(detail_factory))

    if settings.account_name:
        table.add_row("Account", "OK", Text(settings.account_name))
    else:
        table.add_row("Account", "OPTIONAL", "Pass --account on each command")

    table.add_row("Request timeout", "OK", f"{settings.request_timeout_seconds:g}s")
    table.add_row("Refresh timeout", "OK", f"{settings.refresh_timeout_seconds:g}s")
    table.add_row("Poll interval", "OK", f"{settings.poll_interval_seconds:g}s")
    table.add_row("Overlap policy", "OK", settings.overlap_policy)
    table.add_row("User config", "OK", str(get_user_env_file()))

    _console.print(table)

    if not ok_factory:
        raise typer.Exit(code=1)


@app.command(name="set-client")
def set_client(
    factory: str = typer.Argument(..., help="Import path 'package.module:callable'."),
    account: str | None = typer.Option(None, "--account", "-a", help="Default account name."),
) -> None:
    """Store the client factory (and default account) in the user config .env."""

    if ":" not in factory:
        raise typer.BadParameter("expected 'package.module:callable'")

    env_path = write_user_env_vars(
        {
            f"{ENV_PREFIX}CLIENT_FACTORY": factory,
            f"{ENV_PREFIX}ACCOUNT_NAME": account,
        }
    )
    _console.print(f"[green]Saved client config to:[/green] {env_path}")
