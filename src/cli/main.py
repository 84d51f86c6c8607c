"""tradeconf command line.

Commands build the configured `Account`, wrap it in a `ConfirmationSync` and
print what the cycle returned. Exit codes: 0 delivered, 1 failure, 2 the
session needs attention (re-authentication or refresh failure).
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from adapters.client_loader import ClientFactoryError, load_account
from adapters.json_exporter import (
    action_result_payload,
    dumps,
    export_load_result_json,
    load_result_payload,
)
from cli import doctor
from cli.ui_components import print_action_result, print_banner, print_load_result
from core.config import SyncSettings
from core.domain.models import ActionKind, LoadResult, LoadStatus
from core.logging_config import configure_logging
from core.services.confirmation_sync import ConfirmationSync
from core.services.poller import poll_confirmations

app = typer.Typer(no_args_is_help=True, help="Trade confirmations: load, accept, deny, watch.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

EXIT_FAILURE = 1
EXIT_SESSION = 2

_ACCOUNT_OPTION = typer.Option(None, "--account", "-a", help="Account name (defaults to config).")
_JSON_OPTION = typer.Option(False, "--json", help="Print JSON instead of tables.")


def _exit_code(result: LoadResult) -> int:
    if result.status is LoadStatus.ABORTED:
        return EXIT_SESSION
    if result.status is LoadStatus.FAILURE:
        return EXIT_FAILURE
    return 0


def _build_sync(account_name: str | None) -> tuple[ConfirmationSync, SyncSettings]:
    settings = SyncSettings()
    configure_logging(settings.log_level)
    try:
        account = load_account(account_name, settings=settings)
    except ClientFactoryError as exc:
        _console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=EXIT_FAILURE) from exc
    return ConfirmationSync(account, settings=settings), settings


@app.command()
def load(
    account: str | None = _ACCOUNT_OPTION,
    as_json: bool = _JSON_OPTION,
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the result as JSON."),
) -> None:
    """Run one load cycle and print the pending confirmations."""

    sync, _ = _build_sync(account)
    result = asyncio.run(sync.load())

    if output is not None:
        export_load_result_json(result=result, output_path=output)
    if as_json:
        typer.echo(dumps(load_result_payload(result)), nl=False)
    else:
        print_banner(_console, sync.account.account_name)
        print_load_result(_console, result)

    raise typer.Exit(code=_exit_code(result))


def _act(action: ActionKind, confirmation_id: str, account: str | None, as_json: bool) -> None:
    sync, _ = _build_sync(account)

    async def _run():
        current = await sync.load()
        if current.status is not LoadStatus.LIST:
            return current, None
        for confirmation in current.confirmations:
            if confirmation.id == confirmation_id:
                if action is ActionKind.ACCEPT:
                    return current, await sync.accept(confirmation)
                return current, await sync.deny(confirmation)
        return current, None

    current, outcome = asyncio.run(_run())

    if outcome is None:
        if current.status is LoadStatus.LIST or current.status is LoadStatus.EMPTY:
            _console.print(f"[red]Confirmation {escape(confirmation_id)} is not pending.[/red]")
            raise typer.Exit(code=EXIT_FAILURE)
        print_load_result(_console, current)
        raise typer.Exit(code=_exit_code(current))

    if as_json:
        typer.echo(dumps(action_result_payload(outcome)), nl=False)
    else:
        print_action_result(_console, outcome)

    if outcome.failed:
        raise typer.Exit(code=EXIT_FAILURE)
    raise typer.Exit(code=_exit_code(outcome.reload))


@app.command()
def accept(
    confirmation_id: str = typer.Argument(..., help="ID from the latest listing."),
    account: str | None = _ACCOUNT_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Accept a pending confirmation, then reload."""

    _act(ActionKind.ACCEPT, confirmation_id, account, as_json)


@app.command()
def deny(
    confirmation_id: str = typer.Argument(..., help="ID from the latest listing."),
    account: str | None = _ACCOUNT_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Deny (cancel) a pending confirmation, then reload."""

    _act(ActionKind.DENY, confirmation_id, account, as_json)


@app.command()
def watch(
    account: str | None = _ACCOUNT_OPTION,
    interval: float | None = typer.Option(None, "--interval", "-i", min=1, help="Seconds between loads."),
    cycles: int | None = typer.Option(None, "--cycles", "-n", min=1, help="Stop after N loads."),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Reload on a timer until interrupted or the session needs attention."""

    sync, settings = _build_sync(account)

    def _show(result: LoadResult) -> None:
        if as_json:
            typer.echo(dumps(load_result_payload(result)), nl=False)
        else:
            print_load_result(_console, result)

    if not as_json:
        print_banner(_console, sync.account.account_name)

    try:
        last = asyncio.run(
            poll_confirmations(
                sync,
                interval=interval or settings.poll_interval_seconds,
                on_result=_show,
                max_cycles=cycles,
            )
        )
    except KeyboardInterrupt:
        raise typer.Exit(code=0)

    if last is not None:
        raise typer.Exit(code=_exit_code(last))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
