"""Console components for the CLI (Rich).

Why separate components:
- Keeps command logic free of styling details.
- Lets `load`, `watch` and the action commands share the same tables.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ActionResult, LoadResult, LoadStatus


def print_banner(console: Console, account_name: str) -> None:
    title = Text("Trade Confirmations", style="bold cyan")
    subtitle = Text(account_name, style="dim")
    console.print(Panel(Text.assemble(title, " - ", subtitle), border_style="cyan"))


def build_confirmations_table(result: LoadResult) -> Table:
    table = Table(title="Pending confirmations")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Headline", style="white")
    table.add_column("Summary", style="dim")
    table.add_column("Actions", style="green")
    # Remote text is never parsed as console markup.
    for confirmation in result.confirmations:
        table.add_row(
            Text(confirmation.id),
            Text(confirmation.title),
            Text(confirmation.summary_text),
            Text(f"{confirmation.accept} / {confirmation.cancel}"),
        )
    return table


def print_load_result(console: Console, result: LoadResult) -> None:
    """Print a table for listings, a colored message for everything else."""

    if result.status is LoadStatus.LIST:
        console.print(build_confirmations_table(result))
        return

    message = result.display_message() or result.status.value
    style = {
        LoadStatus.EMPTY: "white",
        LoadStatus.FAILURE: "red",
        LoadStatus.ABORTED: "bold red",
        LoadStatus.SKIPPED: "yellow",
    }.get(result.status, "white")
    console.print(Text(message, style=style))


def print_action_result(console: Console, result: ActionResult) -> None:
    label = escape(f"{result.action.value} {result.confirmation_id}")
    if result.error:
        console.print(f"[red]{label} failed:[/red] {escape(result.error)}")
    elif not result.acknowledged:
        console.print(f"[yellow]{label} was not acknowledged[/yellow]")
    else:
        console.print(f"[green]{label} OK[/green]")
    print_load_result(console, result.reload)
