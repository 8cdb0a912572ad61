"""CLI application for meiliclient."""

import asyncio
import logging
from typing import Annotated, Optional

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from meiliclient import __version__
from meiliclient.client import Client
from meiliclient.config import API_KEY_ENV_VAR, DEFAULT_HOST, HOST_ENV_VAR, ClientConfig
from meiliclient.core.errors import MeiliClientError, TaskTimeoutError
from meiliclient.models.search import SearchResult
from meiliclient.models.settings import Settings
from meiliclient.models.task import Task, TasksSummary, TaskStatus, task_type_name

app = typer.Typer(
    name="meiliclient",
    help="Query and configure a Meilisearch instance.",
    no_args_is_help=True,
)

console = Console()

STATUS_COLORS = {
    TaskStatus.SUCCEEDED: "green",
    TaskStatus.FAILED: "red",
    TaskStatus.PROCESSING: "blue",
    TaskStatus.ENQUEUED: "yellow",
    TaskStatus.CANCELED: "dim",
}

UrlOption = Annotated[
    str,
    typer.Option(
        "--url",
        "-u",
        help="Meilisearch instance URL",
        envvar=HOST_ENV_VAR,
    ),
]
ApiKeyOption = Annotated[
    Optional[str],
    typer.Option(
        "--api-key",
        "-k",
        help="Meilisearch API key",
        envvar=API_KEY_ENV_VAR,
    ),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"meiliclient version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log every request."),
    ] = False,
) -> None:
    """meiliclient - Search and manage a Meilisearch instance from the shell."""
    configure_logging(verbose)


def _client(url: str, api_key: str | None) -> Client:
    return Client(config=ClientConfig(host=url, api_key=api_key))


def _run(coro) -> None:
    """Run a command coroutine, reporting classified errors."""
    try:
        asyncio.run(coro)
    except MeiliClientError as e:
        console.print(f"[red]Error ({e.code}):[/red] {escape(e.message)}")
        if isinstance(e, TaskTimeoutError):
            console.print(
                f"[dim]Task {e.task_uid} is still running; "
                f"resume with 'meiliclient task {e.task_uid} --wait'[/dim]"
            )
        raise typer.Exit(1)


@app.command()
def search(
    index_uid: Annotated[str, typer.Argument(help="Index to search")],
    query: Annotated[
        Optional[str], typer.Argument(help="Search query (omit for placeholder search)")
    ] = None,
    url: UrlOption = DEFAULT_HOST,
    api_key: ApiKeyOption = None,
    filter_expr: Annotated[
        Optional[str],
        typer.Option("--filter", "-f", help="Filter expression"),
    ] = None,
    sort: Annotated[
        Optional[list[str]],
        typer.Option("--sort", "-s", help="Sort expression, e.g. price:asc (repeatable)"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of hits"),
    ] = 20,
    offset: Annotated[
        int,
        typer.Option("--offset", "-o", help="Number of hits to skip"),
    ] = 0,
    raw: Annotated[
        bool,
        typer.Option("--json", help="Print the raw JSON response"),
    ] = False,
) -> None:
    """Search an index."""
    _run(
        _search(url, api_key, index_uid, query, filter_expr, sort, limit, offset, raw)
    )


async def _search(
    url: str,
    api_key: str | None,
    index_uid: str,
    query: str | None,
    filter_expr: str | None,
    sort: list[str] | None,
    limit: int,
    offset: int,
    raw: bool,
) -> None:
    options: dict = {"limit": limit, "offset": offset}
    if filter_expr:
        options["filter"] = filter_expr
    if sort:
        options["sort"] = sort

    async with _client(url, api_key) as client:
        result = await client.index(index_uid).search(query, options)

    if raw:
        console.print_json(
            orjson.dumps(result.model_dump(by_alias=True, mode="json")).decode("utf-8")
        )
        return
    _display_search(result)


def _display_search(result: SearchResult) -> None:
    """Render hits as a table."""
    total = result.nb_hits if result.nb_hits is not None else result.estimated_total_hits
    console.print(
        f"[bold]{len(result.hits)}[/bold] hits"
        + (f" of {total}" if total is not None else "")
        + f" in {result.processing_time_ms}ms"
    )
    if not result.hits:
        console.print("\n[dim]No documents matched.[/dim]")
        return

    columns: list[str] = []
    for document in result.documents:
        for key in document:
            if key not in columns:
                columns.append(key)

    table = Table(show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    for document in result.documents:
        table.add_row(*(_cell(document.get(column)) for column in columns))
    console.print(table)


def _cell(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, (dict, list)):
        return escape(orjson.dumps(value).decode("utf-8"))
    return escape(str(value))


@app.command()
def settings(
    index_uid: Annotated[str, typer.Argument(help="Index whose settings to show")],
    url: UrlOption = DEFAULT_HOST,
    api_key: ApiKeyOption = None,
) -> None:
    """Display the settings of an index."""
    _run(_settings(url, api_key, index_uid))


async def _settings(url: str, api_key: str | None, index_uid: str) -> None:
    async with _client(url, api_key) as client:
        index_settings = await client.index(index_uid).get_settings()
    _display_settings(index_uid, index_settings)


def _display_settings(index_uid: str, index_settings: Settings) -> None:
    table = Table(title=f"Settings of '{index_uid}'", show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Ranking rules", ", ".join(index_settings.ranking_rules))
    table.add_row("Distinct attribute", index_settings.distinct_attribute or "-")
    for label, selection in (
        ("Searchable attributes", index_settings.searchable_attributes),
        ("Displayed attributes", index_settings.displayed_attributes),
        ("Filterable attributes", index_settings.filterable_attributes),
        ("Sortable attributes", index_settings.sortable_attributes),
    ):
        value = "* (all)" if selection.is_all else ", ".join(selection.names) or "-"
        table.add_row(label, value)
    table.add_row("Stop words", ", ".join(index_settings.stop_words) or "-")
    synonyms = "; ".join(
        f"{term}: {', '.join(values)}"
        for term, values in index_settings.synonyms.items()
    )
    table.add_row("Synonyms", synonyms or "-")
    console.print(table)


@app.command(name="reset-settings")
def reset_settings(
    index_uid: Annotated[str, typer.Argument(help="Index whose settings to reset")],
    url: UrlOption = DEFAULT_HOST,
    api_key: ApiKeyOption = None,
    wait: Annotated[
        bool,
        typer.Option("--wait", "-w", help="Wait for the reset task to finish"),
    ] = False,
    timeout: Annotated[
        float,
        typer.Option("--timeout", "-t", help="Wait deadline in milliseconds"),
    ] = 5000,
) -> None:
    """Reset every setting of an index to its default."""
    _run(_reset_settings(url, api_key, index_uid, wait, timeout))


async def _reset_settings(
    url: str, api_key: str | None, index_uid: str, wait: bool, timeout: float
) -> None:
    async with _client(url, api_key) as client:
        enqueued = await client.index(index_uid).reset_settings()
        console.print(f"Enqueued task [cyan]#{enqueued.uid}[/cyan]")
        if wait:
            task = await client.wait_for_task(enqueued, timeout_ms=timeout)
            _display_task(task)


@app.command()
def task(
    task_uid: Annotated[int, typer.Argument(help="Task UID")],
    url: UrlOption = DEFAULT_HOST,
    api_key: ApiKeyOption = None,
    wait: Annotated[
        bool,
        typer.Option("--wait", "-w", help="Poll until the task finishes"),
    ] = False,
    timeout: Annotated[
        float,
        typer.Option("--timeout", "-t", help="Wait deadline in milliseconds"),
    ] = 5000,
) -> None:
    """Display one task, optionally waiting for it to finish."""
    _run(_task(url, api_key, task_uid, wait, timeout))


async def _task(
    url: str, api_key: str | None, task_uid: int, wait: bool, timeout: float
) -> None:
    async with _client(url, api_key) as client:
        if wait:
            result = await client.wait_for_task(task_uid, timeout_ms=timeout)
        else:
            result = await client.get_task(task_uid)
    _display_task(result)


def _display_task(result: Task) -> None:
    color = STATUS_COLORS.get(result.status, "white")
    lines = [
        f"[bold]Status:[/bold] [{color}]{result.status.value}[/{color}]",
        f"[bold]Type:[/bold] {task_type_name(result.task_type) or '-'}",
        f"[bold]Index:[/bold] {result.index_uid or '-'}",
        f"[bold]Duration:[/bold] {result.format_duration()}",
    ]
    if result.error:
        lines.append(
            f"[bold]Error:[/bold] [red]{result.error.code}[/red] {escape(result.error.message)}"
        )
    console.print(
        Panel("\n".join(lines), title=f"Task #{result.uid}", border_style="blue")
    )


@app.command()
def tasks(
    url: UrlOption = DEFAULT_HOST,
    api_key: ApiKeyOption = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of tasks to display"),
    ] = 20,
    status: Annotated[
        Optional[str],
        typer.Option(
            "--status",
            "-s",
            help="Filter by status (succeeded, failed, processing, enqueued, canceled)",
        ),
    ] = None,
    index_uid: Annotated[
        Optional[str],
        typer.Option("--index", "-i", help="Filter by index UID"),
    ] = None,
) -> None:
    """Display the task queue."""
    _run(_tasks(url, api_key, limit, status, index_uid))


async def _tasks(
    url: str,
    api_key: str | None,
    limit: int,
    status_filter: str | None,
    index_filter: str | None,
) -> None:
    async with _client(url, api_key) as client:
        response = await client.get_tasks()

    all_tasks = response.results
    filtered_tasks = all_tasks
    if status_filter:
        filtered_tasks = [t for t in filtered_tasks if t.status.value == status_filter]
    if index_filter:
        filtered_tasks = [t for t in filtered_tasks if t.index_uid == index_filter]
    display_tasks = filtered_tasks[:limit]

    summary = TasksSummary.from_tasks(all_tasks)
    console.print(
        Panel(
            f"[bold]Total:[/bold] {summary.total}    "
            f"[green]Succeeded:[/green] {summary.succeeded}    "
            f"[red]Failed:[/red] {summary.failed}    "
            f"[blue]Processing:[/blue] {summary.processing}    "
            f"[yellow]Enqueued:[/yellow] {summary.enqueued}\n\n"
            f"[bold]Success Rate:[/bold] {summary.success_rate:.1f}%",
            title="Tasks Summary",
            border_style="blue",
        )
    )

    if not display_tasks:
        console.print("\n[dim]No tasks found matching the filters.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("UID", style="cyan", width=8)
    table.add_column("Status", width=12)
    table.add_column("Type", width=24)
    table.add_column("Index", width=15)
    table.add_column("Duration", width=10)

    for item in display_tasks:
        color = STATUS_COLORS.get(item.status, "white")
        table.add_row(
            str(item.uid),
            f"[{color}]{item.status.value}[/{color}]",
            task_type_name(item.task_type) or "-",
            item.index_uid or "-",
            item.format_duration(),
        )
    console.print(table)


if __name__ == "__main__":
    app()
