"""Typer CLI entrypoint for Gatherer Ingest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import typer
from typer import BadParameter
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository
from .errors import StoreError
from .logging_conf import configure_logging, log_path, tail_log
from .orchestrator import IngestOrchestrator, RunSummary
from .store import CardStore, SQLiteCardStore

app = typer.Typer(
    help="Gatherer card database ingest tool",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    orchestrator: IngestOrchestrator
    store: CardStore


def build_state(verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    repository = ConfigRepository()
    config = repository.load_config()
    store = SQLiteCardStore(repository.resolved_database_path(config))
    orchestrator = IngestOrchestrator(repository, store, config=config)
    return AppState(repository=repository, orchestrator=orchestrator, store=store)


def _get_state(ctx: typer.Context) -> AppState:
    """Build the state on first use so commands that need no store never open one."""

    state = ctx.obj
    if state is None:
        try:
            state = build_state(verbose=ctx.meta.get("verbose", False))
        except StoreError as exc:
            console.print(str(exc), style="red")
            raise typer.Exit(code=1) from exc
        ctx.obj = state
    return state


def parse_identifier_list(value: str) -> list[int]:
    """Parse ``"1, 2,3"`` into positive identifiers, preserving order."""

    identifiers: list[int] = []
    for chunk in value.split(","):
        text = chunk.strip()
        if not text:
            continue
        try:
            identifier = int(text)
        except ValueError as exc:
            raise BadParameter(f"Not a card identifier: {text!r}") from exc
        if identifier < 1:
            raise BadParameter(f"Card identifiers must be positive: {identifier}")
        identifiers.append(identifier)
    if not identifiers:
        raise BadParameter("Provide at least one card identifier, e.g. 1,2,3.")
    return identifiers


def format_elapsed(seconds: float) -> str:
    millis = int(round(seconds * 1000))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def _render_summary(title: str, summary: RunSummary, records_written: int) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Started", summary.started_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"))
    table.add_row("Elapsed", format_elapsed(summary.elapsed_seconds))
    table.add_row("Requested", str(summary.requested))
    table.add_row("Batches", str(summary.batches))
    table.add_row("Parsed", str(summary.parsed))
    table.add_row("Missing", str(summary.missing))
    table.add_row("Failed", str(summary.failed))
    table.add_row("Persist failed", str(summary.persist_failed))
    table.add_row("Records written", str(records_written))
    if summary.cancelled:
        table.add_row("Cancelled", "yes", style="yellow")
    return table


def _confirm_or_exit(state: AppState, yes: bool, prompt: str) -> None:
    if yes:
        return
    if not typer.confirm(prompt, default=False):
        state.store.close()
        console.print("Aborted; nothing was changed.", style="yellow")
        raise typer.Exit(code=0)


def _run(state: AppState, title: str, operation: Callable[[], RunSummary]) -> None:
    try:
        summary = operation()
    except KeyboardInterrupt:
        console.print("Interrupted; workers were asked to stop.", style="yellow")
        raise typer.Exit(code=130)
    finally:
        state.store.close()
    console.print(_render_summary(title, summary, state.orchestrator.records_written))
    if summary.failed or summary.persist_failed:
        console.print(
            f"{summary.failed + summary.persist_failed} card(s) could not be stored; "
            "see logs/error.log.",
            style="red",
        )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    ctx.meta["verbose"] = verbose


@app.command("update-all", help="Re-fetch every card already in the database.")
def update_all(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    state = _get_state(ctx)
    known = state.store.count()
    _confirm_or_exit(state, yes, f"Overwrite all {known} stored cards with fresh data?")
    _run(state, "Update all cards", state.orchestrator.update_known)


@app.command("update-id", help="Re-fetch a single card.")
def update_id(
    ctx: typer.Context,
    identifier: int = typer.Argument(..., min=1, help="Card identifier."),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    state = _get_state(ctx)
    _confirm_or_exit(state, yes, f"Overwrite card {identifier}?")
    _run(state, f"Update card {identifier}", lambda: state.orchestrator.update_identifier(identifier))


@app.command("update-ids", help="Re-fetch a comma separated list of cards.")
def update_ids(
    ctx: typer.Context,
    identifiers: str = typer.Argument(..., help="Comma separated identifiers, e.g. 1,2,3."),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    ids = parse_identifier_list(identifiers)
    state = _get_state(ctx)
    _confirm_or_exit(state, yes, f"Overwrite {len(ids)} card(s)?")
    _run(state, "Update cards", lambda: state.orchestrator.update_identifiers(ids))


@app.command("populate", help="Fetch every card identifier not yet in the database.")
def populate(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    _run(state, "Populate database", state.orchestrator.populate)


@app.command("stats", help="Show the database location and card count.")
def stats(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    try:
        count = state.store.count()
    finally:
        state.store.close()
    table = Table(title="Card database", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")
    table.add_row("Database", str(state.repository.resolved_database_path()))
    table.add_row("Cards", str(count))
    table.add_row("Max identifier", str(state.orchestrator.config.max_identifier))
    console.print(table)


@app.command("log", help="Print the tail of the ingest or error log.")
def show_log(
    errors: bool = typer.Option(False, "--errors", help="Show logs/error.log instead of logs/ingest.log."),
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines to print."),
) -> None:
    path = log_path("error_file" if errors else "ingest_file")
    content = tail_log(path, lines)
    if not content:
        console.print(f"No log entries in {path}.", style="yellow")
        raise typer.Exit(code=0)
    for line in content:
        console.print(line.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
