"""
Command line interface: run a model and inspect saved sessions.

Usage:
    modelwalker run <module:factory> <base_dir> [--config config.json]
    modelwalker report <base_dir> --session <id>
    modelwalker trace <base_dir> --session <id> [--format table|timeline]
                      [--element <id> | --failures]
"""

import importlib
import logging
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler
from rich.table import Table

from modelwalker.domain.execution_event import ExecutionEvent, ExecutionEventType
from modelwalker.domain.models import CoverageSummary, MachineConfig, NodeStatus
from modelwalker.infrastructure.persistence import (
    FilesystemExecutionEventStore,
    FilesystemNodeStatusStore,
)
from modelwalker.infrastructure.session import (
    create_machine,
    load_config,
    save_statuses,
)

console = Console()
logger = logging.getLogger("modelwalker")

STATUS_STYLES = {
    NodeStatus.COVERED: "green",
    NodeStatus.NOT_COVERED: "yellow",
    NodeStatus.FAILED: "red",
    NodeStatus.NOT_REACHABLE: "dim",
}

EVENT_SYMBOLS = {
    ExecutionEventType.STEP_PASS: "[+]",
    ExecutionEventType.STEP_FAIL: "[-]",
    ExecutionEventType.RECOVERED: "[~]",
    ExecutionEventType.NOT_REACHABLE: "[x]",
    ExecutionEventType.TERMINATED: "[!]",
    ExecutionEventType.COMPLETED: "[=]",
}


def configure_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Send modelwalker logs to the console, and to a file when given."""
    console_handler = RichHandler(console=console, rich_tracebacks=True)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--log-file", default=None, help="Also write logs to this file")
def main(verbose: bool, log_file: str | None) -> None:
    """Run models and inspect saved model-based test sessions."""
    configure_logging(verbose, log_file)


def _load_object(path: str) -> Any:
    """Resolve 'package.module:attribute'."""
    module_name, _, attribute = path.partition(":")
    if not attribute:
        raise click.BadParameter(f"Expected 'module:attribute', got '{path}'")
    return getattr(importlib.import_module(module_name), attribute)


@main.command()
@click.argument("factory")
@click.argument("base_dir", type=click.Path(file_okay=False))
@click.option("--config", "config_path", default=None, help="JSON machine config")
@click.option(
    "--implementation",
    default=None,
    help="'module:Class' whose methods implement the model elements",
)
def run(
    factory: str, base_dir: str, config_path: str | None, implementation: str | None
) -> None:
    """Build the model returned by FACTORY and traverse it."""
    config = load_config(config_path) if config_path else MachineConfig()
    model = _load_object(factory)()
    test_object = _load_object(implementation)() if implementation else None

    machine = create_machine(
        model,
        config,
        implementation=test_object,
        event_store=FilesystemExecutionEventStore(base_dir),
    )
    logger.info("Running %s with %s", factory, config.strategy)
    result = machine.run(max_steps=config.max_steps)
    save_statuses(
        machine.current_context, FilesystemNodeStatusStore(base_dir), config.session_id
    )

    style = "green" if result.failure == "" else "red"
    console.print(
        f"[{style}]{result.status.value}[/{style}] after {result.steps} steps, "
        f"reachable coverage {result.coverage.reachable_coverage:.0%}"
    )
    if result.failure:
        console.print(f"[red]{escape(result.failure)}[/red]")
        raise SystemExit(1)


@main.command()
@click.argument("base_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--session", "session_id", default="default", help="Session id")
def report(base_dir: str, session_id: str) -> None:
    """Show per-vertex status and coverage of a saved session."""
    store = FilesystemNodeStatusStore(base_dir)
    try:
        snapshot = store.load(session_id)
    except KeyError as e:
        raise click.ClickException(str(e.args[0])) from e

    table = Table(title=f"Session {session_id}")
    table.add_column("Vertex")
    table.add_column("Status")
    for vertex_id, status in sorted(snapshot.items()):
        style = STATUS_STYLES[status]
        table.add_row(vertex_id, f"[{style}]{status.value}[/{style}]")
    console.print(table)

    coverage = CoverageSummary.from_snapshot(snapshot)
    console.print(
        f"Raw coverage: {coverage.raw_coverage:.0%} "
        f"({coverage.covered}/{coverage.total})"
    )
    console.print(
        f"Reachable coverage: {coverage.reachable_coverage:.0%} "
        f"({coverage.not_reachable} not reachable, {coverage.failed} failed)"
    )


@main.command()
@click.argument("base_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--session", "session_id", default="default", help="Session id")
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "timeline"]),
    help="Output format",
)
@click.option("--element", "element_id", default=None, help="Only this element id")
@click.option(
    "--failures", is_flag=True, help="Only the failures, up to the terminating one"
)
def trace(
    base_dir: str,
    session_id: str,
    output_format: str,
    element_id: str | None,
    failures: bool,
) -> None:
    """Show the execution events of a saved session."""
    if failures and element_id:
        raise click.UsageError("--failures and --element cannot be combined")
    store = FilesystemExecutionEventStore(base_dir)
    if failures:
        events = store.get_failure_chain(session_id)
    else:
        events = store.get_events(session_id, element_id=element_id)
    if not events:
        console.print(f"[yellow]No events for session {session_id}[/yellow]")
        return
    if output_format == "timeline":
        format_timeline(events)
    else:
        format_table(events)


def format_table(events: list[ExecutionEvent]) -> None:
    """Format events as a table."""
    table = Table()
    for column in ("#", "Event", "Element", "Came from", "Status", "Details"):
        table.add_column(column)
    for event in events:
        table.add_row(
            str(event.sequence),
            event.event_type.value,
            event.element_name or event.element_id or "-",
            event.last_element_id or "-",
            event.execution_status or "-",
            event.summary[:40],
        )
    console.print(table)


def format_timeline(events: list[ExecutionEvent]) -> None:
    """Format events as a timeline."""
    for event in events:
        timestamp = event.created_at[:19] if event.created_at else "?"
        symbol = EVENT_SYMBOLS.get(event.event_type, "[?]")
        line = f"{timestamp} {symbol} {event.element_name or event.element_id or '-'}"
        if event.summary:
            line += f": {event.summary[:50]}"
        console.print(line, markup=False)


if __name__ == "__main__":
    main()
