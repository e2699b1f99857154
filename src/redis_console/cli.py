"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable

import redis
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from redis_console import __version__
from redis_console.config import (
    CONFIG_FILE,
    AppConfig,
    ConnectionConfig,
    ConsoleConfig,
    LoggingConfig,
    load_config,
    save_config,
)
from redis_console.errors import EmptyBatchError
from redis_console.services.redis_client import RedisRunner
from redis_console.session import ConsoleSession
from redis_console.storage.models import ExecutionOutcome
from redis_console.utils.formatting import format_duration, format_outcome_body
from redis_console.utils.system import check_server

app = typer.Typer(
    name="redis-console",
    help="Run batches of Redis commands and print redis-cli style replies.",
    add_completion=False,
)
console = Console()

REPL_HELP = (
    "One line per submission; end a line with \\ to add more commands to the batch.\n"
    "Lines starting with # or // are comments. :history shows past results, "
    ":clear empties them, quit leaves."
)


def _setup_logging(config: AppConfig, verbose: bool = False) -> None:
    log_path = Path(config.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.logging.level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path)),
            *([logging.StreamHandler()] if verbose else []),
        ],
    )


def _print_outcome(outcome: ExecutionOutcome, show_time: bool = False) -> None:
    header = f"> {outcome.command}"
    if show_time:
        stamp = datetime.fromtimestamp(outcome.timestamp).strftime("%H:%M:%S")
        header = f"{header}  ({stamp}, {format_duration(outcome.execution_time_ms)})"
    console.print(header, style="bold blue", markup=False, highlight=False, soft_wrap=True)
    console.print(
        format_outcome_body(outcome),
        style="red" if outcome.failed else None,
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _print_outcomes(outcomes: Iterable[ExecutionOutcome], show_time: bool = False) -> None:
    for outcome in outcomes:
        _print_outcome(outcome, show_time=show_time)


async def _run_once(config: AppConfig, raw_text: str) -> list[ExecutionOutcome]:
    runner = RedisRunner(config)
    session = ConsoleSession(config, runner)
    try:
        return await session.submit(raw_text)
    finally:
        await runner.close()


def _read_submission(prompt: str) -> str:
    """Read one submission; a trailing backslash continues onto the next line."""
    lines: list[str] = []
    line = console.input(escape(prompt))
    while line.rstrip().endswith("\\"):
        lines.append(line.rstrip()[:-1])
        line = console.input("... ")
    lines.append(line)
    return "\n".join(lines)


async def _repl(config: AppConfig) -> None:
    runner = RedisRunner(config)
    session = ConsoleSession(config, runner)
    prompt = f"{session.connection.label}> "
    console.print(f"[bold]Redis Console v{__version__}[/bold] connected to {escape(session.connection.label)}")
    console.print(f"[dim]{escape(REPL_HELP)}[/dim]\n", highlight=False)

    try:
        while True:
            try:
                text = _read_submission(prompt)
            except (EOFError, KeyboardInterrupt):
                console.print("\nBye!")
                break

            stripped = text.strip()
            if not stripped:
                continue
            if stripped.lower() in ("quit", "exit"):
                console.print("Bye!")
                break
            if stripped == ":history":
                if not len(session.history):
                    console.print("[dim]History is empty.[/dim]")
                _print_outcomes(session.history, show_time=True)
                continue
            if stripped == ":clear":
                session.clear()
                console.print("[dim]History cleared.[/dim]")
                continue

            try:
                outcomes = await session.submit(text)
            except EmptyBatchError as e:
                console.print(f"[yellow]{e}[/yellow]")
                continue
            _print_outcomes(outcomes)
    finally:
        await runner.close()


@app.command()
def init() -> None:
    """Interactive setup wizard."""
    console.print(f"\n[bold]Redis Console v{__version__}[/bold]")
    console.print("Interactive Setup\n")

    console.print("[bold]Step 1:[/bold] Server")
    host = typer.prompt("  Host", default="127.0.0.1")
    port = typer.prompt("  Port", default=6379, type=int)

    console.print("\n[bold]Step 2:[/bold] Authentication")
    console.print("  Leave empty if the server does not require a password.")
    username = typer.prompt("  Username", default="", show_default=False)
    password = typer.prompt("  Password", default="", show_default=False, hide_input=True)

    console.print("\n[bold]Step 3:[/bold] Database")
    db = typer.prompt("  DB index", default=0, type=int)
    if db < 0:
        console.print("[red]DB index must be zero or greater.[/red]")
        raise typer.Exit(1)

    connection = ConnectionConfig(host=host, port=port, username=username, password=password, db=db)

    console.print("\n[dim]Checking connection...[/dim]")
    reachable, info = check_server(connection)
    if reachable:
        console.print(f"  Server: [green]{info}[/green]")
    else:
        console.print(f"  [yellow]Warning: {info}[/yellow]")
        console.print("  The configuration is saved anyway; fix it with 'redis-console config'.")

    config = AppConfig(connection=connection, console=ConsoleConfig(), logging=LoggingConfig())
    save_config(config)

    console.print(f"\n[green]Configuration saved to {CONFIG_FILE}[/green]")
    console.print("\nNext steps:")
    console.print("  [bold]redis-console repl[/bold]                Interactive console")
    console.print("  [bold]redis-console exec -f script.redis[/bold] Run a batch from a file\n")


@app.command(name="exec")
def exec_batch(
    text: str = typer.Argument(None, help="Commands, one per line (reads stdin when omitted)"),
    file: Path = typer.Option(None, "--file", "-f", help="Read commands from a file"),
    strict: bool = typer.Option(False, "--strict", help="Exit with status 2 if any command failed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr as well"),
) -> None:
    """Execute a batch of commands and print each result."""
    config = load_config()
    _setup_logging(config, verbose)

    if file is not None:
        if not file.is_file():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        raw_text = file.read_text()
    elif text is not None:
        raw_text = text
    else:
        raw_text = sys.stdin.read()

    try:
        outcomes = asyncio.run(_run_once(config, raw_text))
    except EmptyBatchError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(1)

    _print_outcomes(outcomes)

    if strict and any(o.failed for o in outcomes):
        raise typer.Exit(2)


@app.command()
def repl(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr as well"),
) -> None:
    """Start an interactive console session."""
    config = load_config()
    _setup_logging(config, verbose)
    asyncio.run(_repl(config))


@app.command()
def ping() -> None:
    """Check connectivity to the configured server."""
    config = load_config()
    reachable, info = check_server(config.connection)
    if reachable:
        console.print(f"[green]PONG[/green] {config.connection.label} ({info})")
    else:
        console.print(f"[red]{info}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., connection.port)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    if not CONFIG_FILE.exists():
        console.print("[red]Not configured. Run 'redis-console init'.[/red]")
        raise typer.Exit(1)

    cfg = load_config()

    if key is None:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("connection.host", cfg.connection.host)
        table.add_row("connection.port", str(cfg.connection.port))
        table.add_row("connection.username", cfg.connection.username or "(default)")
        table.add_row("connection.password", "********" if cfg.connection.password else "(not set)")
        table.add_row("connection.db", str(cfg.connection.db))
        table.add_row("connection.ssl", str(cfg.connection.ssl))
        table.add_row("connection.socket_timeout", str(cfg.connection.socket_timeout))
        table.add_row("console.command_timeout", str(cfg.console.command_timeout))
        table.add_row("console.history_limit", str(cfg.console.history_limit or "unbounded"))
        table.add_row("console.safe_mode", str(cfg.console.safe_mode))
        table.add_row("logging.level", cfg.logging.level)
        table.add_row("logging.file", cfg.logging.file)

        console.print(table)
        return

    if value is None:
        console.print("[red]Usage: redis-console config <key> <value>[/red]")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key format: section.key (e.g., connection.port)[/red]")
        raise typer.Exit(1)

    section, attr = parts
    section_map = {"connection": cfg.connection, "console": cfg.console, "logging": cfg.logging}

    if section not in section_map:
        console.print(f"[red]Unknown section: {section}[/red]")
        raise typer.Exit(1)

    obj = section_map[section]
    if not hasattr(obj, attr) or attr.startswith("_"):
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)

    # Type coercion
    current = getattr(obj, attr)
    try:
        if isinstance(current, bool):
            typed_value = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            typed_value = int(value)
        else:
            typed_value = value
    except ValueError:
        console.print(f"[red]Invalid value type for {key}[/red]")
        raise typer.Exit(1)

    setattr(obj, attr, typed_value)
    save_config(cfg)
    shown = "********" if attr == "password" else typed_value
    console.print(f"[green]{key} = {shown}[/green]")


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
) -> None:
    """View console logs."""
    log_path = Path(load_config().logging.file).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    if follow:
        import subprocess

        try:
            subprocess.run(["tail", "-f", "-n", str(lines), str(log_path)])
        except KeyboardInterrupt:
            pass
    else:
        content = log_path.read_text()
        log_lines = content.strip().split("\n")
        for line in log_lines[-lines:]:
            console.print(line, markup=False)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"redis-console v{__version__}")
    console.print(f"redis-py: {redis.__version__}")
    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")


if __name__ == "__main__":
    app()
