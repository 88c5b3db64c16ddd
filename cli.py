#!/usr/bin/env python3
"""
cli.py - Command-line interface for the time tracker

This is the entry point for the application. It defines all the commands
you can run from the terminal.

Every command follows the same pattern: load the whole store from the
JSON file, do one thing to it, print the result, and write the store
back. If anything goes wrong the store is NOT written, the error is
printed as "Application error: ..." and the exit code is 1.

Typer parses the arguments from the type hints; Rich does the printing.
"""

import typer

from rich.console import Console
from rich.markup import escape

# Standard library imports
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

# Our local modules
import config
import session
import store as store_db
from errors import TimeTrackError
from logger import get_logger, setup_logging
from models import Class, Timer, format_duration


# =============================================================================
# APP SETUP
# =============================================================================

app = typer.Typer(
    name="asstime",
    help="Track time spent on each class",
    add_completion=False,
)

# Regular output goes to stdout, errors go to stderr
console = Console()
err_console = Console(stderr=True)

log = get_logger("cli")


@dataclass
class AppState:
    """Options from the top-level callback, shared with every command."""

    data_file: Path
    strict: bool = False
    verbose: bool = False


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def format_time(dt: datetime) -> str:
    """Format a datetime nicely for display."""
    return dt.strftime("%Y-%m-%d %I:%M %p")


def describe(timer: Timer, active: bool = False) -> str:
    """One line for a timer: class, duration, when it started."""
    line = f"[bold]{timer.class_}[/bold]  {timer.render()}"
    if timer.start is not None:
        line += f"  [dim]started {format_time(timer.start)}[/dim]"
    if active:
        line += "  [green](active)[/green]"
    return line


@contextmanager
def open_store(ctx: typer.Context):
    """
    Load the store, hand it to the command, and save it afterwards.

    Any TimeTrackError raised by the load, the command, or the save is
    reported the same way and ends the process with exit code 1. The
    store is only saved if the command finished without an error.

    Logging starts here rather than in the callback, so --list-classes
    and a bare invocation never create the log folder.
    """
    state: AppState = ctx.obj
    try:
        setup_logging(config.log_dir_for(state.data_file), verbose=state.verbose)
    except OSError as exc:
        err_console.print(f"[dim]Logging disabled: {escape(str(exc))}[/dim]", soft_wrap=True)

    try:
        current = store_db.load(state.data_file, strict=state.strict)
        yield current
        store_db.save(current, state.data_file)
    except TimeTrackError as exc:
        log.error("Command %s failed: %s", ctx.info_name, exc)
        err_console.print(f"[red]Application error:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1)


# =============================================================================
# TOP-LEVEL OPTIONS
# =============================================================================

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    list_classes: bool = typer.Option(
        False,
        "--list-classes",
        help="List the classes you can track and exit",
    ),
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file",
        help="Times file to use instead of the default",
        dir_okay=False,
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail on an unreadable times file instead of starting fresh",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Also print log messages to stderr",
    ),
):
    """
    Track time spent on each class.
    """
    ctx.obj = AppState(
        data_file=data_file or config.DATA_FILE,
        strict=strict,
        verbose=verbose,
    )

    if list_classes:
        for class_ in session.list_classes():
            console.print(str(class_))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print("[dim]No command given. Run with --help to see what you can do.[/dim]")


# =============================================================================
# COMMANDS
# =============================================================================

@app.command()
def start(
    ctx: typer.Context,
    class_name: str = typer.Argument(..., metavar="CLASS", help="Class to track (unknown names count as Other)"),
):
    """
    Start tracking time for a class.

    Each class can have one timer running at a time, but different
    classes can run side by side.
    """
    with open_store(ctx) as current:
        timer = session.start(current, Class.parse(class_name))

    console.print(
        f"[green]▶[/green]  Started tracking [bold]{timer.class_}[/bold] "
        f"at {format_time(timer.start)}"
    )


@app.command()
def stop(
    ctx: typer.Context,
    class_name: str = typer.Argument(..., metavar="CLASS", help="Class to stop"),
):
    """
    Stop the timer for a class and save it to the history.
    """
    with open_store(ctx) as current:
        timer = session.stop(current, Class.parse(class_name))
        duration = timer.render()

    console.print(
        f"[red]■[/red]  Stopped [bold]{timer.class_}[/bold] — "
        f"Duration: [bold]{duration}[/bold]"
    )


@app.command()
def cancel(
    ctx: typer.Context,
    class_name: str = typer.Argument(..., metavar="CLASS", help="Class to cancel"),
):
    """
    Cancel the timer for a class without saving it.

    Use this when you started tracking by mistake.
    """
    with open_store(ctx) as current:
        timer = session.cancel(current, Class.parse(class_name))

    console.print(f"[yellow]✗[/yellow]  Cancelled timer for [bold]{timer.class_}[/bold]")


@app.command()
def show(
    ctx: typer.Context,
    class_name: Optional[str] = typer.Option(
        None,
        "--class", "-c",
        help="Only show this class",
    ),
    active_only: bool = typer.Option(
        False,
        "--active-only", "-a",
        help="Only show running timers",
    ),
    previous: Optional[int] = typer.Option(
        None,
        "--previous", "-p",
        min=1,
        help="With --class, how many of the most recent timers to show",
    ),
    total: bool = typer.Option(
        False,
        "--sum", "-s",
        help="Print the total of the latest timer for every class",
    ),
):
    """
    Show timers.

    Without --class, shows the most recent timer for every class, with
    running timers first. With --class, shows that class's running timer
    followed by its most recent finished ones.
    """
    with open_store(ctx) as current:
        if class_name is not None:
            class_ = Class.parse(class_name)
            picked = session.select_class(
                current, class_, previous=previous, active_only=active_only
            )
            lines = [describe(s.timer, s.active) for s in picked]
            if not lines:
                kind = "active timers" if active_only else "timers"
                lines.append(f"[dim]No {kind} found for {class_}[/dim]")
        else:
            picked = session.select_latest(current, active_only=active_only)
            lines = [describe(s.timer, s.active) for s in picked]
            if not lines:
                kind = "active timers" if active_only else "timers"
                lines.append(f"[dim]No {kind} found[/dim]")

        if total:
            lines.append(f"[bold]Total: {format_duration(session.sum_durations(current))}[/bold]")

    for line in lines:
        console.print(line, soft_wrap=True)


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    app()
