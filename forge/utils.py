"""Shared console helpers for Function Forge.

Progress and diagnostics are printed through module-level Rich consoles:
``console`` for regular progress on stdout and ``err_console`` for error
messages on stderr.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()
err_console = Console(stderr=True)


def print_banner(name: str, template_kind: str) -> None:
    """Print the start-of-run banner."""
    console.print(
        f"[bold bright_cyan]Starting to forge '{escape(name)}' "
        f"with '{escape(template_kind)}' function template...[/bold bright_cyan]"
    )


def print_step(message: str) -> None:
    """Print a progress line for a scaffolding step."""
    console.print(f"[cyan]->[/cyan] {escape(message)}")


def print_command(command_line: str) -> None:
    """Echo an external command before it runs."""
    console.print(f"[dim]$ {escape(command_line)}[/dim]", soft_wrap=True)


def print_tool_output(output: str) -> None:
    """Forward captured external-tool output for progress visibility."""
    if output.strip():
        console.print(escape(output.rstrip("\n")), highlight=False, soft_wrap=True)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_error(message: str) -> None:
    """Print a red error message on stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)


def print_error_details(title: str, details: str) -> None:
    """Print captured diagnostic output of a failed tool on stderr."""
    err_console.print(Panel(escape(details), title=escape(title), border_style="red"))
