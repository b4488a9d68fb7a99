"""Output utilities.

The rendered message goes to standard output as plain text so that shell
steps can capture it. Diagnostics go to standard error through rich.
"""

import click
from rich.console import Console
from rich.markup import escape


def emit_message(message: str) -> None:
    """Write the final message followed by a newline to standard output."""
    click.echo(message)


def emit_error(code: str, message: str, hint: str = "") -> None:
    """Emit an error diagnostic on standard error.

    Args:
        code: Machine-readable error code (e.g. INVALID_MAPPING)
        message: Human-readable description
        hint: Optional follow-up suggestion
    """
    console = Console(stderr=True, emoji=False)
    console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)
    if hint:
        console.print(f"[dim]{escape(hint)}[/dim]", soft_wrap=True)
