#!/usr/bin/env python3
"""
UI components for the rtin command-line tools.

This module provides the shared console and helpers for consistent output
across commands.
"""

import logging
from typing import Any, Dict

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

logger = logging.getLogger(__name__)

rtin_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "path": "blue",
    "value": "green",
    "key": "cyan",
})

console = Console(theme=rtin_theme)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[error]Error:[/error] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[warning]Warning:[/warning] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓[/success] {message}")


def print_stats_table(stats: Dict[str, Any], title: str = "Mesh Statistics") -> None:
    """
    Print a dictionary of statistics as a two-column table.

    Args:
        stats: Statistics to display
        title: Table title
    """
    table = Table(title=title)
    table.add_column("Property", style="key")
    table.add_column("Value", style="value")

    for key, value in stats.items():
        if isinstance(value, float):
            value = f"{value:.4f}"
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)
