#!/usr/bin/env python3
"""rtin Command-Line Interface"""
import sys
from rich.console import Console

console = Console()

try:
    from rtin.cli.app import app
except ImportError as e:
    console.print(f"[red]Error importing rtin modules: {e}[/red]")
    console.print("[yellow]Make sure rtin is properly installed[/yellow]")
    sys.exit(1)


if __name__ == "__main__":
    app()
