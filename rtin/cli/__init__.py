"""Command-line interface for rtin."""

from rtin import __version__

__all__ = ['__version__']
