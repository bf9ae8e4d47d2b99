"""Utility functions."""

from .logging import StructuredLogger, mesh_logger
from .sample import create_sample_terrain, SAMPLE_PATTERNS

__all__ = [
    'StructuredLogger',
    'mesh_logger',
    'create_sample_terrain',
    'SAMPLE_PATTERNS'
]
