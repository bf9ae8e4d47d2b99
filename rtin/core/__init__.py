"""
RTIN core algorithm.

This package provides the triangle hierarchy index, the per-vertex error field
and the threshold-driven mesh extraction.
"""

from .index import TriangleIndex, build_index, validate_grid_size
from .errors import compute_errors
from .extract import Mesh, MeshExtractor, extract_mesh
from .tile import Tile

# Define package exports
__all__ = [
    'TriangleIndex',
    'build_index',
    'validate_grid_size',
    'compute_errors',
    'Mesh',
    'MeshExtractor',
    'extract_mesh',
    'Tile'
]
