"""
RTIN Package.

Right-Triangulated Irregular Network mesh simplification for square
heightfields of size 2^n+1.
"""

__version__ = "0.1.0"

# Import the main exception classes for easy access
from rtin.exceptions import RTINException, InvalidGridSize, TerrainLengthMismatch, HeightmapError

# Import core functionality
from rtin.core import (
    TriangleIndex,
    build_index,
    compute_errors,
    Mesh,
    MeshExtractor,
    extract_mesh,
    Tile,
)
