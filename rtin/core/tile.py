"""
Tile module pairing a heightfield with its error field.

A tile is built once per heightfield and can then produce meshes at any number
of error thresholds without recomputing the error field.
"""

import time
import logging
import numpy as np
from typing import Any, Dict, Optional, Sequence, Union

from .index import TriangleIndex
from .errors import as_terrain, compute_errors
from .extract import Mesh, MeshExtractor
from ..utils.logging import mesh_logger

# Set up logging
logger = logging.getLogger(__name__)


class Tile:
    """Heightfield of one grid-sized tile together with its error field."""

    def __init__(self, index: TriangleIndex, terrain: Union[Sequence[float], np.ndarray]):
        """
        Initialize the tile and compute its error field.

        Args:
            index: Triangle index for the grid size
            terrain: Row-major elevations, flat or grid_size x grid_size

        Raises:
            TerrainLengthMismatch: If the heightfield does not have grid_size**2 values
        """
        start_time = time.time()

        self.index = index
        self.terrain = as_terrain(index, terrain)
        self.terrain.flags.writeable = False
        self.errors = compute_errors(index, self.terrain)
        self._extractor = MeshExtractor(index, self.errors)

        mesh_logger.info(
            "tile created",
            grid_size=index.grid_size,
            max_error=float(np.nanmax(self.errors)),
            seconds=round(time.time() - start_time, 4),
        )

    @property
    def grid_size(self) -> int:
        return self.index.grid_size

    def get_mesh(self, max_error: float) -> Mesh:
        """
        Extract the mesh of this tile for a maximum error.

        Args:
            max_error: Maximum allowed vertical error

        Returns:
            Mesh with (n, 2) vertex coordinates and (m, 3) triangle indices
        """
        start_time = time.time()
        mesh = self._extractor.extract(max_error)

        mesh_logger.info(
            "mesh extracted",
            grid_size=self.grid_size,
            max_error=max_error,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
            seconds=round(time.time() - start_time, 4),
        )
        return mesh

    def statistics(self, mesh: Mesh, max_error: Optional[float] = None) -> Dict[str, Any]:
        """
        Get statistics about a mesh extracted from this tile.

        Args:
            mesh: Mesh returned by :meth:`get_mesh`
            max_error: Threshold the mesh was extracted with, if known

        Returns:
            Dictionary with statistics
        """
        grid_points = self.grid_size * self.grid_size
        stats = {
            "grid_size": self.grid_size,
            "grid_points": grid_points,
            "max_error": max_error,
            "vertices": mesh.vertex_count,
            "triangles": mesh.triangle_count,
            "max_triangles": self.index.tile_size * self.index.tile_size * 2,
            "vertex_ratio": mesh.vertex_count / grid_points,
        }

        # Input size / output size
        output_size = mesh.vertex_count + mesh.triangle_count * 3
        stats["compression_ratio"] = grid_points / max(1, output_size)
        return stats

    def heights(self, mesh: Mesh) -> np.ndarray:
        """
        Look up the elevation of every mesh vertex.

        Args:
            mesh: Mesh returned by :meth:`get_mesh`

        Returns:
            Float64 array with one elevation per vertex
        """
        x = mesh.vertices[:, 0].astype(np.int64)
        y = mesh.vertices[:, 1].astype(np.int64)
        return self.terrain[y * self.grid_size + x]
