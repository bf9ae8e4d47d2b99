"""
Threshold-driven mesh extraction.

This module walks the RTIN hierarchy from the two root triangles down, splitting
a triangle only while it is larger than a unit triangle and the error stored at
its hypotenuse midpoint exceeds the requested maximum error. The walk runs
twice: a first pass counts the vertices and triangles and assigns vertex
numbers, a second pass fills output arrays allocated at their exact size.
"""

import logging
import numpy as np
from typing import Any, Dict, List, NamedTuple, Tuple

from .index import TriangleIndex

# Set up logging
logger = logging.getLogger(__name__)


class Mesh(NamedTuple):
    """Extracted mesh in grid space."""

    vertices: np.ndarray
    triangles: np.ndarray

    @property
    def vertex_count(self) -> int:
        """Get the number of vertices in the mesh."""
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        """Get the number of triangles in the mesh."""
        return len(self.triangles)

    def as_dict(self) -> Dict[str, Any]:
        """
        Get the mesh as flat lists, ready for JSON.

        Returns:
            Dictionary with 'vertices' (x0, y0, x1, y1, ...) and
            'triangles' (i0, i1, i2, ...) lists
        """
        return {
            "vertices": self.vertices.ravel().tolist(),
            "triangles": self.triangles.ravel().tolist(),
        }


class MeshExtractor:
    """
    Extract meshes from an error field at any number of thresholds.

    The extractor only reads the index and the error field. Each call to
    :meth:`extract` allocates its own vertex index map, so one extractor can
    serve concurrent extractions.
    """

    def __init__(self, index: TriangleIndex, errors: np.ndarray):
        """
        Initialize the extractor.

        Args:
            index: Triangle index for the grid size
            errors: Error field computed for this index
        """
        errors = np.asarray(errors, dtype=np.float64).reshape(-1)
        if errors.size != index.grid_size * index.grid_size:
            raise ValueError(
                f"Error field of length {errors.size} does not match grid size {index.grid_size}"
            )

        self.index = index
        self.size = index.grid_size
        # Python floats make the per-node lookups cheap during the walk
        self._errors = errors.tolist()

    def _roots(self) -> List[Tuple[int, int, int, int, int, int]]:
        """Corners (ax, ay, bx, by, cx, cy) of the two root triangles."""
        t = self.index.tile_size
        return [
            (0, 0, t, t, t, 0),
            (t, t, 0, 0, 0, t),
        ]

    def _should_split(self, ax, ay, bx, by, cx, cy, max_error) -> bool:
        mx = (ax + bx) >> 1
        my = (ay + by) >> 1
        return abs(ax - cx) + abs(ay - cy) > 1 and self._errors[my * self.size + mx] > max_error

    def _count(self, ax, ay, bx, by, cx, cy, max_error: float,
               indices: List[int], num_vertices: int) -> Tuple[int, int]:
        """
        First pass: number the vertices of the leaf triangles below a triangle.

        Args:
            ax, ay, bx, by, cx, cy: Corners, c being the right angle
            max_error: Maximum allowed error
            indices: Vertex index map of the current extraction (1-based, 0 = unassigned)
            num_vertices: Vertices numbered so far

        Returns:
            Tuple of (vertices numbered so far, leaf triangles below this triangle)
        """
        if self._should_split(ax, ay, bx, by, cx, cy, max_error):
            mx = (ax + bx) >> 1
            my = (ay + by) >> 1
            num_vertices, left = self._count(cx, cy, ax, ay, mx, my, max_error, indices, num_vertices)
            num_vertices, right = self._count(bx, by, cx, cy, mx, my, max_error, indices, num_vertices)
            return num_vertices, left + right

        size = self.size
        for k in (ay * size + ax, by * size + bx, cy * size + cx):
            if indices[k] == 0:
                num_vertices += 1
                indices[k] = num_vertices
        return num_vertices, 1

    def _emit(self, ax, ay, bx, by, cx, cy, max_error: float, indices: List[int],
              vertices: np.ndarray, triangles: np.ndarray, cursor: int) -> int:
        """
        Second pass: write the leaf triangles below a triangle.

        Follows exactly the same decisions as :meth:`_count`, using the vertex
        numbers it assigned.

        Returns:
            Position of the next triangle to write
        """
        if self._should_split(ax, ay, bx, by, cx, cy, max_error):
            mx = (ax + bx) >> 1
            my = (ay + by) >> 1
            cursor = self._emit(cx, cy, ax, ay, mx, my, max_error, indices, vertices, triangles, cursor)
            return self._emit(bx, by, cx, cy, mx, my, max_error, indices, vertices, triangles, cursor)

        size = self.size
        a = indices[ay * size + ax] - 1
        b = indices[by * size + bx] - 1
        c = indices[cy * size + cx] - 1

        vertices[a] = (ax, ay)
        vertices[b] = (bx, by)
        vertices[c] = (cx, cy)

        triangles[cursor] = (a, b, c)
        return cursor + 1

    def extract(self, max_error: float) -> Mesh:
        """
        Extract the mesh for a maximum error.

        A max_error of 0 splits every triangle with a non-zero error down to
        unit triangles; a max_error above every stored error keeps only the
        two root triangles.

        Args:
            max_error: Maximum allowed vertical error

        Returns:
            Mesh with (n, 2) vertex coordinates and (m, 3) triangle indices
        """
        indices = [0] * (self.size * self.size)
        roots = self._roots()

        num_vertices = 0
        num_triangles = 0
        for root in roots:
            num_vertices, added = self._count(*root, max_error, indices, num_vertices)
            num_triangles += added

        dtype = self.index.coords.dtype
        vertices = np.zeros((num_vertices, 2), dtype=dtype)
        triangles = np.zeros((num_triangles, 3), dtype=np.uint32)

        cursor = 0
        for root in roots:
            cursor = self._emit(*root, max_error, indices, vertices, triangles, cursor)

        logger.debug(
            f"Extracted mesh at max_error={max_error}: "
            f"{num_vertices} vertices, {num_triangles} triangles"
        )
        return Mesh(vertices, triangles)


def extract_mesh(index: TriangleIndex, errors: np.ndarray, max_error: float) -> Mesh:
    """
    Extract the mesh of an error field for a maximum error.

    Args:
        index: Triangle index for the grid size
        errors: Error field computed for this index
        max_error: Maximum allowed vertical error

    Returns:
        Mesh with (n, 2) vertex coordinates and (m, 3) triangle indices
    """
    return MeshExtractor(index, errors).extract(max_error)
