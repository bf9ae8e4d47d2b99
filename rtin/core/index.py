"""
Triangle hierarchy index for RTIN meshes.

This module precomputes, once per grid size, the corner coordinates of every
triangle in the implicit binary hierarchy of right isoceles triangles that
tiles a square grid of size 2^n+1. The table depends only on the grid size,
so a single index can be shared by any number of tiles.
"""

import logging
import numpy as np
from typing import List, Tuple

from ..exceptions import InvalidGridSize

# Set up logging
logger = logging.getLogger(__name__)


def _coord_dtype(tile_size: int):
    """Smallest unsigned dtype able to hold coordinates in [0, tile_size]."""
    return np.uint16 if tile_size <= np.iinfo(np.uint16).max else np.uint32


def _build_coords(tile_size: int, num_triangles: int) -> np.ndarray:
    """
    Compute the two stored corners (a, b) of every triangle in the hierarchy.

    Triangle ``i`` is decoded from ``id = i + 2``. The lowest bit of ``id``
    picks one of the two root triangles splitting the square along its main
    diagonal: odd ids start from a=(0,0), b=(t,t), c=(t,0), even ids from
    a=(t,t), b=(0,0), c=(0,t). Each following bit, consumed from the low end
    while ``id > 1``, bisects the hypotenuse of the current triangle:

    - bit set (left half):   new a, b = old c, old a
    - bit clear (right half): new a, b = old b, old c

    and the new c is the midpoint of the old hypotenuse (a, b). All ids are
    decoded at once; rows whose id is exhausted keep their corners.

    Args:
        tile_size: Grid size minus one, a power of two
        num_triangles: Number of triangles in the hierarchy

    Returns:
        Array of shape (num_triangles, 4) holding ax, ay, bx, by
    """
    ids = np.arange(num_triangles, dtype=np.int64) + 2
    odd = (ids & 1) == 1

    ax = np.where(odd, 0, tile_size)
    ay = np.where(odd, 0, tile_size)
    bx = np.where(odd, tile_size, 0)
    by = np.where(odd, tile_size, 0)
    cx = np.where(odd, tile_size, 0)
    cy = np.where(odd, 0, tile_size)

    ids >>= 1
    active = ids > 1
    while active.any():
        mx = (ax + bx) >> 1
        my = (ay + by) >> 1

        left = active & ((ids & 1) == 1)
        right = active & ((ids & 1) == 0)

        new_ax = np.where(left, cx, np.where(right, bx, ax))
        new_ay = np.where(left, cy, np.where(right, by, ay))
        new_bx = np.where(left, ax, np.where(right, cx, bx))
        new_by = np.where(left, ay, np.where(right, cy, by))

        cx = np.where(active, mx, cx)
        cy = np.where(active, my, cy)
        ax, ay, bx, by = new_ax, new_ay, new_bx, new_by

        ids >>= 1
        active = ids > 1

    coords = np.stack([ax, ay, bx, by], axis=1)
    return coords.astype(_coord_dtype(tile_size))


def validate_grid_size(grid_size) -> int:
    """
    Check that a grid size is an integer of the form 2^n+1.

    Returns:
        The tile size, grid_size - 1

    Raises:
        InvalidGridSize: If grid_size - 1 is not a power of two
    """
    if isinstance(grid_size, bool) or not isinstance(grid_size, (int, np.integer)):
        raise InvalidGridSize(grid_size)

    tile_size = int(grid_size) - 1
    if tile_size < 1 or (tile_size & (tile_size - 1)) != 0:
        raise InvalidGridSize(grid_size)
    return tile_size


class TriangleIndex:
    """
    Precomputed coordinate table of the RTIN triangle hierarchy.

    Triangles are identified by an integer id in [0, num_triangles). Lower ids
    are coarser: ids 0 and 1 are the two root triangles, and the ids of each
    deeper level follow those of the level above. Only two corners (a, b) are
    stored per triangle; the right-angle corner c is recovered with
    :meth:`third_corner`.

    The table is immutable once built and can be shared read-only between
    tiles and threads working on the same grid size.
    """

    def __init__(self, grid_size: int):
        """
        Build the index for a grid of ``grid_size`` x ``grid_size`` vertices.

        Args:
            grid_size: Number of vertices along one side, must be 2^n+1

        Raises:
            InvalidGridSize: If grid_size - 1 is not a power of two
        """
        tile_size = validate_grid_size(grid_size)

        self.grid_size = int(grid_size)
        self.tile_size = tile_size
        self.num_triangles = tile_size * tile_size * 2 - 2
        self.num_parent_triangles = self.num_triangles - tile_size * tile_size

        self.coords = _build_coords(tile_size, self.num_triangles)
        self.coords.flags.writeable = False

        logger.debug(
            f"Built triangle index: grid_size={self.grid_size}, "
            f"triangles={self.num_triangles}, parents={self.num_parent_triangles}"
        )

    def __repr__(self) -> str:
        return (
            f"TriangleIndex(grid_size={self.grid_size}, "
            f"num_triangles={self.num_triangles})"
        )

    @property
    def depth(self) -> int:
        """Number of levels stored in the table."""
        return 2 * (self.tile_size.bit_length() - 1)

    def levels(self) -> List[Tuple[int, int]]:
        """
        Get the id range of every level of the hierarchy, coarsest first.

        Level d (1-based) holds the ids whose ``id + 2`` has d+1 significant
        bits, i.e. the half-open range [2^d - 2, 2^(d+1) - 2).

        Returns:
            List of (start, stop) id ranges
        """
        return [
            (2 ** d - 2, min(2 ** (d + 1) - 2, self.num_triangles))
            for d in range(1, self.depth + 1)
        ]

    def is_parent(self, triangle_id: int) -> bool:
        """Check whether a triangle still has children in the table."""
        return triangle_id < self.num_parent_triangles

    @staticmethod
    def third_corner(ax, ay, bx, by):
        """
        Recover the right-angle corner c of a triangle from its stored corners.

        With m the midpoint of the hypotenuse (a, b), c is a rotated by 90
        degrees about m: ``cx = mx + my - ay``, ``cy = my + ax - mx``. Works on
        plain integers and on integer numpy arrays alike.

        Returns:
            Tuple (cx, cy)
        """
        mx = (ax + bx) >> 1
        my = (ay + by) >> 1
        return mx + my - ay, my + ax - mx

    def corners(self, triangle_id: int) -> Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]:
        """
        Get all three corners of a triangle.

        Args:
            triangle_id: Triangle id in [0, num_triangles)

        Returns:
            Tuple of (a, b, c) coordinate pairs
        """
        if not 0 <= triangle_id < self.num_triangles:
            raise IndexError(f"Triangle id {triangle_id} out of range [0, {self.num_triangles})")
        ax, ay, bx, by = (int(v) for v in self.coords[triangle_id])
        cx, cy = self.third_corner(ax, ay, bx, by)
        return (ax, ay), (bx, by), (cx, cy)

    def create_tile(self, terrain):
        """
        Create a tile for a heightfield of this grid size.

        Args:
            terrain: Flat row-major sequence of grid_size**2 elevations

        Returns:
            Tile with its error field computed
        """
        from .tile import Tile
        return Tile(self, terrain)


def build_index(grid_size: int) -> TriangleIndex:
    """
    Build the triangle index for a grid size.

    Args:
        grid_size: Number of vertices along one side, must be 2^n+1

    Returns:
        TriangleIndex for the grid size

    Raises:
        InvalidGridSize: If grid_size - 1 is not a power of two
    """
    return TriangleIndex(grid_size)
