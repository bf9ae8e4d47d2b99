"""
Per-vertex approximation error for RTIN meshes.

Every grid vertex is the hypotenuse midpoint of triangles at exactly one level
of the hierarchy. The error stored for a vertex is the worst vertical error made
by skipping it, folded together with the errors of every finer vertex below it,
so that a single comparison against a threshold decides whether a triangle
needs to be split.
"""

import logging
import numpy as np
from typing import Sequence, Union

from .index import TriangleIndex
from ..exceptions import TerrainLengthMismatch

# Set up logging
logger = logging.getLogger(__name__)


def as_terrain(index: TriangleIndex, terrain: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """
    Validate a heightfield against an index and flatten it to float64.

    Args:
        index: Triangle index the heightfield is meant for
        terrain: Row-major elevations, flat or grid_size x grid_size

    Returns:
        Flat float64 array of length grid_size**2

    Raises:
        TerrainLengthMismatch: If the heightfield does not have grid_size**2 values
    """
    terrain = np.asarray(terrain, dtype=np.float64).reshape(-1)
    expected = index.grid_size * index.grid_size
    if terrain.size != expected:
        raise TerrainLengthMismatch(expected, terrain.size)
    return terrain


def _fold_max(errors: np.ndarray, indices: np.ndarray, values: np.ndarray) -> None:
    """
    Raise errors[indices] to values in place, repeated indices included.

    +Inf wins over NaN, NaN wins over any finite value. Under this order the
    result does not depend on how often or in which order an index is hit.
    """
    nan = np.isnan(errors)
    np.logical_or.at(nan, indices, np.isnan(values))
    np.fmax.at(errors, indices, values)
    errors[nan & ~np.isposinf(errors)] = np.nan


def compute_errors(index: TriangleIndex, terrain: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """
    Compute the error field of a heightfield.

    Levels are processed from the finest to the coarsest so that every child
    triangle is complete before its parent reads it. For each triangle with
    hypotenuse (a, b) and midpoint m, the local error is the distance between
    the actual height at m and the average of the heights at a and b. Parent
    triangles additionally fold in the errors of their children's midpoints,
    which are the midpoints of (a, c) and (b, c).

    NaN elevations are not filtered: they propagate into the errors of the
    vertices that depend on them, except where an infinite error reaches the
    same vertex, in which case the vertex error is +Inf.

    Args:
        index: Triangle index for the grid size
        terrain: Row-major elevations, flat or grid_size x grid_size

    Returns:
        Read-only float64 array of grid_size**2 errors

    Raises:
        TerrainLengthMismatch: If the heightfield does not have grid_size**2 values
    """
    terrain = as_terrain(index, terrain)
    size = index.grid_size

    errors = np.zeros(size * size, dtype=np.float64)
    coords = index.coords.astype(np.int64)

    # Infinite and NaN elevations make invalid operations below
    with np.errstate(invalid="ignore"):
        for start, stop in reversed(index.levels()):
            ax, ay, bx, by = coords[start:stop].T
            mx = (ax + bx) >> 1
            my = (ay + by) >> 1

            interpolated_height = (terrain[ay * size + ax] + terrain[by * size + bx]) / 2
            middle_index = my * size + mx
            middle_error = np.abs(interpolated_height - terrain[middle_index])

            # Triangles sharing a hypotenuse hit the same midpoint
            _fold_max(errors, middle_index, middle_error)

            if start < index.num_parent_triangles:
                cx, cy = index.third_corner(ax, ay, bx, by)
                left_child_index = ((ay + cy) >> 1) * size + ((ax + cx) >> 1)
                right_child_index = ((by + cy) >> 1) * size + ((bx + cx) >> 1)
                # Children belong to finer levels, so both reads see final values
                _fold_max(errors, middle_index, errors[left_child_index])
                _fold_max(errors, middle_index, errors[right_child_index])

    errors.flags.writeable = False

    logger.debug(f"Computed error field: grid_size={size}, max_error={np.nanmax(errors)}")
    return errors
