"""
Heightmap loading utilities.

Converts terrain-RGB images and numpy arrays into flat row-major heightfields
of size (2^n+1)**2.
"""

import os
import logging
import numpy as np
from typing import Tuple, Union
from PIL import Image

from ..exceptions import HeightmapError

logger = logging.getLogger(__name__)


def _is_power_of_two(n: int) -> bool:
    return n >= 1 and (n & (n - 1)) == 0


def decode_terrain_rgb(rgb: np.ndarray) -> np.ndarray:
    """
    Decode terrain-RGB pixels into elevations.

    Each pixel stores ``(R * 256 * 256 + G * 256 + B) / 10 - 10000``.

    Args:
        rgb: Array of shape (height, width, 3) or (height, width, 4)

    Returns:
        Float64 array of shape (height, width)
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] < 3:
        raise HeightmapError(f"Expected an RGB image array, got shape {rgb.shape}")

    r = rgb[..., 0].astype(np.float64)
    g = rgb[..., 1].astype(np.float64)
    b = rgb[..., 2].astype(np.float64)
    return (r * 256 * 256 + g * 256 + b) / 10.0 - 10000.0


def _backfill(heights: np.ndarray) -> np.ndarray:
    """Grow a tile x tile array to (tile+1) x (tile+1) by repeating the last row and column."""
    tile = heights.shape[0]
    grid = np.zeros((tile + 1, tile + 1), dtype=np.float64)
    grid[:tile, :tile] = heights
    grid[tile, :tile] = grid[tile - 1, :tile]
    grid[:, tile] = grid[:, tile - 1]
    return grid


def terrain_from_array(array: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Turn a square 2D array into a flat heightfield.

    A (2^n+1) x (2^n+1) array is used as is. A 2^n x 2^n array is grown by one
    row and one column, copied from their neighbours.

    Args:
        array: Square 2D array of elevations, indexed [y, x]

    Returns:
        Tuple of (flat float64 heightfield, grid size)

    Raises:
        HeightmapError: If the array is not square or not of a usable size
    """
    array = np.asarray(array, dtype=np.float64)
    if array.ndim != 2 or array.shape[0] != array.shape[1]:
        raise HeightmapError(f"Expected a square 2D heightmap, got shape {array.shape}")

    side = array.shape[0]
    if _is_power_of_two(side - 1):
        grid = array
    elif _is_power_of_two(side) and side > 1:
        grid = _backfill(array)
    else:
        raise HeightmapError(f"Heightmap side must be 2^n or 2^n+1, got {side}")

    logger.debug(f"Heightfield from array: shape={array.shape}, grid_size={grid.shape[0]}")
    return grid.reshape(-1), grid.shape[0]


def load_terrain_rgb(path: Union[str, os.PathLike]) -> Tuple[np.ndarray, int]:
    """
    Load a terrain-RGB PNG tile as a heightfield.

    A 2^n x 2^n image gives a (2^n+1)**2 heightfield; the extra row and
    column repeat the last row and column of the image.

    Args:
        path: Path to the image

    Returns:
        Tuple of (flat float64 heightfield, grid size)

    Raises:
        HeightmapError: If the image cannot be read or has the wrong size
    """
    try:
        with Image.open(path) as image:
            rgb = np.asarray(image.convert("RGB"))
    except (OSError, ValueError) as e:
        raise HeightmapError(f"Failed to read terrain image {path}: {e}") from e

    height, width = rgb.shape[:2]
    if height != width or not _is_power_of_two(width) or width < 2:
        raise HeightmapError(
            f"Terrain image must be square with a power-of-two side, got {width}x{height}"
        )

    grid = _backfill(decode_terrain_rgb(rgb))
    terrain, grid_size = grid.reshape(-1), grid.shape[0]
    logger.info(f"Loaded terrain-RGB image {path}: {width}x{height} -> grid size {grid_size}")
    return terrain, grid_size


def load_heightfield(path: Union[str, os.PathLike]) -> Tuple[np.ndarray, int]:
    """
    Load a heightfield from a .npy array or a terrain-RGB image.

    Args:
        path: Path to a .npy file or an image

    Returns:
        Tuple of (flat float64 heightfield, grid size)
    """
    path = str(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Heightmap not found: {path}")

    if path.lower().endswith(".npy"):
        return terrain_from_array(np.load(path))
    return load_terrain_rgb(path)
