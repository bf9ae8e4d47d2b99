"""Test resources package for rtin testing."""

import os
import numpy as np

# Directory containing resource files
RESOURCE_DIR = os.path.dirname(os.path.abspath(__file__))


def get_resource_path(filename):
    """Get full path to a resource file."""
    return os.path.join(RESOURCE_DIR, filename)


def encode_terrain_rgb(heights):
    """Encode elevations as terrain-RGB pixels.

    Args:
        heights: 2D array of elevations, multiples of 0.1 above -10000

    Returns:
        uint8 array of shape (height, width, 3)
    """
    value = np.round((np.asarray(heights, dtype=np.float64) + 10000.0) * 10).astype(np.int64)
    rgb = np.stack([(value >> 16) & 255, (value >> 8) & 255, value & 255], axis=-1)
    return rgb.astype(np.uint8)


def create_spike_terrain(grid_size, x, y, height=1.0):
    """Flat heightfield with a single raised vertex, returned flat."""
    terrain = np.zeros(grid_size * grid_size)
    terrain[y * grid_size + x] = height
    return terrain
