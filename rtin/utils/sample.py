"""Synthetic heightfields for demonstrations and tests."""

import logging
import numpy as np
from typing import Optional
from scipy.ndimage import gaussian_filter

logger = logging.getLogger(__name__)

SAMPLE_PATTERNS = ("flat", "ramp", "peak", "dome", "spike", "waves", "random")


def create_sample_terrain(
    grid_size: int = 65,
    pattern: str = "waves",
    z_value: float = 0.0,
    amplitude: float = 100.0,
    seed: Optional[int] = None,
    **kwargs
) -> np.ndarray:
    """
    Create a square heightfield for testing or demonstration purposes.

    Args:
        grid_size: Number of vertices along one side
        pattern: One of "flat", "ramp", "peak", "dome", "spike", "waves", "random"
        z_value: Base elevation
        amplitude: Elevation range of the pattern
        seed: Random seed for the "random" pattern

    Returns:
        2D float64 array of shape (grid_size, grid_size), indexed [y, x]
    """
    if pattern not in SAMPLE_PATTERNS:
        raise ValueError(f"Unknown pattern '{pattern}', expected one of {SAMPLE_PATTERNS}")

    x = np.linspace(-5, 5, grid_size)
    y = np.linspace(-5, 5, grid_size)
    X, Y = np.meshgrid(x, y)

    if pattern == "flat":
        Z = np.zeros((grid_size, grid_size))
    elif pattern == "ramp":
        Z = (X + Y + 10) / 20
    elif pattern == "peak":
        Z = np.exp(-(X**2 + Y**2) / 8)
    elif pattern == "dome":
        Z = 1.0 - np.sqrt(X**2 + Y**2) / 5
        Z[Z < 0] = 0
    elif pattern == "spike":
        # Single raised vertex, off the coarse midpoints
        Z = np.zeros((grid_size, grid_size))
        Z[kwargs.get('spike_y', grid_size // 3), kwargs.get('spike_x', grid_size // 3)] = 1.0
    elif pattern == "waves":
        frequency = kwargs.get('frequency', 0.5)
        primary = np.sin(X * frequency) * np.cos(Y * frequency)
        secondary = np.sin(X * frequency * 2) * np.cos(Y * frequency * 2) * 0.3
        Z = gaussian_filter(primary + secondary, sigma=kwargs.get('smoothing', 1.0))
    else:
        rng = np.random.default_rng(seed)
        Z = gaussian_filter(rng.uniform(-1, 1, (grid_size, grid_size)), sigma=kwargs.get('smoothing', 1.0))

    Z = Z.astype(np.float64) * amplitude + z_value
    logger.debug(f"Created sample terrain: pattern={pattern}, grid_size={grid_size}")
    return Z
