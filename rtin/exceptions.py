#!/usr/bin/env python3
"""
RTIN Exceptions

This module defines custom exceptions used throughout the rtin library.
"""


class RTINException(Exception):
    """Base class for all rtin exceptions."""
    pass


class InvalidGridSize(RTINException, ValueError):
    """Exception raised when a grid size is not of the form 2^n+1."""

    def __init__(self, grid_size):
        self.grid_size = grid_size
        super().__init__(f"Expected grid size to be 2^n+1, got {grid_size}")


class TerrainLengthMismatch(RTINException, ValueError):
    """Exception raised when a heightfield does not cover the whole grid."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected terrain data of length {expected}, got {actual}")


class HeightmapError(RTINException):
    """Exception raised when a height source cannot be turned into a heightfield."""
    pass
