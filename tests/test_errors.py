#!/usr/bin/env python3
"""
Tests for the error field computation.
"""

import math
import warnings

import numpy as np
import pytest

from rtin import build_index, compute_errors, TerrainLengthMismatch, Tile
from tests.resources import create_spike_terrain


def float_max(x, y):
    """Maximum where +Inf beats NaN and NaN beats any finite value."""
    if math.isinf(x) and x > 0 or math.isinf(y) and y > 0:
        return math.inf
    if math.isnan(x) or math.isnan(y):
        return math.nan
    return max(x, y)


def errors_by_triangle(index, terrain):
    """Per-triangle loop over ids in descending order, for comparison."""
    size = index.grid_size
    terrain = [float(h) for h in np.asarray(terrain).reshape(-1)]
    errors = [0.0] * (size * size)
    for i in range(index.num_triangles - 1, -1, -1):
        ax, ay, bx, by = (int(v) for v in index.coords[i])
        mx, my = (ax + bx) >> 1, (ay + by) >> 1
        cx, cy = index.third_corner(ax, ay, bx, by)

        interpolated = (terrain[ay * size + ax] + terrain[by * size + bx]) / 2
        middle = my * size + mx
        errors[middle] = float_max(errors[middle], abs(interpolated - terrain[middle]))

        if i < index.num_parent_triangles:
            left = ((ay + cy) >> 1) * size + ((ax + cx) >> 1)
            right = ((by + cy) >> 1) * size + ((bx + cx) >> 1)
            errors[middle] = float_max(errors[middle], float_max(errors[left], errors[right]))
    return np.array(errors)


class TestComputeErrors:
    """Test suite for compute_errors."""

    def test_bump_terrain_golden(self, index3, bump_terrain3):
        """Test the error field of a hand-checked 3x3 heightfield."""
        errors = compute_errors(index3, bump_terrain3)
        np.testing.assert_array_equal(errors, [0, 4, 0, 0, 4, 0, 0, 0, 0])

    def test_spike_errors_propagate_to_coarser_midpoints(self, index5):
        """Test that a spike raises the error of every ancestor midpoint."""
        errors = compute_errors(index5, create_spike_terrain(5, 1, 1, height=8.0))

        expected = np.zeros(25)
        # (1,1) itself, then (2,0) and (0,2) one level up, then the centre
        for x, y in ((1, 1), (2, 0), (0, 2), (2, 2)):
            expected[y * 5 + x] = 8.0
        np.testing.assert_array_equal(errors, expected)

    @pytest.mark.parametrize("grid_size", [2, 3, 5, 9, 17, 65])
    def test_constant_terrain_has_zero_error(self, grid_size):
        """Test that a constant heightfield gives an all-zero error field."""
        index = build_index(grid_size)
        errors = compute_errors(index, np.full(grid_size * grid_size, 123.5))
        assert errors.shape == (grid_size * grid_size,)
        assert not np.any(errors)

    def test_planar_terrain_has_zero_error(self, index5):
        """Test that a tilted plane is represented exactly."""
        y, x = np.mgrid[0:5, 0:5]
        errors = compute_errors(index5, (3.0 * x - 2.0 * y + 7.0).reshape(-1))
        assert not np.any(errors)

    def test_matches_triangle_loop(self, random_terrain33):
        """Test the level-wise computation against a per-triangle loop."""
        index = build_index(33)
        np.testing.assert_array_equal(
            compute_errors(index, random_terrain33),
            errors_by_triangle(index, random_terrain33)
        )

    def test_parent_error_bounds_children(self, random_terrain33):
        """Test that a midpoint error is never below the errors of its children."""
        index = build_index(33)
        errors = compute_errors(index, random_terrain33)
        size = index.grid_size
        coords = index.coords.astype(np.int64)[:index.num_parent_triangles]
        ax, ay, bx, by = coords.T
        cx, cy = index.third_corner(ax, ay, bx, by)

        middle = errors[((ay + by) >> 1) * size + ((ax + bx) >> 1)]
        left = errors[((ay + cy) >> 1) * size + ((ax + cx) >> 1)]
        right = errors[((by + cy) >> 1) * size + ((bx + cx) >> 1)]
        assert np.all(middle >= left)
        assert np.all(middle >= right)

    def test_accepts_lists_and_2d_arrays(self, index3, bump_terrain3):
        """Test that list and 2D inputs give the same field."""
        from_list = compute_errors(index3, bump_terrain3.tolist())
        from_grid = compute_errors(index3, bump_terrain3.reshape(3, 3))
        np.testing.assert_array_equal(from_list, from_grid)

    def test_result_is_read_only(self, index3, bump_terrain3):
        """Test that the error field cannot be modified."""
        errors = compute_errors(index3, bump_terrain3)
        with pytest.raises(ValueError):
            errors[0] = 1.0

    def test_terrain_not_modified(self, index3, bump_terrain3):
        """Test that the heightfield is only read."""
        original = bump_terrain3.copy()
        compute_errors(index3, bump_terrain3)
        np.testing.assert_array_equal(bump_terrain3, original)

    @pytest.mark.parametrize("length", [0, 8, 10, 25])
    def test_length_mismatch(self, index3, length):
        """Test that a heightfield of the wrong length is rejected."""
        with pytest.raises(TerrainLengthMismatch) as excinfo:
            compute_errors(index3, np.zeros(length))
        assert excinfo.value.expected == 9
        assert excinfo.value.actual == length

    def test_nan_propagates(self, index5):
        """Test that NaN elevations are passed through, not filtered."""
        terrain = np.zeros(25)
        terrain[2 * 5 + 2] = np.nan
        errors = compute_errors(index5, terrain)

        assert np.isnan(errors[2 * 5 + 2])
        # (0,2) is the parent midpoint of triangles touching the centre
        assert np.isnan(errors[2 * 5 + 0])
        # Corners are never midpoints
        assert errors[0] == 0

    def test_infinite_elevation(self, index5):
        """Test that an infinite elevation gives infinite errors upward."""
        errors = compute_errors(index5, create_spike_terrain(5, 1, 1, height=np.inf))
        for x, y in ((1, 1), (2, 0), (0, 2), (2, 2)):
            assert np.isposinf(errors[y * 5 + x])

    def test_infinity_wins_over_nan(self, index5):
        """Test that a vertex reached by both Inf and NaN errors gets +Inf."""
        terrain = np.zeros(25)
        terrain[1 * 5 + 1] = np.inf
        terrain[1 * 5 + 3] = np.nan
        errors = compute_errors(index5, terrain)

        assert np.isposinf(errors[2 * 5 + 2])
        # (2,0) has (1,1) and (3,1) below it
        assert np.isposinf(errors[0 * 5 + 2])
        # (4,2) only sees the NaN
        assert np.isnan(errors[2 * 5 + 4])
        assert np.isnan(errors[1 * 5 + 3])
        assert errors[4 * 5 + 2] == 0

    def test_non_finite_matches_triangle_loop(self):
        """Test mixed Inf and NaN elevations against the per-triangle loop."""
        rng = np.random.default_rng(99)
        terrain = rng.normal(0, 10, 17 * 17)
        terrain[rng.choice(terrain.size, 6, replace=False)] = np.nan
        terrain[rng.choice(terrain.size, 6, replace=False)] = np.inf
        terrain[rng.choice(terrain.size, 3, replace=False)] = -np.inf

        index = build_index(17)
        np.testing.assert_array_equal(
            compute_errors(index, terrain),
            errors_by_triangle(index, terrain)
        )

    def test_non_finite_terrain_emits_no_warnings(self, index5):
        """Test that NaN and Inf elevations do not raise numpy RuntimeWarnings."""
        terrain = np.zeros(25)
        terrain[2 * 5 + 2] = np.nan
        terrain[0] = np.inf
        terrain[4] = -np.inf

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compute_errors(index5, terrain)
            Tile(index5, terrain)
