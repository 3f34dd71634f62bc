"""
Unit tests for perforation depths.
"""

import numpy as np
import pytest

from wellindex import (
    ShapeError,
    build_cartesian_grid,
    compute_depth_offsets,
    compute_reference_depth,
    normalize_gravity,
)


class TestGravityDirection:
    def test_unit_vector(self):
        np.testing.assert_allclose(normalize_gravity([0.0, 0.0, 9.8], 3), [0.0, 0.0, 1.0])

    def test_zero_gravity_uses_last_axis(self):
        np.testing.assert_allclose(normalize_gravity([0.0, 0.0, 0.0], 3), [0.0, 0.0, 1.0])
        np.testing.assert_allclose(normalize_gravity([0.0, 0.0, 9.8], 2), [0.0, 1.0])

    def test_too_short(self):
        with pytest.raises(ShapeError):
            normalize_gravity([9.8], 2)


class TestDepthOffsets:
    def test_default_reference_is_shallowest_node(self, cube_grid):
        offsets, reference = compute_depth_offsets(cube_grid, [0], [0.0, 0.0, 9.8])
        assert reference == 0.0
        assert np.isclose(offsets[0], 5.0)

    def test_explicit_reference(self, cube_grid):
        offsets, reference = compute_depth_offsets(cube_grid, [0], [0.0, 0.0, 9.8], 2.0)
        assert reference == 2.0
        assert np.isclose(offsets[0], 3.0)

    def test_zero_gravity(self, cube_grid):
        offsets, reference = compute_depth_offsets(cube_grid, [0], [0.0, 0.0, 0.0])
        assert reference == 0.0
        assert np.isclose(offsets[0], 5.0)

    def test_shifted_grid(self):
        grid = build_cartesian_grid((1, 1, 2), 10.0, origin=(0.0, 0.0, 100.0))
        offsets, reference = compute_depth_offsets(grid, [0, 1], [0.0, 0.0, 9.8])

        assert np.isclose(reference, 100.0)
        np.testing.assert_allclose(offsets, [5.0, 15.0])

    def test_grid_without_nodes_uses_centroids(self):
        grid = build_cartesian_grid((1, 1, 2), 10.0, include_nodes=False)
        assert np.isclose(compute_reference_depth(grid, [0.0, 0.0, 9.8]), 5.0)

    def test_2D_grid(self, edfm_grid):
        offsets, reference = compute_depth_offsets(edfm_grid, [0, 4], [0.0, 0.0, 9.8])
        assert reference == 0.0
        np.testing.assert_allclose(offsets, [2.5, 2.5])
