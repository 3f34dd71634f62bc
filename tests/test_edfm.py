"""
Unit tests for fracture-well connections of embedded fractures.
"""

import numpy as np
import pytest

from wellindex import (
    GeometryError,
    SkinError,
    UnsupportedGeometryError,
    build_cartesian_grid,
    compute_fracture_cell_length,
    compute_fracture_well_index,
    embed_fractures,
    find_fracture_grid,
)


def fracture_well_index(length, height=2.0, permeability=50.0, aperture=0.01, radius=0.1):
    re = 0.14 * np.sqrt(length**2 + height**2)
    return 2 * np.pi * permeability * aperture / np.log(re / radius)


class TestEmbeddedFractures:
    """Fracture cells are appended after the host cells."""

    def test_numbering(self, edfm_grid):
        assert edfm_grid.num_cells == 6
        assert edfm_grid.matrix_cell_count == 4
        assert list(edfm_grid.fractures) == [1]
        np.testing.assert_array_equal(
            edfm_grid.is_fracture_cell([0, 3, 4, 5]), [False, False, True, True]
        )

    def test_find_fracture_grid(self, edfm_grid):
        fracture_id, fracture, local_index = find_fracture_grid(edfm_grid, 5)
        assert fracture_id == 1
        assert fracture.start == 4
        assert local_index == 1

    def test_matrix_cell_is_in_no_fracture(self, edfm_grid):
        with pytest.raises(GeometryError):
            find_fracture_grid(edfm_grid, 2)


class TestFractureWellIndex:
    def test_two_cell_fracture(self, edfm_grid):
        wi = compute_fracture_well_index(edfm_grid, 0.1, [4, 5])

        expected = fracture_well_index(5.0)
        np.testing.assert_allclose(wi, [expected, expected], rtol=1e-12)

    def test_skin(self, edfm_grid):
        wi = compute_fracture_well_index(edfm_grid, 0.1, [4], skin=1.0)

        re = 0.14 * np.sqrt(29.0)
        assert np.isclose(wi[0], 2 * np.pi * 0.5 / (np.log(re / 0.1) + 1.0), rtol=1e-12)

    def test_explicit_cell_lengths(self):
        host = build_cartesian_grid((2, 2), 5.0)
        grid = embed_fractures(
            host,
            [[[5.0, 2.5], [5.0, 7.5]]],
            [[50.0, 80.0]],
            aperture=0.01,
            height=2.0,
            cell_lengths=[[3.0, 4.0]],
        )
        wi = compute_fracture_well_index(grid, 0.1, [4, 5])

        assert np.isclose(wi[0], fracture_well_index(3.0))
        assert np.isclose(wi[1], fracture_well_index(4.0, permeability=80.0))

    def test_single_cell_fracture_needs_lengths(self):
        host = build_cartesian_grid((2, 2), 5.0)
        grid = embed_fractures(host, [[[5.0, 5.0]]], [50.0], aperture=0.01, height=2.0)
        with pytest.raises(GeometryError, match="single-cell"):
            compute_fracture_well_index(grid, 0.1, [4])

    def test_negative_well_index_is_rejected(self, edfm_grid):
        with pytest.raises(SkinError):
            compute_fracture_well_index(edfm_grid, 0.1, [4], skin=-5.0)

    def test_negative_well_index_check_can_be_disabled(self, edfm_grid):
        wi = compute_fracture_well_index(edfm_grid, 0.1, [4], skin=-5.0, check_positive=False)
        assert wi[0] < 0

    def test_matrix_cell(self, edfm_grid):
        with pytest.raises(GeometryError):
            compute_fracture_well_index(edfm_grid, 0.1, [0])

    def test_missing_height(self):
        host = build_cartesian_grid((2, 2), 5.0)
        grid = embed_fractures(host, [[[5.0, 2.5], [5.0, 7.5]]], [50.0], aperture=0.01)
        with pytest.raises(GeometryError, match="height"):
            compute_fracture_well_index(grid, 0.1, [4])

    def test_3D_host_is_unsupported(self):
        host = build_cartesian_grid((1, 1, 1), 1.0)
        grid = embed_fractures(
            host, [[[0.5, 0.25, 0.5], [0.5, 0.75, 0.5]]], [50.0], aperture=0.01, height=1.0
        )
        with pytest.raises(UnsupportedGeometryError):
            compute_fracture_well_index(grid, 0.1, [1])
        with pytest.raises(NotImplementedError):
            compute_fracture_cell_length(grid.fractures[1], 0, grid.dimensions)
