"""
Unit tests for Peaceman well indices of matrix perforations.
"""

import numpy as np
import pytest

from wellindex import (
    ConfigError,
    DataError,
    Rock,
    ShapeError,
    SkinError,
    WellRadiusError,
    build_cartesian_grid,
    compute_matrix_well_index,
    compute_peaceman_equivalent_radius,
    compute_well_index,
    with_precision,
)


def peaceman_radius(d1, d2, k1, k2, constant=0.14):
    numerator = 2 * constant * np.sqrt(d1**2 * np.sqrt(k2 / k1) + d2**2 * np.sqrt(k1 / k2))
    return numerator / ((k2 / k1) ** 0.25 + (k1 / k2) ** 0.25)


class TestPeacemanFormulas:
    def test_well_index(self):
        wi = compute_well_index(1000.0, 0.1, 1.0, 0.0)
        assert np.isclose(wi, 2 * np.pi * 1000.0 / np.log(10.0))

    def test_well_index_with_skin(self):
        wi = compute_well_index(np.array([1.0]), np.array([0.1]), np.array([1.0]), np.array([2.0]))
        assert np.isclose(wi[0], 2 * np.pi / (np.log(10.0) + 2.0))

    def test_isotropic_equivalent_radius(self):
        re = compute_peaceman_equivalent_radius(10.0, 10.0, 100.0, 100.0, 0.14)
        assert np.isclose(re, 0.14 * np.sqrt(200.0))

    def test_anisotropic_equivalent_radius(self):
        re = compute_peaceman_equivalent_radius(10.0, 20.0, 100.0, 400.0, 0.14)
        assert np.isclose(re, peaceman_radius(10.0, 20.0, 100.0, 400.0))


class TestMatrixWellIndex:
    """Well indices of matrix perforations on Cartesian grids."""

    def test_vertical_well_in_cube(self, cube_grid, isotropic_rock):
        wi = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])

        re = 0.14 * np.sqrt(200.0)
        assert wi.shape == (1,)
        assert np.isclose(wi[0], 2 * np.pi * 1000.0 / np.log(re / 0.1), rtol=1e-12)

    def test_direction_is_case_insensitive(self, cube_grid, isotropic_rock):
        lower = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])
        upper = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "Z", [0])
        np.testing.assert_allclose(lower, upper)

    def test_anisotropic_permeability(self, box_grid):
        rock = Rock.from_array([[100.0, 400.0, 10.0], [100.0, 400.0, 10.0]])
        wi = compute_matrix_well_index(box_grid, rock, 0.1, "z", [0])

        re = peaceman_radius(10.0, 20.0, 100.0, 400.0)
        kh = 5.0 * np.sqrt(100.0 * 400.0)
        assert np.isclose(wi[0], 2 * np.pi * kh / np.log(re / 0.1), rtol=1e-12)

    def test_horizontal_well_uses_orthogonal_cross_section(self, box_grid):
        rock = Rock.from_array([[100.0, 400.0, 10.0], [100.0, 400.0, 10.0]])
        wi = compute_matrix_well_index(box_grid, rock, 0.1, "x", [0])

        re = peaceman_radius(20.0, 5.0, 400.0, 10.0)
        kh = 10.0 * np.sqrt(400.0 * 10.0)
        assert np.isclose(wi[0], 2 * np.pi * kh / np.log(re / 0.1), rtol=1e-12)

    @pytest.mark.parametrize(
        "permeability",
        [
            [[100.0]],
            [[100.0, 100.0, 100.0]],
            [[100.0, 0.0, 0.0, 100.0, 0.0, 100.0]],
        ],
    )
    def test_permeability_layouts_agree(self, cube_grid, permeability):
        wi = compute_matrix_well_index(cube_grid, Rock.from_array(permeability), 0.1, "z", [0])
        re = 0.14 * np.sqrt(200.0)
        assert np.isclose(wi[0], 2 * np.pi * 1000.0 / np.log(re / 0.1), rtol=1e-12)

    def test_scalar_inputs_broadcast(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        scalar = compute_matrix_well_index(box_grid, rock, 0.1, "z", [0, 1], skin=0.5)
        vector = compute_matrix_well_index(
            box_grid, rock, [0.1, 0.1], ["z", "z"], [0, 1], skin=[0.5, 0.5]
        )
        np.testing.assert_allclose(scalar, vector, rtol=1e-12)

    def test_scalar_radius_matches_replicated_radius(self):
        grid = build_cartesian_grid((5, 1, 1), (10.0, 20.0, 5.0))
        rock = Rock.from_array(np.full((5, 1), 100.0))
        cells = [4, 0, 2, 1, 3]
        scalar = compute_matrix_well_index(grid, rock, 0.1, "z", cells)
        replicated = compute_matrix_well_index(grid, rock, [0.1] * 5, ["z"] * 5, cells)
        np.testing.assert_array_equal(scalar, replicated)

    def test_per_perforation_direction_string(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        combined = compute_matrix_well_index(box_grid, rock, 0.1, "xz", [0, 1])
        along_x = compute_matrix_well_index(box_grid, rock, 0.1, "x", [0])
        along_z = compute_matrix_well_index(box_grid, rock, 0.1, "z", [1])
        np.testing.assert_allclose(combined, [along_x[0], along_z[0]], rtol=1e-12)

    def test_skin_lowers_well_index(self, cube_grid, isotropic_rock):
        clean = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])
        damaged = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0], skin=2.0)

        re = 0.14 * np.sqrt(200.0)
        assert damaged[0] < clean[0]
        assert np.isclose(damaged[0], 2 * np.pi * 1000.0 / (np.log(re / 0.1) + 2.0))

    def test_supplied_permeability_thickness(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        computed = compute_matrix_well_index(box_grid, rock, 0.1, "z", [0, 1])
        supplied = compute_matrix_well_index(
            box_grid, rock, 0.1, "z", [0, 1], permeability_thickness=[1000.0, -1.0]
        )
        assert np.isclose(supplied[0], 2 * computed[0])
        assert np.isclose(supplied[1], computed[1])

    def test_mixed_inner_product(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        wi = compute_matrix_well_index(box_grid, rock, 0.1, "z", [0], inner_product="rt")

        re = 0.278 * np.sqrt(500.0)
        assert np.isclose(wi[0], 2 * np.pi * 500.0 / np.log(re / 0.1), rtol=1e-12)

    def test_mask_selects_cells(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        by_mask = compute_matrix_well_index(box_grid, rock, 0.1, "z", np.array([False, True]))
        by_index = compute_matrix_well_index(box_grid, rock, 0.1, "z", [1])
        np.testing.assert_allclose(by_mask, by_index)

    def test_repeated_calls_agree(self, cube_grid, isotropic_rock):
        first = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])
        second = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])
        np.testing.assert_array_equal(first, second)

    def test_single_precision(self, cube_grid, isotropic_rock):
        with with_precision(np.float32):
            wi = compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0])

        re = 0.14 * np.sqrt(200.0)
        assert wi.dtype == np.float32
        assert np.isclose(wi[0], 2 * np.pi * 1000.0 / np.log(re / 0.1), rtol=1e-5)

    def test_face_area_geometry_gives_same_result(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        no_nodes = build_cartesian_grid((2, 1, 1), (10.0, 20.0, 5.0), include_nodes=False)
        with_nodes = compute_matrix_well_index(box_grid, rock, 0.1, "y", [0, 1])
        from_faces = compute_matrix_well_index(no_nodes, rock, 0.1, "y", [0, 1])
        np.testing.assert_allclose(from_faces, with_nodes, rtol=1e-12)


class TestTwoDimensionalGrids:
    """2D cells have unit thickness and a harmonic vertical permeability."""

    @pytest.fixture
    def grid(self):
        return build_cartesian_grid((3, 2), (10.0, 20.0))

    @pytest.fixture
    def rock(self):
        return Rock.from_array(np.full((6, 1), 100.0))

    def test_vertical_well(self, grid, rock):
        wi = compute_matrix_well_index(grid, rock, 0.1, "z", [4])

        re = 0.14 * np.sqrt(500.0)
        assert np.isclose(wi[0], 2 * np.pi * 100.0 / np.log(re / 0.1), rtol=1e-12)

    def test_horizontal_well(self, grid, rock):
        wi = compute_matrix_well_index(grid, rock, 0.1, "x", [0])

        kz = 50.0
        re = peaceman_radius(20.0, 1.0, 100.0, kz)
        kh = np.sqrt(100.0 * kz)
        assert np.isclose(wi[0], 2 * np.pi * kh / np.log(re / 0.1), rtol=1e-12)


class TestErrors:
    def test_radius_larger_than_equivalent_radius(self, cube_grid, isotropic_rock):
        with pytest.raises(WellRadiusError, match="smaller than well radius"):
            compute_matrix_well_index(cube_grid, isotropic_rock, 5.0, "z", [0])

    def test_large_negative_skin(self, cube_grid, isotropic_rock):
        with pytest.raises(SkinError, match="negative skin"):
            compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [0], skin=-10.0)

    def test_zero_permeability(self, cube_grid):
        with pytest.raises(DataError):
            compute_matrix_well_index(cube_grid, Rock.from_array([[0.0]]), 0.1, "z", [0])

    def test_invalid_direction(self, cube_grid, isotropic_rock):
        with pytest.raises(ConfigError):
            compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "w", [0])

    def test_radius_count_mismatch(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        with pytest.raises(ShapeError):
            compute_matrix_well_index(box_grid, rock, [0.1, 0.1, 0.1], "z", [0, 1])

    def test_skin_count_mismatch(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        with pytest.raises(ShapeError, match="skin"):
            compute_matrix_well_index(box_grid, rock, 0.1, "z", [0, 1], skin=[0.0, 1.0, 2.0])

    def test_direction_count_mismatch(self, box_grid):
        rock = Rock.from_array([[100.0], [100.0]])
        with pytest.raises(ShapeError):
            compute_matrix_well_index(box_grid, rock, 0.1, "xyz", [0, 1])

    def test_cell_outside_grid(self, cube_grid, isotropic_rock):
        with pytest.raises(ShapeError):
            compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", [1])

    def test_mask_length_mismatch(self, cube_grid, isotropic_rock):
        with pytest.raises(ShapeError):
            compute_matrix_well_index(cube_grid, isotropic_rock, 0.1, "z", np.array([True, False]))

    def test_missing_rock(self, cube_grid):
        with pytest.raises(DataError):
            compute_matrix_well_index(cube_grid, None, 0.1, "z", [0])
