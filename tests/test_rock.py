"""
Unit tests for permeability storage and diagonalization.
"""

import numpy as np
import pytest

from wellindex import (
    DataError,
    Diagonal2D,
    Diagonal3D,
    FullTensor,
    FullTensor2D,
    Isotropic,
    Rock,
    diagonalize_permeability,
    extend_with_harmonic_vertical,
    resolve_permeability,
)


class TestResolvePermeability:
    """Column count decides the tensor variant."""

    @pytest.mark.parametrize(
        "columns, dimensions, expected",
        [
            (1, None, Isotropic),
            (2, None, Diagonal2D),
            (3, None, Diagonal3D),
            (3, 3, Diagonal3D),
            (3, 2, FullTensor2D),
            (6, None, FullTensor),
        ],
    )
    def test_variant(self, columns, dimensions, expected):
        tensor = resolve_permeability(np.ones((4, columns)), dimensions)
        assert type(tensor) is expected
        assert tensor.num_cells == 4

    def test_flat_values_are_isotropic(self):
        assert isinstance(resolve_permeability([1.0, 2.0, 3.0]), Isotropic)

    @pytest.mark.parametrize("columns", [4, 5, 7])
    def test_unsupported_column_count(self, columns):
        with pytest.raises(DataError, match="1, 2, 3 or 6 columns"):
            resolve_permeability(np.ones((2, columns)))

    def test_resolved_tensor_is_returned_unchanged(self):
        tensor = Isotropic([[1.0]])
        assert resolve_permeability(tensor) is tensor

    def test_explicit_variant_checks_columns(self):
        with pytest.raises(DataError):
            Diagonal3D(np.ones((2, 2)))


class TestDiagonal:
    """Diagonal extraction per variant."""

    def test_isotropic_is_replicated(self):
        rock = Rock.from_array([[10.0], [20.0]])
        k = diagonalize_permeability(rock, [1, 0], 3)
        np.testing.assert_allclose(k, [[20.0] * 3, [10.0] * 3])

    def test_full_tensor_uses_diagonal_ordinals(self):
        rock = Rock.from_array([[1.0, 9.0, 9.0, 2.0, 9.0, 3.0]])

        np.testing.assert_allclose(diagonalize_permeability(rock, [0], 3), [[1.0, 2.0, 3.0]])
        np.testing.assert_allclose(diagonalize_permeability(rock, [0], 2), [[1.0, 9.0]])

    def test_full_2D_tensor(self):
        rock = Rock.from_array([[1.0, 0.5, 4.0]], dimensions=2)
        np.testing.assert_allclose(diagonalize_permeability(rock, [0], 2), [[1.0, 4.0]])

    def test_3D_diagonal_on_2D_grid_skips_ky(self):
        rock = Rock.from_array([[1.0, 2.0, 3.0]])
        np.testing.assert_allclose(diagonalize_permeability(rock, [0], 2), [[1.0, 3.0]])

    def test_2D_tensor_on_3D_grid(self):
        rock = Rock.from_array([[1.0, 2.0]])
        with pytest.raises(DataError, match="3D grid"):
            diagonalize_permeability(rock, [0], 3)

    def test_missing_rock(self):
        with pytest.raises(DataError):
            diagonalize_permeability(None, [0], 3)
        with pytest.raises(DataError):
            diagonalize_permeability(Rock(), [0], 3)

    def test_cell_out_of_range(self):
        rock = Rock.from_array([[1.0]])
        with pytest.raises(DataError):
            diagonalize_permeability(rock, [3], 3)

    def test_negative_cell_is_reported(self):
        rock = Rock.from_array([[1.0], [2.0]])
        with pytest.raises(DataError, match="cell -1 was requested"):
            diagonalize_permeability(rock, [1, -1], 3)


def test_harmonic_vertical_permeability():
    k = extend_with_harmonic_vertical(np.array([[100.0, 100.0], [10.0, 40.0]]))

    assert k.shape == (2, 3)
    assert np.isclose(k[0, 2], 50.0)
    assert np.isclose(k[1, 2], 8.0)
