"""
Rock permeability storage and diagonalization.

Permeability tables are resolved once, at ingestion, into one of the tensor variants
below according to their column count. Columns are interpreted by position:

- 1 column: isotropic `k`
- 2 columns: diagonal `(kx, ky)` of a 2D tensor
- 3 columns: diagonal `(kx, ky, kz)` of a 3D tensor, or the upper triangle
  `(kxx, kxy, kyy)` of a full 2D tensor when the table is declared two-dimensional
- 6 columns: upper triangle `(kxx, kxy, kxz, kyy, kyz, kzz)` of a full 3D tensor
"""

import logging
import typing

import attrs
import numpy as np

from wellindex.errors import DataError
from wellindex.grids.base import array, index_array
from wellindex.types import FloatArray, IndexArray

logger = logging.getLogger(__name__)

__all__ = [
    "PermeabilityTensor",
    "Isotropic",
    "Diagonal2D",
    "Diagonal3D",
    "FullTensor2D",
    "FullTensor",
    "resolve_permeability",
    "Rock",
    "diagonalize_permeability",
    "extend_with_harmonic_vertical",
]


def _table(value: typing.Any) -> FloatArray:
    values = array(value)
    if values.ndim == 1:
        values = values.reshape(-1, 1)
    if values.ndim != 2:
        raise DataError(f"Permeability must be a table of rows, got {values.ndim}D data.")
    return values


@attrs.frozen(eq=False)
class PermeabilityTensor:
    """Per-cell permeability table of a fixed column layout."""

    values: FloatArray = attrs.field(converter=_table)
    """Permeability table, one row per cell."""

    columns: typing.ClassVar[int] = 0
    ordinals_3D: typing.ClassVar[typing.Optional[typing.Tuple[int, ...]]] = None
    """Columns holding the diagonal (kx, ky, kz) in 3D."""
    ordinals_2D: typing.ClassVar[typing.Tuple[int, ...]] = (0, 1)
    """Columns holding the in-plane diagonal (kx, ky) in 2D."""

    def __attrs_post_init__(self) -> None:
        if self.values.shape[1] != self.columns:
            raise DataError(
                f"{type(self).__name__} permeability needs {self.columns} column(s), "
                f"got {self.values.shape[1]}."
            )

    @property
    def num_cells(self) -> int:
        return self.values.shape[0]

    def diagonal(self, cells: IndexArray, dimensions: int) -> FloatArray:
        """
        Diagonal permeability of `cells`.

        :param cells: Global cell indices.
        :param dimensions: Grid dimension (2 or 3).
        :return: `(len(cells), dimensions)` array.
        """
        ordinals = self.ordinals_3D if dimensions == 3 else self.ordinals_2D
        if ordinals is None:
            raise DataError(
                f"{type(self).__name__} permeability cannot be used on a {dimensions}D grid."
            )
        invalid = (cells < 0) | (cells >= self.num_cells)
        if np.any(invalid):
            raise DataError(
                f"Permeability is given for {self.num_cells} cells, "
                f"but cell {int(cells[np.flatnonzero(invalid)[0]])} was requested."
            )
        return self.values[np.ix_(cells, ordinals)]


class Isotropic(PermeabilityTensor):
    columns = 1
    ordinals_3D = (0, 0, 0)
    ordinals_2D = (0, 0)


class Diagonal2D(PermeabilityTensor):
    columns = 2
    ordinals_2D = (0, 1)


class Diagonal3D(PermeabilityTensor):
    columns = 3
    ordinals_3D = (0, 1, 2)
    ordinals_2D = (0, 2)


class FullTensor2D(PermeabilityTensor):
    """Upper triangle `(kxx, kxy, kyy)` of a symmetric 2D tensor."""

    columns = 3
    ordinals_2D = (0, 2)


class FullTensor(PermeabilityTensor):
    """Upper triangle `(kxx, kxy, kxz, kyy, kyz, kzz)` of a symmetric 3D tensor."""

    columns = 6
    ordinals_3D = (0, 3, 5)
    ordinals_2D = (0, 2)


def resolve_permeability(
    value: typing.Any, dimensions: typing.Optional[int] = None
) -> PermeabilityTensor:
    """
    Resolve a raw permeability table into its tensor variant.

    :param value: Permeability table (or a single column of values).
    :param dimensions: Grid dimension the table describes, if known. A 3-column table
        of a 2D grid is read as a full 2D tensor, otherwise as a 3D diagonal.
    :return: The permeability tensor.
    :raises DataError: If the column count is not 1, 2, 3 or 6.
    """
    if isinstance(value, PermeabilityTensor):
        return value

    values = _table(value)
    columns = values.shape[1]
    if columns == 1:
        return Isotropic(values)
    if columns == 2:
        return Diagonal2D(values)
    if columns == 3:
        return FullTensor2D(values) if dimensions == 2 else Diagonal3D(values)
    if columns == 6:
        return FullTensor(values)
    raise DataError(
        f"Permeability tables must have 1, 2, 3 or 6 columns, got {columns}."
    )


def _optional_permeability(value: typing.Any) -> typing.Optional[PermeabilityTensor]:
    return None if value is None else resolve_permeability(value)


@attrs.frozen(eq=False)
class Rock:
    """Rock properties of a grid."""

    permeability: typing.Optional[PermeabilityTensor] = attrs.field(
        default=None, converter=_optional_permeability
    )
    """Per-cell permeability."""

    @classmethod
    def from_array(
        cls, permeability: typing.Any, dimensions: typing.Optional[int] = None
    ) -> "Rock":
        """
        Build rock properties from a raw permeability table.

        :param permeability: Permeability table with 1, 2, 3 or 6 columns.
        :param dimensions: Grid dimension, used to disambiguate 3-column tables.
        """
        return cls(permeability=resolve_permeability(permeability, dimensions))


def diagonalize_permeability(
    rock: typing.Optional[Rock],
    cells: typing.Any,
    dimensions: int,
) -> FloatArray:
    """
    Extract the diagonal permeability tensor of the given cells.

    :param rock: Rock properties.
    :param cells: Global cell indices.
    :param dimensions: Grid dimension (2 or 3).
    :return: `(len(cells), dimensions)` array of diagonal permeabilities.
    :raises DataError: If the rock is missing or carries no permeability.
    """
    if rock is None:
        raise DataError("Rock properties are required to compute well indices.")
    if rock.permeability is None:
        raise DataError("Rock properties must include permeability data.")

    cells = index_array(cells)
    permeability = rock.permeability.diagonal(cells, dimensions)
    logger.debug(
        f"Diagonalized {type(rock.permeability).__name__} permeability for {cells.size} cells"
    )
    return permeability


def extend_with_harmonic_vertical(permeability: FloatArray) -> FloatArray:
    """
    Append a vertical permeability to a 2D diagonal tensor.

    The vertical permeability is taken as kz = 1 / (1/kx + 1/ky).

    :param permeability: `(n, 2)` array of (kx, ky).
    :return: `(n, 3)` array of (kx, ky, kz).
    """
    kx, ky = permeability[:, 0], permeability[:, 1]
    kz = 1.0 / (1.0 / kx + 1.0 / ky)
    return np.column_stack([permeability, kz])
