"""Normalization of per-perforation well inputs."""

import typing

import numpy as np

from wellindex.errors import ConfigError, ShapeError
from wellindex.grids.base import Grid, array, index_array
from wellindex.types import DirectionLike, FloatArray, IndexArray, Orientation

__all__ = [
    "normalize_cells",
    "broadcast_directions",
    "broadcast_perforation_values",
    "direction_axes",
    "select_cross_section",
]

# Columns of (dx, dy, dz) giving (d1, d2, ell) for wells along x, y and z.
# The first two also select the cross-sectional permeabilities (k1, k2).
_CROSS_SECTION_AXES = np.array([[1, 2, 0], [0, 2, 1], [0, 1, 2]])


def normalize_cells(grid: Grid, cells: typing.Any) -> IndexArray:
    """
    Convert perforated cells to validated global cell indices.

    :param grid: The grid.
    :param cells: Cell indices, or a boolean mask with one entry per grid cell.
    :return: Global cell indices, in perforation order.
    :raises ShapeError: If a mask has the wrong length or an index is outside the grid.
    """
    values = np.asarray(cells)
    if values.dtype == np.bool_:
        if values.size != grid.num_cells:
            raise ShapeError(
                f"Logical cell mask has {values.size} entries for a grid of {grid.num_cells} cells."
            )
        return np.flatnonzero(values.reshape(-1)).astype(np.int64)
    return grid.check_cells(index_array(values))


def broadcast_directions(direction: DirectionLike, count: int) -> typing.List[Orientation]:
    """
    Broadcast a well direction to one direction per perforation.

    :param direction: A single direction code, a string of per-perforation codes
        (e.g. "xxz"), or a sequence of codes.
    :param count: Number of perforations.
    :return: One `Orientation` per perforation.
    :raises ConfigError: If a code is not x, y or z.
    :raises ShapeError: If the number of directions is neither 1 nor `count`.
    """
    if isinstance(direction, (str, Orientation)):
        codes: typing.Sequence[typing.Any] = (
            [direction] if isinstance(direction, Orientation) else list(direction)
        )
    else:
        codes = list(np.asarray(direction, dtype=object).reshape(-1))

    if len(codes) == 0:
        if count == 0:
            return []
        raise ConfigError("A well direction is required.")
    orientations = [Orientation.parse(code) for code in codes]
    if len(orientations) == 1:
        return orientations * count
    if len(orientations) != count:
        raise ShapeError(
            f"Got {len(orientations)} well directions for {count} perforations."
        )
    return orientations


def broadcast_perforation_values(
    value: typing.Any, count: int, name: str
) -> FloatArray:
    """
    Broadcast a scalar or per-perforation value to one entry per perforation.

    :param value: Scalar or sequence of values.
    :param count: Number of perforations.
    :param name: Name of the value, for error messages.
    :raises ShapeError: If the value has neither 1 nor `count` entries.
    """
    values = array(value).reshape(-1)
    if values.size == 1:
        return np.full(count, values[0], dtype=values.dtype)
    if values.size != count:
        raise ShapeError(
            f"Provided {name} should be one entry per perforated cell or a single entry "
            f"for all perforated cells ({values.size} given for {count} perforations)."
        )
    return values


def direction_axes(directions: typing.Sequence[Orientation]) -> IndexArray:
    """Axis number (0, 1, 2) of each direction."""
    return np.fromiter((d.axis for d in directions), dtype=np.int64, count=len(directions))


def select_cross_section(
    directions: typing.Sequence[Orientation],
    dx: FloatArray,
    dy: FloatArray,
    dz: FloatArray,
    permeability: typing.Optional[FloatArray] = None,
) -> typing.Tuple[FloatArray, ...]:
    """
    Select the cross-sectional extents and permeabilities of each perforation.

    A perforation along x sees the cross-section (dy, dz) with permeabilities (ky, kz)
    and length dx, along y (dx, dz), (kx, kz) and dy, along z (dx, dy), (kx, ky) and dz.

    :param directions: Direction of each perforation.
    :param dx: Cell extents along x.
    :param dy: Cell extents along y.
    :param dz: Cell extents along z.
    :param permeability: `(n, 3)` diagonal permeabilities, if needed.
    :return: `(d1, d2, ell)`, or `(d1, d2, ell, k1, k2)` when permeability is given.
    """
    axes = _CROSS_SECTION_AXES[direction_axes(directions)]
    rows = np.arange(axes.shape[0])
    extents = np.column_stack([dx, dy, dz])
    d1 = extents[rows, axes[:, 0]]
    d2 = extents[rows, axes[:, 1]]
    ell = extents[rows, axes[:, 2]]
    if permeability is None:
        return d1, d2, ell
    k1 = permeability[rows, axes[:, 0]]
    k2 = permeability[rows, axes[:, 1]]
    return d1, d2, ell, k1, k2
