"""
Representative radius of perforations.

The representative radius rR = √(re * rw) is used for shear-rate calculations
(e.g. for non-Newtonian fluids), never for the well index itself. Here rw is the
wellbore radius and re the radius of the circle with the same area as the
cross-section of the perforated cell orthogonal to the well:

- matrix cells: re = √(d1 * d2 / π)
- fracture cells: re = √(wf / π), with wf the fracture aperture

The matrix form is exact for Cartesian cells only, and an approximation for
corner-point and other twisted cells.
"""

import logging
import typing

import numpy as np

from wellindex.errors import DataError
from wellindex.grids.base import Grid, array
from wellindex.types import (
    DirectionLike,
    FloatArray,
    FractureRadiusPolicy,
    GeometryMode,
    Orientation,
)
from wellindex.wells.geometry import compute_cell_dimensions
from wellindex.wells.perforations import (
    broadcast_directions,
    broadcast_perforation_values,
    normalize_cells,
    select_cross_section,
)

logger = logging.getLogger(__name__)

__all__ = [
    "compute_matrix_representative_radius",
    "compute_fracture_representative_radius",
    "compute_representative_radius",
]


def compute_matrix_representative_radius(
    grid: Grid,
    radius: FloatArray,
    directions: typing.Sequence[Orientation],
    cells: np.ndarray,
    geometry_mode: typing.Optional[GeometryMode] = None,
) -> FloatArray:
    """Representative radius of perforations in matrix cells, one direction per perforation."""
    dx, dy, dz = compute_cell_dimensions(grid, cells, mode=geometry_mode)
    d1, d2, _ = select_cross_section(directions, dx, dy, dz)
    equivalent_radius = np.sqrt(d1 * d2 / np.pi)
    return np.sqrt(equivalent_radius * radius)


def compute_fracture_representative_radius(grid: Grid, radius: FloatArray) -> FloatArray:
    """Representative radius of perforations in fracture cells of `grid`."""
    if grid.fracture_aperture is None:
        raise DataError("Fracture representative radius requires the grid's fracture aperture.")
    equivalent_radius = np.sqrt(grid.fracture_aperture / np.pi)
    return np.sqrt(equivalent_radius * radius)


def compute_representative_radius(
    grid: Grid,
    radius: typing.Any,
    directions: DirectionLike,
    cells: typing.Any,
    fracture_radius_policy: FractureRadiusPolicy = FractureRadiusPolicy.PER_PERFORATION,
    geometry_mode: typing.Optional[GeometryMode] = None,
) -> FloatArray:
    """
    Compute the representative radius of each perforation.

    On grids with embedded fractures, `fracture_radius_policy` decides which
    perforations use the aperture-based form: only those in fracture cells
    (`PER_PERFORATION`), or all of them (`WHOLE_WELL`).

    :param grid: The grid.
    :param radius: Wellbore radius, scalar or one per perforation.
    :param directions: Perforation direction(s).
    :param cells: Perforated cells.
    :param fracture_radius_policy: Dispatch policy on grids with fractures.
    :param geometry_mode: Cell geometry extraction mode, inferred when `None`.
    :return: Representative radius per perforation.
    """
    cells = normalize_cells(grid, cells)
    count = cells.size
    radius = broadcast_perforation_values(radius, count, "radius")
    directions = broadcast_directions(directions, count)
    fracture_radius_policy = FractureRadiusPolicy(fracture_radius_policy)

    if not grid.has_fractures:
        return array(
            compute_matrix_representative_radius(
                grid, radius, directions, cells, geometry_mode
            )
        )

    is_fracture = grid.is_fracture_cell(cells)
    if fracture_radius_policy is FractureRadiusPolicy.WHOLE_WELL:
        if not np.all(is_fracture):
            logger.warning(
                f"Applying the fracture representative radius to "
                f"{int(np.count_nonzero(~is_fracture))} matrix perforation(s)"
            )
        return array(compute_fracture_representative_radius(grid, radius))

    representative_radius = np.empty(count, dtype=radius.dtype)
    representative_radius[is_fracture] = compute_fracture_representative_radius(
        grid, radius[is_fracture]
    )
    matrix = ~is_fracture
    if np.any(matrix):
        representative_radius[matrix] = compute_matrix_representative_radius(
            grid,
            radius[matrix],
            [d for d, keep in zip(directions, matrix) if keep],
            cells[matrix],
            geometry_mode,
        )
    return array(representative_radius)
