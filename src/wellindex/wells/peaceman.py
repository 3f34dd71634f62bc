"""Well indices of perforations in matrix cells (Peaceman model)."""

import logging
import typing

import numba
import numpy as np

from wellindex.constants import c
from wellindex.errors import DataError, SkinError, WellRadiusError
from wellindex.grids.base import Grid, array
from wellindex.rock import Rock, diagonalize_permeability, extend_with_harmonic_vertical
from wellindex.types import (
    DirectionLike,
    FloatArray,
    GeometryMode,
    IndexArray,
    InnerProduct,
)
from wellindex.wells.constants import compute_well_constant
from wellindex.wells.geometry import compute_cell_dimensions
from wellindex.wells.perforations import (
    broadcast_directions,
    broadcast_perforation_values,
    normalize_cells,
    select_cross_section,
)

logger = logging.getLogger(__name__)

__all__ = [
    "compute_well_index",
    "compute_peaceman_equivalent_radius",
    "compute_permeability_thickness",
    "check_well_indices",
    "compute_matrix_well_index",
]


@numba.njit(cache=True, error_model="numpy")
def compute_well_index(
    permeability_thickness,
    wellbore_radius,
    equivalent_radius,
    skin_factor,
):
    """
    Compute the well index using the Peaceman equation.

    The formula for the well index is:

        WI = 2π * Kh / (ln(re/rw) + s)

    where:
        - Kh is the permeability-thickness of the perforated interval
        - re is the equivalent (Peaceman) radius
        - rw is the wellbore radius
        - s is the skin factor (dimensionless)

    Works on scalars as well as on arrays of perforations.

    :param permeability_thickness: Permeability-thickness product.
    :param wellbore_radius: Radius of the wellbore.
    :param equivalent_radius: Equivalent radius of the perforated cell.
    :param skin_factor: Skin factor.
    :return: The well index, in the units of `permeability_thickness`.
    """
    return (
        2.0
        * np.pi
        * permeability_thickness
        / (np.log(equivalent_radius / wellbore_radius) + skin_factor)
    )


@numba.njit(cache=True, error_model="numpy")
def compute_peaceman_equivalent_radius(d1, d2, k1, k2, well_constant):
    """
    Compute Peaceman's equivalent radius for an anisotropic cell cross-section.

        re = 2C * √(d1² √(k2/k1) + d2² √(k1/k2)) / ((k2/k1)^¼ + (k1/k2)^¼)

    where (d1, d2) are the cross-sectional extents, (k1, k2) the matching
    permeabilities and C the well constant of the inner product.
    """
    ratio = k2 / k1
    inverse_ratio = k1 / k2
    numerator = (
        2.0
        * well_constant
        * np.sqrt(d1**2 * np.sqrt(ratio) + d2**2 * np.sqrt(inverse_ratio))
    )
    return numerator / (ratio**0.25 + inverse_ratio**0.25)


def compute_permeability_thickness(
    effective_permeability: FloatArray,
    length: FloatArray,
    dimensions: int,
    permeability_thickness: typing.Optional[typing.Any] = None,
) -> FloatArray:
    """
    Permeability-thickness of each perforation.

    Supplied non-negative values are kept. Negative values (and `None`) are computed
    as `ell * ke` in 3D and `ke` in 2D, where 2D cells have unit thickness.

    :param effective_permeability: Geometric mean of the cross-sectional permeabilities.
    :param length: Cell extent along the well.
    :param dimensions: Grid dimension.
    :param permeability_thickness: Optional supplied values, negative meaning "compute".
    """
    count = effective_permeability.size
    if permeability_thickness is None:
        kh = np.full(
            count, c.PERMEABILITY_THICKNESS_SENTINEL, dtype=effective_permeability.dtype
        )
    else:
        kh = broadcast_perforation_values(
            permeability_thickness, count, "permeability-thickness"
        ).copy()

    compute = kh < 0
    if dimensions > 2:
        kh[compute] = length[compute] * effective_permeability[compute]
    else:
        kh[compute] = effective_permeability[compute]
    return kh


def check_well_indices(
    well_index: FloatArray,
    equivalent_radius: FloatArray,
    radius: FloatArray,
    skin: FloatArray,
    cells: IndexArray,
    permeability_thickness: typing.Optional[FloatArray] = None,
) -> None:
    """
    Ensure all well indices are strictly positive.

    :raises WellRadiusError: If the equivalent radius of an offending perforation is
        smaller than the wellbore radius.
    :raises DataError: If its permeability-thickness is not positive.
    :raises SkinError: Otherwise, the skin factor is too negative.
    """
    invalid = ~(np.isfinite(well_index) & (well_index > 0))
    if not np.any(invalid):
        return

    too_small = invalid & (equivalent_radius < radius)
    if np.any(too_small):
        position = int(np.flatnonzero(too_small)[0])
        raise WellRadiusError(
            f"Equivalent radius in well model smaller than well radius causing negative "
            f"well index: perforation {position} (cell {cells[position]}) has equivalent "
            f"radius {equivalent_radius[position]:.6g} < well radius {radius[position]:.6g}."
        )

    if permeability_thickness is not None:
        no_flow = invalid & (permeability_thickness <= 0)
        if np.any(no_flow):
            position = int(np.flatnonzero(no_flow)[0])
            raise DataError(
                f"Perforation {position} (cell {cells[position]}) has non-positive "
                f"permeability-thickness {permeability_thickness[position]:.6g}."
            )

    position = int(np.flatnonzero(invalid)[0])
    raise SkinError(
        f"Large negative skin factor causing negative well index: perforation {position} "
        f"(cell {cells[position]}) has skin {skin[position]:.6g} and well index "
        f"{well_index[position]:.6g}."
    )


def compute_matrix_well_index(
    grid: Grid,
    rock: typing.Optional[Rock],
    radius: typing.Any,
    directions: DirectionLike,
    cells: typing.Any,
    inner_product: typing.Union[str, InnerProduct] = InnerProduct.TPF,
    skin: typing.Any = 0.0,
    permeability_thickness: typing.Optional[typing.Any] = None,
    geometry_mode: typing.Optional[GeometryMode] = None,
) -> FloatArray:
    """
    Compute Peaceman well indices of perforations in matrix cells.

    Two-dimensional grids use a vertical permeability equal to the harmonic
    average of the in-plane ones, and cells of unit thickness.

    :param grid: The grid.
    :param rock: Rock properties carrying permeability.
    :param radius: Wellbore radius, scalar or one per perforation.
    :param directions: Perforation direction(s), 'x', 'y' or 'z'.
    :param cells: Perforated cells.
    :param inner_product: Inner product of the flow solver.
    :param skin: Skin factor, scalar or one per perforation.
    :param permeability_thickness: Optional permeability-thickness per perforation,
        negative entries meaning "compute from the grid".
    :param geometry_mode: Cell geometry extraction mode, inferred when `None`.
    :return: Well index per perforation.
    """
    cells = normalize_cells(grid, cells)
    count = cells.size
    orientations = broadcast_directions(directions, count)
    radius = broadcast_perforation_values(radius, count, "radius")
    skin = broadcast_perforation_values(skin, count, "skin")

    dx, dy, dz = compute_cell_dimensions(grid, cells, mode=geometry_mode)
    permeability = diagonalize_permeability(rock, cells, grid.dimensions)
    if grid.dimensions == 2:
        permeability = extend_with_harmonic_vertical(permeability)

    d1, d2, ell, k1, k2 = select_cross_section(orientations, dx, dy, dz, permeability)
    well_constant = compute_well_constant(d1, d2, inner_product)
    equivalent_radius = compute_peaceman_equivalent_radius(d1, d2, k1, k2, well_constant)
    effective_permeability = np.sqrt(k1 * k2)
    kh = compute_permeability_thickness(
        effective_permeability, ell, grid.dimensions, permeability_thickness
    )
    well_index = array(compute_well_index(kh, radius, equivalent_radius, skin))

    check_well_indices(well_index, equivalent_radius, radius, skin, cells, kh)
    logger.debug(f"Computed matrix well indices for {count} perforations")
    return well_index
