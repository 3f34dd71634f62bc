"""
Well indices of fracture-well non-neighbour connections (EDFM).

A perforation in an embedded fracture cell connects the well directly to the fracture.
Its well index follows the line-source model of Moinfar (PhD thesis, 2013, Eqs. 4.10-4.11):

    re = 0.14 * √(lf² + hf²)
    WI = 2π * kf * wf / (ln(re/rw) + s)

where lf is the in-plane length of the fracture cell, hf the fracture height,
kf the fracture permeability and wf the fracture aperture.
"""

import logging
import typing

import numpy as np

from wellindex._precision import get_dtype
from wellindex.constants import c
from wellindex.errors import GeometryError, UnsupportedGeometryError
from wellindex.grids.base import FractureGrid, Grid, array, index_array
from wellindex.types import FloatArray
from wellindex.wells.peaceman import check_well_indices, compute_well_index
from wellindex.wells.perforations import broadcast_perforation_values

logger = logging.getLogger(__name__)

__all__ = [
    "find_fracture_grid",
    "compute_fracture_cell_length",
    "compute_fracture_equivalent_radius",
    "compute_fracture_well_index",
]


def find_fracture_grid(grid: Grid, cell: int) -> typing.Tuple[int, FractureGrid, int]:
    """
    Locate the fracture sub-grid holding a global cell.

    :param grid: Grid with embedded fractures.
    :param cell: Global cell index.
    :return: `(fracture_id, fracture_grid, local_index)`.
    :raises GeometryError: If the cell belongs to no fracture.
    """
    for fracture_id, fracture in grid.fractures.items():
        if fracture.contains(cell):
            return fracture_id, fracture, fracture.local_index(cell)
    raise GeometryError(f"Cell {cell} does not belong to any embedded fracture.")


def compute_fracture_cell_length(
    fracture: FractureGrid, local_index: int, dimensions: int
) -> float:
    """
    In-plane length of a fracture cell.

    Uses the fracture's explicit cell lengths when available. Otherwise the length is
    the distance between the cell centroid and the centroid of its neighbour along the
    fracture (the next cell, or the previous one for the last cell).

    :param fracture: Fracture sub-grid.
    :param local_index: Index of the cell within the fracture.
    :param dimensions: Dimension of the host grid.
    :raises UnsupportedGeometryError: For 3D host grids.
    :raises GeometryError: If the length cannot be derived.
    """
    if dimensions > 2:
        raise UnsupportedGeometryError(
            "Fracture-well connections are only implemented for 2D host grids."
        )
    if fracture.cell_lengths is not None:
        return float(fracture.cell_lengths[local_index])
    if fracture.num_cells < 2:
        raise GeometryError(
            "Cannot derive the length of a single-cell fracture from centroids; "
            "provide explicit fracture cell lengths."
        )

    neighbour = local_index + 1 if local_index + 1 < fracture.num_cells else local_index - 1
    delta = fracture.centroids[neighbour] - fracture.centroids[local_index]
    return float(np.sqrt(np.sum(delta**2)))


def compute_fracture_equivalent_radius(
    fracture_length: FloatArray, fracture_height: FloatArray
) -> FloatArray:
    """Equivalent radius `0.14 * √(lf² + hf²)` of fracture perforations."""
    return c.FRACTURE_WELL_CONSTANT * np.sqrt(
        np.asarray(fracture_length) ** 2 + np.asarray(fracture_height) ** 2
    )


def compute_fracture_well_index(
    grid: Grid,
    radius: typing.Any,
    cells: typing.Any,
    skin: typing.Any = 0.0,
    check_positive: bool = True,
) -> FloatArray:
    """
    Compute well indices of perforations in embedded fracture cells.

    :param grid: Grid with embedded fractures, a fracture aperture and a fracture height.
    :param radius: Wellbore radius, scalar or one per perforation.
    :param cells: Global indices of the perforated fracture cells.
    :param skin: Skin factor, scalar or one per perforation.
    :param check_positive: Whether to reject non-positive well indices the way matrix
        well indices are rejected.
    :return: Well index per perforation.
    :raises UnsupportedGeometryError: For 3D host grids.
    """
    cells = index_array(cells)
    count = cells.size
    radius = broadcast_perforation_values(radius, count, "radius")
    skin = broadcast_perforation_values(skin, count, "skin")

    if grid.dimensions > 2:
        raise UnsupportedGeometryError(
            "Fracture-well connections are only implemented for 2D host grids."
        )
    if grid.fracture_height is None:
        raise GeometryError("Fracture-well connections require the grid's fracture height.")

    dtype = get_dtype()
    length = np.empty(count, dtype=dtype)
    permeability = np.empty(count, dtype=dtype)
    for position, cell in enumerate(cells):
        fracture_id, fracture, local_index = find_fracture_grid(grid, int(cell))
        length[position] = compute_fracture_cell_length(
            fracture, local_index, grid.dimensions
        )
        permeability[position] = fracture.permeability[local_index]
        logger.debug(
            f"Perforation {position}: cell {cell} is cell {local_index} of fracture {fracture_id}"
        )

    height = np.full(count, grid.fracture_height, dtype=dtype)
    equivalent_radius = array(compute_fracture_equivalent_radius(length, height))
    conductivity = permeability * grid.fracture_aperture
    well_index = array(compute_well_index(conductivity, radius, equivalent_radius, skin))

    if check_positive:
        check_well_indices(
            well_index, equivalent_radius, radius, skin, cells, conductivity
        )
    logger.debug(f"Computed fracture-well indices for {count} perforations")
    return well_index
