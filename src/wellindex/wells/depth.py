"""Vertical depth of perforations along the gravity direction."""

import logging
import typing

import numpy as np

from wellindex.errors import ShapeError
from wellindex.grids.base import Grid, array
from wellindex.types import FloatArray, GravityVector
from wellindex.wells.perforations import normalize_cells

logger = logging.getLogger(__name__)

__all__ = [
    "normalize_gravity",
    "compute_cell_depths",
    "compute_reference_depth",
    "compute_depth_offsets",
]


def normalize_gravity(gravity: GravityVector, dimensions: int) -> FloatArray:
    """
    Unit vector of the first `dimensions` components of `gravity`.

    A zero vector is replaced by the last spatial axis, so that depth is measured along
    z in 3D and along y in 2D.

    :param gravity: Gravity vector.
    :param dimensions: Grid dimension.
    :raises ShapeError: If the vector has fewer than `dimensions` components.
    """
    vector = np.asarray(gravity, dtype=np.float64).reshape(-1)
    if vector.size < dimensions:
        raise ShapeError(
            f"Gravity vector has {vector.size} components for a {dimensions}D grid."
        )
    vector = vector[:dimensions]
    norm = np.linalg.norm(vector)
    if norm > 0:
        return vector / norm

    direction = np.zeros(dimensions)
    direction[-1] = 1.0
    return direction


def compute_cell_depths(grid: Grid, cells: typing.Any, gravity: GravityVector) -> FloatArray:
    """
    Project cell centroids onto the gravity direction.

    :param grid: The grid.
    :param cells: Perforated cells.
    :param gravity: Gravity vector.
    :return: Depth of each cell centroid.
    """
    cells = normalize_cells(grid, cells)
    direction = normalize_gravity(gravity, grid.dimensions)
    return array(grid.cells.centroids[cells] @ direction)


def compute_reference_depth(grid: Grid, gravity: GravityVector) -> float:
    """
    Default reference depth: the shallowest point of the grid.

    This is the minimum projected node depth, or the minimum projected cell centroid
    depth for grids without nodes. Without gravity the reference depth is 0.

    :param grid: The grid.
    :param gravity: Gravity vector.
    """
    vector = np.asarray(gravity, dtype=np.float64).reshape(-1)[: grid.dimensions]
    if not np.linalg.norm(vector) > 0:
        return 0.0

    direction = normalize_gravity(vector, grid.dimensions)
    if grid.nodes is not None:
        points = grid.nodes.coords[:, : grid.dimensions]
    else:
        points = grid.cells.centroids
    return float(np.min(points @ direction))


def compute_depth_offsets(
    grid: Grid,
    cells: typing.Any,
    gravity: GravityVector,
    reference_depth: typing.Optional[float] = None,
) -> typing.Tuple[FloatArray, float]:
    """
    Depth of each perforation relative to a reference depth.

    :param grid: The grid.
    :param cells: Perforated cells.
    :param gravity: Gravity vector.
    :param reference_depth: Reference depth. Defaults to `compute_reference_depth`.
    :return: `(offsets, reference_depth)`.
    """
    if reference_depth is None:
        reference_depth = compute_reference_depth(grid, gravity)
        logger.debug(f"Using default reference depth {reference_depth:.6g}")
    depths = compute_cell_depths(grid, cells, gravity)
    return depths - reference_depth, float(reference_depth)
