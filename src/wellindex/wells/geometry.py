"""Physical dimensions (bounding boxes) of perforated cells."""

import logging
import typing

import numba
import numpy as np

from wellindex._precision import get_dtype
from wellindex.constants import c
from wellindex.errors import GeometryError
from wellindex.grids.base import Grid, index_array
from wellindex.types import FloatArray, GeometryMode, IndexArray

logger = logging.getLogger(__name__)

__all__ = [
    "compute_cell_dimensions",
    "compute_node_cell_dimensions",
    "compute_face_area_cell_dimensions",
    "resolve_geometry_mode",
]

CellDimensions = typing.Tuple[FloatArray, FloatArray, FloatArray]


@numba.njit(cache=True)
def _node_bounding_boxes(
    cells: np.ndarray,
    cell_face_pos: np.ndarray,
    cell_faces: np.ndarray,
    face_node_pos: np.ndarray,
    face_nodes: np.ndarray,
    coords: np.ndarray,
) -> typing.Tuple[np.ndarray, np.ndarray]:
    """
    Coordinate-wise minimum and maximum over all nodes of the faces of each cell.

    :return: `(lower, upper)` arrays of shape `(len(cells), coords.shape[1])`.
    """
    n = cells.shape[0]
    dims = coords.shape[1]
    lower = np.full((n, dims), np.inf)
    upper = np.full((n, dims), -np.inf)
    for idx in range(n):
        cell = cells[idx]
        for fpos in range(cell_face_pos[cell], cell_face_pos[cell + 1]):
            face = cell_faces[fpos]
            for npos in range(face_node_pos[face], face_node_pos[face + 1]):
                node = face_nodes[npos]
                for axis in range(dims):
                    value = coords[node, axis]
                    if value < lower[idx, axis]:
                        lower[idx, axis] = value
                    if value > upper[idx, axis]:
                        upper[idx, axis] = value
    return lower, upper


def resolve_geometry_mode(
    grid: Grid, mode: typing.Optional[GeometryMode] = None
) -> GeometryMode:
    """
    Decide how cell dimensions are extracted for `grid`.

    :param grid: The grid.
    :param mode: Requested mode. `None` selects node bounding boxes when the grid
        carries nodes, and face areas otherwise.
    :raises GeometryError: If node bounding boxes are requested on a grid without nodes.
    """
    if mode is None:
        return grid.geometry_mode

    mode = GeometryMode(mode)
    if mode is GeometryMode.NODES and not grid.has_nodes:
        raise GeometryError(
            "Node bounding boxes were requested for a grid without node coordinates."
        )
    return mode


def compute_node_cell_dimensions(grid: Grid, cells: IndexArray) -> CellDimensions:
    """
    Compute cell dimensions from the bounding box of the cells' nodes.

    `dx` (and `dy` when the nodes have at least two coordinates) are bounding box edge
    lengths. With three coordinates, `dz = volume / (dx * dy)` so that the box has the
    volume of the cell. Missing axes have unit extent.

    :param grid: Grid carrying node coordinates.
    :param cells: Global cell indices.
    :return: `(dx, dy, dz)`, one entry per cell.
    """
    assert grid.nodes is not None
    faces = grid.faces
    coords = np.ascontiguousarray(grid.nodes.coords, dtype=np.float64)
    lower, upper = _node_bounding_boxes(
        cells,
        grid.cells.face_pos,
        grid.cells.faces,
        faces.node_pos,
        faces.nodes,
        coords,
    )
    extent = upper - lower
    if not np.all(np.isfinite(extent)):
        position = int(np.flatnonzero(~np.all(np.isfinite(extent), axis=1))[0])
        raise GeometryError(
            f"Cell {cells[position]} (perforation {position}) has no nodes to bound it."
        )

    dtype = get_dtype()
    unit = c.TWO_DIMENSIONAL_CELL_THICKNESS
    axes = coords.shape[1]
    dx = extent[:, 0].astype(dtype)
    dy = extent[:, 1].astype(dtype) if axes > 1 else np.full(cells.size, unit, dtype=dtype)
    if axes > 2:
        dz = (grid.cells.volumes[cells] / (dx * dy)).astype(dtype)
    else:
        dz = np.full(cells.size, unit, dtype=dtype)
    return dx, dy, dz


def compute_face_area_cell_dimensions(grid: Grid, cells: IndexArray) -> CellDimensions:
    """
    Compute cell dimensions of hexahedral cells from their volume and face areas.

    Faces are ordered by descending alignment with the x, then y, then z axis (that is
    by descending `|normal|`, compared lexicographically), which groups them into three
    pairs of opposing faces. The extent along each axis is
    `2 * volume / (area_a + area_b)` of the matching pair.

    :param grid: The grid.
    :param cells: Global cell indices.
    :return: `(dx, dy, dz)`, one entry per cell.
    :raises GeometryError: If any cell does not have exactly 6 faces.
    """
    counts = grid.cells.face_counts(cells)
    if np.any(counts != 6):
        position = int(np.flatnonzero(counts != 6)[0])
        raise GeometryError(
            f"Cell {cells[position]} (perforation {position}) has {counts[position]} faces. "
            "Face-area cell dimensions require hexahedral cells with exactly 6 faces."
        )

    dtype = get_dtype()
    if cells.size == 0:
        empty = np.zeros(0, dtype=dtype)
        return empty, empty.copy(), empty.copy()

    face_index = grid.cells.face_pos[cells][:, None] + np.arange(6)
    faces = grid.cells.faces[face_index]
    normals = np.abs(grid.faces.normals[faces])
    normals = np.pad(normals, ((0, 0), (0, 0), (0, 3 - normals.shape[2])))

    # Ascending lexicographic on (|nx|, |ny|, |nz|), reversed.
    order = np.lexsort(
        (normals[..., 2], normals[..., 1], normals[..., 0]), axis=-1
    )[:, ::-1]
    areas = np.take_along_axis(grid.faces.areas[faces], order, axis=1)
    volumes = grid.cells.volumes[cells]

    dx = (2 * volumes / (areas[:, 0] + areas[:, 1])).astype(dtype)
    dy = (2 * volumes / (areas[:, 2] + areas[:, 3])).astype(dtype)
    dz = (2 * volumes / (areas[:, 4] + areas[:, 5])).astype(dtype)
    return dx, dy, dz


def compute_cell_dimensions(
    grid: Grid,
    cells: typing.Any,
    mode: typing.Optional[GeometryMode] = None,
) -> CellDimensions:
    """
    Compute the physical extent `(dx, dy, dz)` of each of `cells`.

    :param grid: The grid.
    :param cells: Global cell indices.
    :param mode: Extraction mode. Inferred from the grid when `None`.
    :return: `(dx, dy, dz)`, one entry per cell.
    """
    cells = grid.check_cells(index_array(cells))
    mode = resolve_geometry_mode(grid, mode)
    logger.debug(f"Computing dimensions of {cells.size} cells using {mode.value!r} mode")
    if mode is GeometryMode.NODES:
        return compute_node_cell_dimensions(grid, cells)
    return compute_face_area_cell_dimensions(grid, cells)
