"""Cartesian grid construction, with optional embedded fractures."""

import logging
import typing

import numpy as np

from wellindex.errors import DataError, ShapeError
from wellindex.grids.base import (
    Cells,
    Faces,
    FractureGrid,
    Grid,
    Nodes,
    array,
    index_array,
)

logger = logging.getLogger(__name__)

__all__ = ["build_cartesian_grid", "embed_fractures"]


def _ravel(indices: np.ndarray) -> np.ndarray:
    # First axis varies fastest, as in the cell numbering.
    return indices.ravel(order="F")


def _build_2D_topology(
    cell_counts: typing.Tuple[int, int], spacing: typing.Tuple[float, float]
) -> typing.Dict[str, np.ndarray]:
    nx, ny = cell_counts
    dx, dy = spacing

    def node(i, j):
        return i + (nx + 1) * j

    i, j = (_ravel(idx) for idx in np.indices((nx + 1, ny)))
    x_face_nodes = np.stack([node(i, j), node(i, j + 1)], axis=1)
    i, j = (_ravel(idx) for idx in np.indices((nx, ny + 1)))
    y_face_nodes = np.stack([node(i, j), node(i + 1, j)], axis=1)

    num_x_faces = (nx + 1) * ny
    num_y_faces = nx * (ny + 1)
    normals = np.zeros((num_x_faces + num_y_faces, 2))
    normals[:num_x_faces, 0] = 1.0
    normals[num_x_faces:, 1] = 1.0
    areas = np.concatenate([np.full(num_x_faces, dy), np.full(num_y_faces, dx)])

    i, j = (_ravel(idx) for idx in np.indices((nx, ny)))
    cell_faces = np.stack(
        [
            i + (nx + 1) * j,
            i + 1 + (nx + 1) * j,
            num_x_faces + i + nx * j,
            num_x_faces + i + nx * (j + 1),
        ],
        axis=1,
    )
    return {
        "face_nodes": np.concatenate([x_face_nodes, y_face_nodes]),
        "normals": normals,
        "areas": areas,
        "cell_faces": cell_faces,
        "cell_index": np.stack([i, j], axis=1),
        "node_index": np.stack(
            [_ravel(idx) for idx in np.indices((nx + 1, ny + 1))], axis=1
        ),
    }


def _build_3D_topology(
    cell_counts: typing.Tuple[int, int, int],
    spacing: typing.Tuple[float, float, float],
) -> typing.Dict[str, np.ndarray]:
    nx, ny, nz = cell_counts
    dx, dy, dz = spacing

    def node(i, j, k):
        return i + (nx + 1) * (j + (ny + 1) * k)

    i, j, k = (_ravel(idx) for idx in np.indices((nx + 1, ny, nz)))
    x_face_nodes = np.stack(
        [node(i, j, k), node(i, j + 1, k), node(i, j + 1, k + 1), node(i, j, k + 1)],
        axis=1,
    )
    i, j, k = (_ravel(idx) for idx in np.indices((nx, ny + 1, nz)))
    y_face_nodes = np.stack(
        [node(i, j, k), node(i + 1, j, k), node(i + 1, j, k + 1), node(i, j, k + 1)],
        axis=1,
    )
    i, j, k = (_ravel(idx) for idx in np.indices((nx, ny, nz + 1)))
    z_face_nodes = np.stack(
        [node(i, j, k), node(i + 1, j, k), node(i + 1, j + 1, k), node(i, j + 1, k)],
        axis=1,
    )

    num_x_faces = (nx + 1) * ny * nz
    num_y_faces = nx * (ny + 1) * nz
    num_z_faces = nx * ny * (nz + 1)
    normals = np.zeros((num_x_faces + num_y_faces + num_z_faces, 3))
    normals[:num_x_faces, 0] = 1.0
    normals[num_x_faces : num_x_faces + num_y_faces, 1] = 1.0
    normals[num_x_faces + num_y_faces :, 2] = 1.0
    areas = np.concatenate(
        [
            np.full(num_x_faces, dy * dz),
            np.full(num_y_faces, dx * dz),
            np.full(num_z_faces, dx * dy),
        ]
    )

    y_offset = num_x_faces
    z_offset = num_x_faces + num_y_faces
    i, j, k = (_ravel(idx) for idx in np.indices((nx, ny, nz)))
    cell_faces = np.stack(
        [
            i + (nx + 1) * (j + ny * k),
            i + 1 + (nx + 1) * (j + ny * k),
            y_offset + i + nx * (j + (ny + 1) * k),
            y_offset + i + nx * (j + 1 + (ny + 1) * k),
            z_offset + i + nx * (j + ny * k),
            z_offset + i + nx * (j + ny * (k + 1)),
        ],
        axis=1,
    )
    return {
        "face_nodes": np.concatenate([x_face_nodes, y_face_nodes, z_face_nodes]),
        "normals": normals,
        "areas": areas,
        "cell_faces": cell_faces,
        "cell_index": np.stack([i, j, k], axis=1),
        "node_index": np.stack(
            [_ravel(idx) for idx in np.indices((nx + 1, ny + 1, nz + 1))], axis=1
        ),
    }


def build_cartesian_grid(
    cell_counts: typing.Sequence[int],
    cell_dimensions: typing.Union[float, typing.Sequence[float]] = 1.0,
    origin: typing.Optional[typing.Sequence[float]] = None,
    include_nodes: bool = True,
) -> Grid:
    """
    Build a 2D or 3D Cartesian grid with full cell/face/node topology.

    Cells are numbered with x varying fastest, then y, then z. Every cell is bounded by
    `2 * dimensions` faces ordered (x-, x+, y-, y+[, z-, z+]), with unit normals along
    the positive axes.

    :param cell_counts: Number of cells along each axis, `(nx, ny)` or `(nx, ny, nz)`.
    :param cell_dimensions: Cell size along each axis, or a single size for all axes.
    :param origin: Coordinates of the grid's lower corner. Defaults to the origin.
    :param include_nodes: Whether to keep node coordinates and face-to-node topology.
        Without them, cell geometry can only be extracted from face areas.
    :return: The grid.
    """
    cell_counts = tuple(int(count) for count in cell_counts)
    dimensions = len(cell_counts)
    if dimensions not in (2, 3):
        raise ShapeError(f"Cartesian grids must be 2D or 3D, got {dimensions} axes.")
    if any(count < 1 for count in cell_counts):
        raise ShapeError(f"Cell counts must be positive, got {cell_counts}.")

    spacing = np.broadcast_to(
        np.asarray(cell_dimensions, dtype=float), (dimensions,)
    ).copy()
    if np.any(spacing <= 0):
        raise ShapeError(f"Cell dimensions must be positive, got {tuple(spacing)}.")
    lower = np.zeros(dimensions) if origin is None else np.asarray(origin, dtype=float)
    if lower.shape != (dimensions,):
        raise ShapeError(f"Origin must have {dimensions} coordinates.")

    if dimensions == 2:
        topology = _build_2D_topology(cell_counts, tuple(spacing))  # type: ignore[arg-type]
    else:
        topology = _build_3D_topology(cell_counts, tuple(spacing))  # type: ignore[arg-type]

    num_cells = int(np.prod(cell_counts))
    faces_per_cell = 2 * dimensions
    nodes_per_face = topology["face_nodes"].shape[1]
    centroids = lower + (topology["cell_index"] + 0.5) * spacing
    cells = Cells(
        face_pos=np.arange(num_cells + 1) * faces_per_cell,
        faces=topology["cell_faces"].reshape(-1),
        volumes=np.full(num_cells, np.prod(spacing)),
        centroids=centroids,
    )

    if include_nodes:
        num_faces = topology["face_nodes"].shape[0]
        faces = Faces(
            areas=topology["areas"],
            normals=topology["normals"],
            node_pos=np.arange(num_faces + 1) * nodes_per_face,
            nodes=topology["face_nodes"].reshape(-1),
        )
        nodes: typing.Optional[Nodes] = Nodes(
            coords=lower + topology["node_index"] * spacing
        )
    else:
        faces = Faces(areas=topology["areas"], normals=topology["normals"])
        nodes = None

    logger.debug(
        f"Built {dimensions}D Cartesian grid with {num_cells} cells "
        f"({'with' if include_nodes else 'without'} nodes)"
    )
    return Grid(dimensions=dimensions, cells=cells, faces=faces, nodes=nodes)


def embed_fractures(
    grid: Grid,
    fracture_centroids: typing.Sequence[typing.Any],
    fracture_permeabilities: typing.Sequence[typing.Any],
    aperture: float,
    height: typing.Optional[float] = None,
    cell_lengths: typing.Optional[typing.Sequence[typing.Any]] = None,
) -> Grid:
    """
    Return a copy of `grid` with embedded fracture sub-grids appended after its cells.

    Fractures are numbered from 1 in the order given. The cells of each fracture get
    consecutive global indices following the host cells (and the previous fractures),
    carry no faces, and have volume `length * aperture` (times `height` in 3D).

    :param grid: Host grid. Must not already carry fractures.
    :param fracture_centroids: Per fracture, the centroids of its cells ordered along the fracture.
    :param fracture_permeabilities: Per fracture, the permeability of each of its cells (or a scalar).
    :param aperture: Fracture aperture shared by all fractures.
    :param height: Fracture height shared by all fractures.
    :param cell_lengths: Per fracture, optional explicit cell lengths (or `None`).
    :return: The grid with fractures.
    """
    if grid.has_fractures:
        raise DataError("Grid already carries embedded fractures.")
    if len(fracture_centroids) != len(fracture_permeabilities):
        raise ShapeError("Each fracture needs both centroids and permeabilities.")
    if cell_lengths is not None and len(cell_lengths) != len(fracture_centroids):
        raise ShapeError("Fracture cell lengths must be given for every fracture.")
    if aperture <= 0:
        raise DataError(f"Fracture aperture must be positive, got {aperture}.")

    fractures: typing.Dict[int, FractureGrid] = {}
    start = grid.num_cells
    for number, (centroids, permeability) in enumerate(
        zip(fracture_centroids, fracture_permeabilities), start=1
    ):
        centroids = array(centroids, ndmin=2)
        if centroids.shape[1] != grid.dimensions:
            raise ShapeError(
                f"Fracture {number} centroids must have {grid.dimensions} coordinates."
            )
        count = centroids.shape[0]
        fractures[number] = FractureGrid(
            start=start,
            centroids=centroids,
            permeability=np.broadcast_to(array(permeability), (count,)),
            cell_lengths=None if cell_lengths is None else cell_lengths[number - 1],
        )
        start += count

    fracture_cells = list(fractures.values())
    new_centroids = np.concatenate([fracture.centroids for fracture in fracture_cells])
    new_volumes = []
    for fracture in fracture_cells:
        if fracture.cell_lengths is not None:
            lengths = fracture.cell_lengths
        elif fracture.num_cells > 1:
            lengths = np.linalg.norm(np.gradient(fracture.centroids, axis=0), axis=1)
        else:
            lengths = np.ones(1)
        volume = lengths * aperture
        if grid.dimensions == 3 and height is not None:
            volume = volume * height
        new_volumes.append(volume)

    added = new_centroids.shape[0]
    face_pos = np.concatenate(
        [grid.cells.face_pos, np.full(added, grid.cells.face_pos[-1])]
    )
    cells = Cells(
        face_pos=index_array(face_pos),
        faces=grid.cells.faces,
        volumes=np.concatenate([grid.cells.volumes, *new_volumes]),
        centroids=np.concatenate([grid.cells.centroids, new_centroids]),
    )
    logger.debug(f"Embedded {len(fractures)} fracture(s) with {added} cells in total")
    return Grid(
        dimensions=grid.dimensions,
        cells=cells,
        faces=grid.faces,
        nodes=grid.nodes,
        matrix_cell_count=grid.num_cells,
        fractures=fractures,
        fracture_aperture=aperture,
        fracture_height=height,
    )
