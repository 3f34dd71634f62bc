import typing

import attrs
import numpy as np

from wellindex._precision import get_dtype
from wellindex.errors import DataError, GeometryError, ShapeError
from wellindex.types import FloatArray, GeometryMode, IndexArray

__all__ = [
    "array",
    "index_array",
    "Nodes",
    "Faces",
    "Cells",
    "FractureGrid",
    "Grid",
]


def array(obj: typing.Any, **kwargs: typing.Any):
    """
    Wrapper around np.array to enforce global dtype.

    :param obj: Object to convert to numpy array
    :param kwargs: Additional keyword arguments for `np.array`
    :return: return value of `np.array`
    """
    kwargs.setdefault("dtype", get_dtype())
    return np.array(obj, **kwargs)


def index_array(obj: typing.Any) -> IndexArray:
    """Convert `obj` to a flat array of integer indices."""
    return np.asarray(obj, dtype=np.int64).reshape(-1)


def _coordinates(obj: typing.Any) -> FloatArray:
    values = array(obj)
    if values.ndim == 1:
        values = values.reshape(-1, 1)
    return values


def _optional_index_array(obj: typing.Any) -> typing.Optional[IndexArray]:
    return None if obj is None else index_array(obj)


def _check_offsets(offsets: IndexArray, entries: IndexArray, what: str) -> None:
    if offsets.size == 0 or offsets[0] != 0:
        raise ShapeError(f"{what} offsets must start at 0.")
    if np.any(np.diff(offsets) < 0):
        raise ShapeError(f"{what} offsets must be non-decreasing.")
    if offsets[-1] != entries.size:
        raise ShapeError(
            f"Last {what} offset ({offsets[-1]}) does not match the number of entries ({entries.size})."
        )


@attrs.frozen(eq=False)
class Nodes:
    """Grid node coordinates."""

    coords: FloatArray = attrs.field(converter=_coordinates)
    """Node coordinates, one row per node."""

    @property
    def num(self) -> int:
        return self.coords.shape[0]


@attrs.frozen(eq=False)
class Faces:
    """
    Grid faces.

    Face-to-node topology is stored in compressed form: the nodes of face `f` are
    `nodes[node_pos[f]:node_pos[f + 1]]`.
    """

    areas: FloatArray = attrs.field(converter=lambda value: array(value).reshape(-1))
    """Face areas."""
    normals: FloatArray = attrs.field(converter=_coordinates)
    """Face normals, one row per face. Only their direction is used."""
    node_pos: typing.Optional[IndexArray] = attrs.field(
        default=None, converter=_optional_index_array
    )
    """Offsets into `nodes`. `None` when the grid carries no node topology."""
    nodes: typing.Optional[IndexArray] = attrs.field(
        default=None, converter=_optional_index_array
    )
    """Node indices of all faces, concatenated."""

    def __attrs_post_init__(self) -> None:
        if self.normals.shape[0] != self.areas.size:
            raise ShapeError("Face normals and areas must have one entry per face.")
        if (self.node_pos is None) != (self.nodes is None):
            raise ShapeError("Face node offsets and face nodes must be given together.")
        if self.node_pos is not None:
            if self.node_pos.size != self.areas.size + 1:
                raise ShapeError("Face node offsets must have one entry per face plus one.")
            _check_offsets(self.node_pos, self.nodes, "face node")  # type: ignore[arg-type]

    @property
    def num(self) -> int:
        return self.areas.size

    @property
    def has_nodes(self) -> bool:
        return self.node_pos is not None


@attrs.frozen(eq=False)
class Cells:
    """
    Grid cells.

    The faces of cell `c` are `faces[face_pos[c]:face_pos[c + 1]]`.
    """

    face_pos: IndexArray = attrs.field(converter=index_array)
    """Offsets into `faces`."""
    faces: IndexArray = attrs.field(converter=index_array)
    """Face indices of all cells, concatenated."""
    volumes: FloatArray = attrs.field(converter=lambda value: array(value).reshape(-1))
    """Cell volumes (cell areas for two-dimensional grids)."""
    centroids: FloatArray = attrs.field(converter=_coordinates)
    """Cell centroids, one row per cell."""

    def __attrs_post_init__(self) -> None:
        if self.face_pos.size != self.volumes.size + 1:
            raise ShapeError("Cell face offsets must have one entry per cell plus one.")
        if self.centroids.shape[0] != self.volumes.size:
            raise ShapeError("Cell centroids and volumes must have one entry per cell.")
        _check_offsets(self.face_pos, self.faces, "cell face")

    @property
    def num(self) -> int:
        return self.volumes.size

    def face_counts(self, cells: IndexArray) -> IndexArray:
        """Number of faces bounding each of `cells`."""
        return self.face_pos[cells + 1] - self.face_pos[cells]


@attrs.frozen(eq=False)
class FractureGrid:
    """
    An embedded fracture (EDFM) sub-grid.

    Its cells occupy the contiguous global index range `[start, start + num_cells)`
    of the host grid.
    """

    start: int = attrs.field(converter=int, validator=attrs.validators.ge(0))
    """Global index of the first fracture cell."""
    centroids: FloatArray = attrs.field(converter=_coordinates)
    """Fracture cell centroids, ordered along the fracture."""
    permeability: FloatArray = attrs.field(converter=array)
    """
    Fracture cell permeability.

    A one-dimensional array, or a table whose first column is used.
    """
    cell_lengths: typing.Optional[FloatArray] = attrs.field(
        default=None,
        converter=attrs.converters.optional(lambda value: array(value).reshape(-1)),
    )
    """In-plane length of each fracture cell. Derived from centroid spacing when unset."""

    def __attrs_post_init__(self) -> None:
        if self.permeability.ndim > 1:
            object.__setattr__(self, "permeability", self.permeability[:, 0].copy())
        if self.permeability.size != self.num_cells:
            raise DataError(
                f"Fracture permeability has {self.permeability.size} entries for {self.num_cells} cells."
            )
        if self.cell_lengths is not None and self.cell_lengths.size != self.num_cells:
            raise ShapeError(
                f"Fracture cell lengths have {self.cell_lengths.size} entries for {self.num_cells} cells."
            )

    @property
    def num_cells(self) -> int:
        return self.centroids.shape[0]

    @property
    def stop(self) -> int:
        """One past the last global index of the fracture."""
        return self.start + self.num_cells

    def contains(self, cell: int) -> bool:
        return self.start <= cell < self.stop

    def local_index(self, cell: int) -> int:
        """
        Local index of global cell `cell` within this fracture.

        :raises GeometryError: If the cell does not belong to the fracture.
        """
        if not self.contains(cell):
            raise GeometryError(
                f"Cell {cell} is outside fracture cell range [{self.start}, {self.stop})."
            )
        return cell - self.start


def _fracture_mapping(value: typing.Any) -> typing.Dict[int, FractureGrid]:
    if value is None:
        return {}
    return {int(key): fracture for key, fracture in dict(value).items()}


@attrs.frozen(eq=False)
class Grid:
    """
    Read-only description of a (possibly unstructured) reservoir grid.

    Cells of embedded fractures, when present, are numbered after the matrix cells
    and are part of `cells`.
    """

    dimensions: int = attrs.field(
        converter=int, validator=attrs.validators.in_((2, 3))
    )
    """Spatial dimension of the grid (2 or 3)."""
    cells: Cells
    faces: Faces
    nodes: typing.Optional[Nodes] = None
    """Node coordinates. `None` for grids described by face areas only."""
    matrix_cell_count: typing.Optional[int] = attrs.field(
        default=None, converter=attrs.converters.optional(int)
    )
    """Number of matrix cells. Defaults to all cells."""
    fractures: typing.Dict[int, FractureGrid] = attrs.field(
        factory=dict, converter=_fracture_mapping
    )
    """Embedded fracture sub-grids keyed by fracture id."""
    fracture_aperture: typing.Optional[float] = attrs.field(
        default=None, converter=attrs.converters.optional(float)
    )
    """Fracture aperture, shared by all fractures of the grid."""
    fracture_height: typing.Optional[float] = attrs.field(
        default=None, converter=attrs.converters.optional(float)
    )
    """Fracture height, shared by all fractures of the grid (two-dimensional hosts)."""

    def __attrs_post_init__(self) -> None:
        if self.cells.centroids.shape[1] != self.dimensions:
            raise ShapeError(
                f"Cell centroids have {self.cells.centroids.shape[1]} columns for a {self.dimensions}D grid."
            )
        if self.nodes is not None and not self.faces.has_nodes:
            raise ShapeError("Grid nodes were given without face-to-node topology.")
        if self.matrix_cell_count is None:
            object.__setattr__(self, "matrix_cell_count", self.cells.num)
        elif not 0 <= self.matrix_cell_count <= self.cells.num:
            raise ShapeError(
                f"Matrix cell count {self.matrix_cell_count} exceeds the {self.cells.num} grid cells."
            )
        for fracture_id, fracture in self.fractures.items():
            if fracture.start < self.matrix_cell_count or fracture.stop > self.cells.num:  # type: ignore[operator]
                raise ShapeError(
                    f"Fracture {fracture_id} cells [{fracture.start}, {fracture.stop}) "
                    f"fall outside the fracture cell range [{self.matrix_cell_count}, {self.cells.num})."
                )
        if self.fractures and self.fracture_aperture is None:
            raise DataError("Grids with embedded fractures require a fracture aperture.")

    @property
    def num_cells(self) -> int:
        return self.cells.num

    @property
    def has_nodes(self) -> bool:
        return self.nodes is not None

    @property
    def has_fractures(self) -> bool:
        return bool(self.fractures)

    @property
    def geometry_mode(self) -> GeometryMode:
        """Geometry extraction mode supported by the grid's data."""
        return GeometryMode.NODES if self.has_nodes else GeometryMode.FACE_AREAS

    def is_fracture_cell(self, cells: IndexArray) -> np.typing.NDArray[np.bool_]:
        """Mask of the `cells` that belong to embedded fractures."""
        cells = index_array(cells)
        if not self.has_fractures:
            return np.zeros(cells.shape, dtype=bool)
        return cells >= self.matrix_cell_count  # type: ignore[operator]

    def check_cells(self, cells: IndexArray) -> IndexArray:
        """
        Validate global cell indices.

        :raises ShapeError: If any index is outside the grid.
        """
        cells = index_array(cells)
        invalid = (cells < 0) | (cells >= self.num_cells)
        if np.any(invalid):
            position = int(np.flatnonzero(invalid)[0])
            raise ShapeError(
                f"Perforation {position} references cell {cells[position]}, "
                f"outside a grid of {self.num_cells} cells."
            )
        return cells
