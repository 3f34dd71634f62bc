"""Well indices and auxiliary quantities of a set of perforations."""

import logging
import typing

import attrs
import numpy as np

from wellindex.config import Config
from wellindex.constants import c
from wellindex.errors import ShapeError
from wellindex.grids.base import Grid, array
from wellindex.rock import Rock
from wellindex.types import (
    DirectionLike,
    FloatArray,
    GravityVector,
    IndexArray,
    InnerProduct,
    Orientation,
)
from wellindex.wells.depth import compute_depth_offsets
from wellindex.wells.edfm import compute_fracture_well_index
from wellindex.wells.peaceman import compute_matrix_well_index
from wellindex.wells.perforations import (
    broadcast_directions,
    broadcast_perforation_values,
    normalize_cells,
)
from wellindex.wells.radius import compute_representative_radius

logger = logging.getLogger(__name__)

__all__ = ["WellCompletion", "compute_well_completion"]


@attrs.frozen(eq=False)
class WellCompletion:
    """Per-perforation well data, aligned with the perforated cells."""

    cells: IndexArray
    """Perforated cells, in perforation order."""
    directions: typing.Tuple[Orientation, ...]
    """Direction of each perforation."""
    radius: FloatArray
    """Wellbore radius of each perforation."""
    skin: FloatArray
    """Skin factor of each perforation."""
    well_index: FloatArray
    """Well index of each perforation."""
    representative_radius: FloatArray
    """Representative radius of each perforation, for shear-rate calculations."""
    depth_offset: FloatArray
    """Depth of each perforation relative to `reference_depth`."""
    reference_depth: float
    """Depth at which the bottom hole pressure is defined."""
    is_fracture: np.typing.NDArray[np.bool_]
    """Whether each perforation connects the well to an embedded fracture cell."""

    def __len__(self) -> int:
        return self.cells.size


def _per_perforation(value: typing.Any, count: int, name: str) -> FloatArray:
    values = array(value).reshape(-1)
    if values.size != count:
        raise ShapeError(
            f"Provided {name} should be one entry per perforated cell "
            f"({values.size} given for {count} perforations)."
        )
    return values


def compute_well_completion(
    grid: Grid,
    rock: typing.Optional[Rock],
    cells: typing.Any,
    *,
    radius: typing.Optional[typing.Any] = None,
    direction: typing.Optional[DirectionLike] = None,
    skin: typing.Any = 0.0,
    permeability_thickness: typing.Optional[typing.Any] = None,
    well_index: typing.Optional[typing.Any] = None,
    inner_product: typing.Optional[typing.Union[str, InnerProduct]] = None,
    gravity: typing.Optional[GravityVector] = None,
    reference_depth: typing.Optional[float] = None,
    config: typing.Optional[Config] = None,
) -> WellCompletion:
    """
    Compute well indices, representative radii and depth offsets of a well's perforations.

    Perforations in embedded fracture cells get fracture-well indices, all others
    Peaceman (matrix) well indices. Supplied non-negative well indices are kept as is.

    :param grid: The grid.
    :param rock: Rock properties carrying permeability. Only needed when matrix well
        indices have to be computed.
    :param cells: Perforated cells, as indices or as a boolean mask over all cells.
    :param radius: Wellbore radius, scalar or one per perforation. Defaults to `config.radius`.
    :param direction: Perforation direction(s). Defaults to `config.direction`.
    :param skin: Skin factor, scalar or one per perforation.
    :param permeability_thickness: Permeability-thickness per perforation, negative
        entries meaning "compute from the grid".
    :param well_index: Well index per perforation, negative entries meaning "compute".
    :param inner_product: Inner product of the flow solver. Defaults to `config.inner_product`.
    :param gravity: Gravity vector for depth projections. Defaults to `config.gravity`.
    :param reference_depth: Reference depth. Defaults to the shallowest point of the grid.
    :param config: Run configuration. Defaults to `Config()`.
    :return: The completion data.
    """
    config = config or Config()
    cells = normalize_cells(grid, cells)
    count = cells.size

    directions = broadcast_directions(
        config.direction if direction is None else direction, count
    )
    radius = broadcast_perforation_values(
        config.radius if radius is None else radius, count, "radius"
    )
    skin = broadcast_perforation_values(skin, count, "skin")
    if permeability_thickness is not None:
        permeability_thickness = _per_perforation(
            permeability_thickness, count, "permeability-thickness"
        )
    if well_index is None:
        well_index = np.full(count, c.PERMEABILITY_THICKNESS_SENTINEL, dtype=radius.dtype)
    else:
        well_index = _per_perforation(well_index, count, "well index").copy()

    is_fracture = grid.is_fracture_cell(cells)
    compute = well_index < 0

    fracture = compute & is_fracture
    if np.any(fracture):
        well_index[fracture] = compute_fracture_well_index(
            grid,
            radius[fracture],
            cells[fracture],
            skin=skin[fracture],
            check_positive=config.check_fracture_well_index,
        )

    matrix = compute & ~is_fracture
    if np.any(matrix):
        well_index[matrix] = compute_matrix_well_index(
            grid,
            rock,
            radius[matrix],
            [d for d, keep in zip(directions, matrix) if keep],
            cells[matrix],
            inner_product=config.inner_product if inner_product is None else inner_product,
            skin=skin[matrix],
            permeability_thickness=(
                None if permeability_thickness is None else permeability_thickness[matrix]
            ),
            geometry_mode=config.geometry_mode,
        )

    representative_radius = compute_representative_radius(
        grid,
        radius,
        directions,
        cells,
        fracture_radius_policy=config.fracture_radius_policy,
        geometry_mode=config.geometry_mode,
    )
    depth_offset, reference_depth = compute_depth_offsets(
        grid,
        cells,
        config.gravity if gravity is None else gravity,
        reference_depth,
    )
    logger.debug(
        f"Completed {count} perforations: {int(np.count_nonzero(fracture))} fracture and "
        f"{int(np.count_nonzero(matrix))} matrix well indices computed, "
        f"{int(np.count_nonzero(~compute))} supplied"
    )
    return WellCompletion(
        cells=cells,
        directions=tuple(directions),
        radius=radius,
        skin=skin,
        well_index=well_index,
        representative_radius=representative_radius,
        depth_offset=depth_offset,
        reference_depth=reference_depth,
        is_fracture=is_fracture,
    )
