import typing

import attrs

from wellindex.constants import c
from wellindex.types import FractureRadiusPolicy, GeometryMode, InnerProduct, Orientation

__all__ = ["Config"]


def _as_gravity(value: typing.Sequence[float]) -> typing.Tuple[float, ...]:
    return tuple(float(component) for component in value)


def _default_gravity() -> typing.Tuple[float, float, float]:
    return (0.0, 0.0, float(c.ACCELERATION_DUE_TO_GRAVITY_M_PER_S2))


@attrs.frozen
class Config:
    """Options shared by all well index computations of a run."""

    inner_product: InnerProduct = attrs.field(
        default=InnerProduct.TPF, converter=InnerProduct.parse
    )
    """Inner product used by the flow solver. Selects the Peaceman well constant."""
    radius: float = attrs.field(
        factory=lambda: float(c.DEFAULT_WELLBORE_RADIUS),
        validator=attrs.validators.gt(0),
    )
    """Wellbore radius used when none is given for a well."""
    direction: Orientation = attrs.field(
        factory=lambda: Orientation.parse(c.DEFAULT_WELL_DIRECTION),
        converter=Orientation.parse,
    )
    """Perforation direction used when none is given for a well."""
    gravity: typing.Tuple[float, ...] = attrs.field(
        factory=_default_gravity,
        converter=_as_gravity,
        validator=attrs.validators.min_len(1),
    )
    """
    Gravity vector used for depth projections.

    Only its direction matters. A zero vector means depth is measured along the
    last spatial axis of the grid.
    """
    fracture_radius_policy: FractureRadiusPolicy = attrs.field(
        default=FractureRadiusPolicy.PER_PERFORATION, converter=FractureRadiusPolicy
    )
    """
    Which perforations receive the aperture-based representative radius on grids
    with embedded fractures.

    `FractureRadiusPolicy.WHOLE_WELL` reproduces the legacy behaviour of applying it
    to every perforation of the well, matrix perforations included.
    """
    check_fracture_well_index: bool = True
    """Whether fracture-well indices are subject to the same positivity check as matrix ones."""
    geometry_mode: typing.Optional[GeometryMode] = attrs.field(
        default=None,
        converter=attrs.converters.optional(GeometryMode),
    )
    """Cell geometry extraction mode. `None` infers it from whether the grid carries nodes."""
