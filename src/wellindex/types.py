import enum
import typing

import numpy as np
from typing_extensions import TypeAlias

from wellindex.errors import ConfigError


__all__ = [
    "Orientation",
    "InnerProduct",
    "GeometryMode",
    "FractureRadiusPolicy",
    "FloatArray",
    "IndexArray",
    "FloatOrArray",
    "Numeric",
    "CellIndices",
    "DirectionLike",
    "GravityVector",
]

Numeric = typing.Union[int, float, np.floating, np.integer]
FloatArray: TypeAlias = np.typing.NDArray[np.floating]
IndexArray: TypeAlias = np.typing.NDArray[np.integer]
FloatOrArray = typing.Union[float, FloatArray]

CellIndices = typing.Union[typing.Sequence[int], IndexArray, np.typing.NDArray[np.bool_]]
"""Perforated cells, either as global cell indices or as a boolean mask over all cells."""

GravityVector = typing.Sequence[float]
"""Gravity vector, at least as long as the grid dimension."""


class Orientation(enum.Enum):
    """
    Enum representing the direction a perforation traverses its cell.
    """

    X = "x"
    Y = "y"
    Z = "z"

    @classmethod
    def parse(cls, value: typing.Union[str, "Orientation"]) -> "Orientation":
        """
        Resolve a direction code, case-insensitively.

        :param value: 'x', 'y', 'z' (any case) or an `Orientation`.
        :raises ConfigError: If the code is not one of x/y/z.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigError(
                f"Invalid well direction {value!r}. Must be one of 'x', 'y' or 'z'."
            ) from None

    @property
    def axis(self) -> int:
        return ("x", "y", "z").index(self.value)


DirectionLike = typing.Union[str, Orientation, typing.Sequence[typing.Union[str, Orientation]]]
"""A single direction for all perforations, or one direction per perforation."""


class InnerProduct(str, enum.Enum):
    """
    Discretization (inner product) used by the flow solver.

    The choice decides which Peaceman well constant applies to matrix perforations.
    """

    TPF = "tpf"
    QUASI_TPF = "quasi-tpf"
    RT = "rt"
    SIMPLE = "simple"
    QUASI_RT = "quasi-rt"

    @classmethod
    def parse(cls, value: typing.Union[str, "InnerProduct"]) -> "InnerProduct":
        """
        Resolve an inner product name.

        Accepts the canonical names as well as the legacy ``ip_`` prefixed
        spellings (``ip_tpf``, ``ip_quasitpf``, ``ip_rt``, ``ip_simple``, ``ip_quasirt``).

        :raises ConfigError: If the name is not a known inner product.
        """
        if isinstance(value, cls):
            return value

        name = str(value).strip().lower()
        if name.startswith("ip_"):
            name = name[3:]
        name = name.replace("_", "-")
        name = {"quasitpf": "quasi-tpf", "quasirt": "quasi-rt"}.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ConfigError(f"Unknown inner product {value!r}.") from None

    @property
    def is_two_point(self) -> bool:
        return self in (InnerProduct.TPF, InnerProduct.QUASI_TPF)


class GeometryMode(enum.Enum):
    """How the bounding box of a perforated cell is extracted."""

    NODES = "nodes"
    """Bounding box of the cell's nodes. Requires node coordinates."""
    FACE_AREAS = "face_areas"
    """Extents from volume and opposing face areas. Requires hexahedral cells."""


class FractureRadiusPolicy(enum.Enum):
    """Which perforations get the aperture-based representative radius on EDFM grids."""

    PER_PERFORATION = "per_perforation"
    """Only perforations in fracture cells."""
    WHOLE_WELL = "whole_well"
    """Every perforation of a well on a grid carrying fractures."""
