__all__ = [
    "WellIndexError",
    "ValidationError",
    "DataError",
    "ConfigError",
    "ShapeError",
    "GeometryError",
    "UnsupportedGeometryError",
    "ComputationError",
    "WellRadiusError",
    "SkinError",
]


class WellIndexError(Exception):
    """Base class for all wellindex-related errors."""

    pass


class ValidationError(WellIndexError, ValueError):
    """Raised when input data fails validation checks."""

    pass


class DataError(ValidationError):
    """Raised when rock or grid data is missing or malformed."""

    pass


class ConfigError(ValidationError):
    """Raised for unknown inner products, malformed direction codes and other bad options."""

    pass


class ShapeError(ValidationError):
    """Raised when per-perforation inputs do not match the number of perforations."""

    pass


class GeometryError(WellIndexError):
    """Raised when cell geometry cannot be extracted for a perforated cell."""

    pass


class UnsupportedGeometryError(GeometryError, NotImplementedError):
    """Raised for geometric configurations the well models do not cover (e.g. 3D fracture hosts)."""

    pass


class ComputationError(WellIndexError):
    """Raised when there is an error during numerical computations."""

    pass


class WellRadiusError(ComputationError):
    """Raised when the equivalent radius is smaller than the wellbore radius."""

    pass


class SkinError(ComputationError):
    """Raised when a large negative skin factor makes the well index non-positive."""

    pass
