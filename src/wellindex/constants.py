"""Well-model constants"""

from contextvars import ContextVar
import typing

import attrs


__all__ = ["Constant", "Constants", "c", "ConstantsContext", "get_constant"]


@attrs.frozen(slots=True)
class Constant:
    """
    A constant value with optional description and unit.
    """

    value: typing.Any
    """The actual value of the constant."""

    description: typing.Optional[str] = None
    """Optional description of what this constant represents."""

    unit: typing.Optional[str] = None
    """Optional unit of measurement for this constant."""

    def __str__(self) -> str:
        return f"{self.value}{self.unit or ''}"


DEFAULT_CONSTANTS: typing.Dict[str, typing.Union[typing.Any, Constant]] = {
    "TPF_WELL_CONSTANT": Constant(
        value=0.14,
        description="Peaceman well constant for two-point flux consistent inner products",
        unit="dimensionless",
    ),
    "FRACTURE_WELL_CONSTANT": Constant(
        value=0.14,
        description="Equivalent radius factor of the fracture-well line-source model (Moinfar, 2013)",
        unit="dimensionless",
    ),
    "DEFAULT_WELLBORE_RADIUS": Constant(
        value=0.1, description="Default wellbore radius", unit="m"
    ),
    "DEFAULT_WELL_DIRECTION": Constant(
        value="z", description="Default perforation direction"
    ),
    "ACCELERATION_DUE_TO_GRAVITY_M_PER_S2": Constant(
        value=9.80665, description="Standard acceleration due to gravity", unit="m/s²"
    ),
    "PERMEABILITY_THICKNESS_SENTINEL": Constant(
        value=-1.0,
        description="Permeability-thickness (and well index) value meaning 'compute from grid data'",
    ),
    "TWO_DIMENSIONAL_CELL_THICKNESS": Constant(
        value=1.0,
        description="Out-of-plane thickness assumed for cells of two-dimensional grids",
        unit="m",
    ),
}


class Constants:
    """
    Constants used by the well models.

    All constants are stored in an internal dictionary and can be accessed via dot notation.
    Use __getattr__ for value access and __getitem__ for `Constant` object access.
    """

    __slots__ = ("_store",)

    def __new__(cls) -> "Constants":
        instance = super().__new__(cls)
        instance._store = {}
        return instance

    def __init__(self) -> None:
        for name, value in DEFAULT_CONSTANTS.items():
            self[name] = value

    def __getattr__(self, name: str) -> typing.Any:
        """Get a constant's value using dot notation.

        :param name: Name of the constant
        :return: Value of the constant (unwrapped from Constant object)
        :raises AttributeError: If the constant does not exist
        """
        if name.startswith("_"):
            return object.__getattribute__(self, name)

        try:
            return self._store[name].value
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            ) from None

    def __getitem__(self, name: str) -> Constant:
        return self._store[name]

    def __setattr__(self, name: str, value: typing.Union[typing.Any, Constant]) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self[name] = value

    def __setitem__(self, name: str, value: typing.Union[typing.Any, Constant]) -> None:
        if isinstance(value, Constant):
            self._store[name] = value
        else:
            # Wrap raw values in Constant objects
            self._store[name] = Constant(value=value)

    def __contains__(self, name: str) -> bool:
        return name in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(constants={len(self._store)})"

    def get_constant(
        self, name: str, default: typing.Optional[Constant] = None
    ) -> typing.Optional[Constant]:
        """Get a `Constant` object with a default fallback.

        :param name: Name of the constant
        :param default: Default `Constant` if constant doesn't exist
        :return: `Constant` object or default
        """
        return self._store.get(name, default)

    def __call__(self) -> "ConstantsContext":
        """
        Create a context manager that temporarily makes this instance the one
        served by the global `wellindex.c` proxy.
        """
        return ConstantsContext(self)


_constants_context: ContextVar[Constants] = ContextVar(
    "constants_context", default=Constants()
)


class ConstantsContext:
    """
    Context manager for temporary global `Constants` overrides.

    Upon exiting the context, the previous `Constants` instance is restored.
    """

    def __init__(self, constants: Constants) -> None:
        self._new_constants = constants
        self._token = None

    def __enter__(self) -> Constants:
        self._token = _constants_context.set(self._new_constants)
        return self._new_constants

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self._token is not None:
            _constants_context.reset(self._token)


class _ConstantsProxy:
    """Proxy to the current context's `Constants` instance."""

    @property
    def _constants(self) -> Constants:
        return _constants_context.get()

    def __getattr__(self, name: str) -> typing.Any:
        return getattr(self._constants, name)

    def __getitem__(self, name: str) -> Constant:
        return self._constants[name]


c = _ConstantsProxy()
"""Global proxy to access well-model constants."""


def get_constant(name: str) -> typing.Optional[Constant]:
    """Get a `Constant` object by name from the global constants.

    :param name: Name of the constant
    :return: `Constant` object or None if not found
    """
    return c._constants.get_constant(name)
