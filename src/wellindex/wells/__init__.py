"""Well index models and their geometric building blocks."""

from . import completion, constants, depth, edfm, geometry, peaceman, perforations, radius
from .constants import *  # noqa
from .geometry import *  # noqa
from .perforations import *  # noqa
from .peaceman import *  # noqa
from .edfm import *  # noqa
from .radius import *  # noqa
from .depth import *  # noqa
from .completion import *  # noqa

__all__ = [
    *constants.__all__,
    *geometry.__all__,
    *perforations.__all__,
    *peaceman.__all__,
    *edfm.__all__,
    *radius.__all__,
    *depth.__all__,
    *completion.__all__,
]
