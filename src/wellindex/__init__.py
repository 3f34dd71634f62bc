"""
*wellindex*

Well indices for matrix and embedded-fracture (EDFM) perforations of reservoir grids.
"""

from ._precision import *  # noqa
from .constants import *  # noqa
from .errors import *  # noqa
from .types import *  # noqa
from .config import *  # noqa
from .grids import *  # noqa
from .rock import *  # noqa
from .wells import *  # noqa

__version__ = "0.1.0"
