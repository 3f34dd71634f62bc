from . import base, cartesian
from .base import *  # noqa
from .cartesian import *  # noqa

__all__ = [*base.__all__, *cartesian.__all__]
