from contextlib import contextmanager
from contextvars import ContextVar

import numpy as np


__all__ = [
    "get_dtype",
    "set_dtype",
    "with_precision",
]

_wellindex_dtype: ContextVar[np.typing.DTypeLike] = ContextVar(
    "_wellindex_dtype", default=np.float64
)


def get_dtype() -> np.typing.DTypeLike:
    """
    Get the current data type used for well computations.

    This defines the precision of every array allocated by the well models.

    :return: The current data type.
    """
    return _wellindex_dtype.get()


def set_dtype(dtype: np.typing.DTypeLike) -> None:
    """
    Set the default data type for well computations in the current context.

    :param dtype: The data type to set as default.
    """
    _wellindex_dtype.set(dtype)


@contextmanager
def with_precision(dtype: np.typing.DTypeLike):
    """
    Context manager to temporarily set the data type, and hence the precision for well computations.

    :param dtype: The data type to set within the context.
    """
    token = _wellindex_dtype.set(dtype)
    try:
        yield
    finally:
        _wellindex_dtype.reset(token)

