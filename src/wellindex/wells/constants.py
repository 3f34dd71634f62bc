"""Peaceman well constants for the supported inner products."""

import functools
import typing

import numpy as np
from scipy.interpolate import interp1d

from wellindex._precision import get_dtype
from wellindex.constants import c
from wellindex.types import FloatArray, InnerProduct

__all__ = [
    "WELL_CONSTANT_TABLE",
    "compute_aspect_ratio",
    "interpolate_well_constant",
    "compute_well_constant",
]

WELL_CONSTANT_TABLE: typing.Tuple[typing.Tuple[int, float], ...] = (
    (1, 0.292),
    (2, 0.278),
    (3, 0.262),
    (4, 0.252),
    (5, 0.244),
    (8, 0.231),
    (9, 0.229),
    (16, 0.220),
    (17, 0.219),
    (32, 0.213),
    (33, 0.213),
    (64, 0.210),
    (65, 0.210),
)
"""Well constant of mixed (mimetic/RT type) inner products against the rounded cell aspect ratio."""


@functools.lru_cache(maxsize=1)
def _well_constant_interpolator() -> interp1d:
    ratios, constants = zip(*WELL_CONSTANT_TABLE)
    return interp1d(
        np.asarray(ratios, dtype=np.float64),
        np.asarray(constants, dtype=np.float64),
        kind="linear",
        bounds_error=False,
        fill_value="extrapolate",  # type: ignore[arg-type]
        assume_sorted=True,
    )


def compute_aspect_ratio(d1: FloatArray, d2: FloatArray) -> FloatArray:
    """
    Rounded cross-section aspect ratio, `max(round(d1/d2), round(d2/d1))`.

    Halves round away from zero.
    """
    d1 = np.asarray(d1, dtype=np.float64)
    d2 = np.asarray(d2, dtype=np.float64)
    return np.maximum(np.floor(d1 / d2 + 0.5), np.floor(d2 / d1 + 0.5))


def interpolate_well_constant(ratio: typing.Union[float, FloatArray]) -> FloatArray:
    """
    Interpolate the mixed inner product well constant for an aspect ratio.

    Ratios outside the tabulated range are extrapolated linearly from the two
    nearest table entries.
    """
    return np.asarray(_well_constant_interpolator()(ratio), dtype=get_dtype())


def compute_well_constant(
    d1: FloatArray,
    d2: FloatArray,
    inner_product: typing.Union[str, InnerProduct],
) -> FloatArray:
    """
    Compute the Peaceman well constant of each perforation.

    Two-point flux consistent inner products ('tpf', 'quasi-tpf') use 0.14
    regardless of cell shape. Mixed inner products ('rt', 'simple', 'quasi-rt')
    look the constant up from `WELL_CONSTANT_TABLE` using the rounded aspect
    ratio of the cross-section `(d1, d2)`.

    :param d1: First cross-sectional extent of each perforated cell.
    :param d2: Second cross-sectional extent of each perforated cell.
    :param inner_product: Inner product name.
    :return: Well constant per perforation.
    :raises ConfigError: If the inner product is unknown.
    """
    inner_product = InnerProduct.parse(inner_product)
    d1 = np.asarray(d1)
    if inner_product.is_two_point:
        return np.full(d1.shape, c.TPF_WELL_CONSTANT, dtype=get_dtype())

    ratio = compute_aspect_ratio(d1, d2)
    return interpolate_well_constant(ratio)
