import numpy as np
import pytest

from wellindex import Rock, build_cartesian_grid, embed_fractures


@pytest.fixture
def cube_grid():
    """Single 10 x 10 x 10 cell."""
    return build_cartesian_grid((1, 1, 1), 10.0)


@pytest.fixture
def isotropic_rock():
    return Rock.from_array([[100.0]])


@pytest.fixture
def box_grid():
    """Two 10 x 20 x 5 cells along x."""
    return build_cartesian_grid((2, 1, 1), (10.0, 20.0, 5.0))


@pytest.fixture
def edfm_grid():
    """
    2 x 2 grid of 5 x 5 cells with one vertical fracture of two cells along x = 5.

    Matrix cells are 0-3, fracture cells 4 and 5.
    """
    host = build_cartesian_grid((2, 2), 5.0)
    return embed_fractures(
        host,
        fracture_centroids=[np.array([[5.0, 2.5], [5.0, 7.5]])],
        fracture_permeabilities=[50.0],
        aperture=0.01,
        height=2.0,
    )


@pytest.fixture
def edfm_rock():
    return Rock.from_array(np.full((4, 1), 100.0))
