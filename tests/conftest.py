import numpy as np
import pytest

from pong_sim import Field, new_game


@pytest.fixture
def fld():
    return Field()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def state(rng):
    return new_game(5, 4, rng=rng)
