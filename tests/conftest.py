import time

import pytest

from ballsim.data_models import SimulationSettings
from ballsim.model import Model


def wait_for(predicate, timeout=5.0, interval=0.001):
    """Poll `predicate` until it holds or `timeout` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def wait_ticks(model, n, timeout=5.0):
    target = model.tick_count() + n
    assert wait_for(lambda: model.tick_count() >= target, timeout), "simulation made no progress"


@pytest.fixture
def model():
    m = Model()
    yield m
    m.close()


@pytest.fixture
def empty_model():
    m = Model(SimulationSettings(initial_positions=[]))
    yield m
    m.close()
