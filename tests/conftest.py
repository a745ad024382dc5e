import numpy as np
import pytest
import torch

from neural_visualizer.config import CanvasSize, Hyperparameters
from neural_visualizer.controller import VisualizationController
from neural_visualizer.errors import TrainerStepError


class FakeHandle:
    """Trainer stand-in that records calls instead of touching torch."""

    def __init__(self, fail_at=None, accuracy=0.5):
        self.fail_at = fail_at
        self.accuracy = accuracy
        self.fit_calls = 0
        self.dispose_calls = 0

    @property
    def disposed(self):
        return self.dispose_calls > 0

    def fit(self, xs, ys, batch_size, epochs=1):
        self.fit_calls += 1
        if self.fail_at is not None and self.fit_calls >= self.fail_at:
            raise TrainerStepError("step exploded")
        return {'loss': 1.0 / self.fit_calls, 'accuracy': self.accuracy}

    def observed_weights(self, widths):
        return {(0, 0, 0): 0.85, (0, 1, 0): -0.1}

    def dispose(self):
        self.dispose_calls += 1


def _zeros_dataset(family, sample_count):
    return torch.zeros(sample_count, 10), torch.zeros(sample_count, 1)


@pytest.fixture
def make_handle():
    return FakeHandle


@pytest.fixture
def fake_generate():
    return _zeros_dataset


@pytest.fixture
def hyperparameters():
    return Hyperparameters(hidden_units=8, filters=2, epochs=3, batch_size=4)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def controller(rng):
    return VisualizationController(CanvasSize(900, 500), rng=rng)


@pytest.fixture
def fake_handles():
    return []


@pytest.fixture
def fake_build(fake_handles):
    def build(family, hyperparameters):
        handle = FakeHandle()
        fake_handles.append(handle)
        return handle
    return build
