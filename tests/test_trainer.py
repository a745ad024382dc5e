import math

import pytest
import torch

from neural_visualizer.config import Family, Hyperparameters
from neural_visualizer.data import generate_dataset
from neural_visualizer.errors import TrainerBuildError, TrainerStepError
from neural_visualizer.models import ConvolutionalNet, FullyConnectedNet, RecurrentNet, build_model
from neural_visualizer.topology import derive_layer_widths
from neural_visualizer.trainer import _batches, build_trainer

SMALL = Hyperparameters(hidden_units=8, filters=2, batch_size=8)


@pytest.mark.parametrize("family", list(Family))
def test_one_epoch_per_family(family):
    torch.manual_seed(0)
    xs, ys = generate_dataset(family, sample_count=17, seed=0)
    handle = build_trainer(family, SMALL)
    try:
        history = handle.fit(xs, ys, batch_size=SMALL.batch_size)
        assert math.isfinite(history['loss'])
        assert 0.0 <= history['accuracy'] <= 1.0

        widths = derive_layer_widths(family, SMALL)
        weights = handle.observed_weights(widths)
        assert weights
        for (layer, source, dest), value in weights.items():
            assert source < widths[layer] and dest < widths[layer + 1]
            assert math.isfinite(value)
    finally:
        handle.dispose()


@pytest.mark.parametrize("family, model_type", [
    ('mlp', FullyConnectedNet),
    ('cnn', ConvolutionalNet),
    ('rnn', RecurrentNet),
])
def test_build_model(family, model_type):
    assert isinstance(build_model(family, SMALL), model_type)


def test_output_shapes():
    assert FullyConnectedNet(4)(torch.zeros(3, 10)).shape == (3, 1)
    assert ConvolutionalNet(2)(torch.zeros(3, 784)).shape == (3, 10)
    assert RecurrentNet(4)(torch.zeros(3, 20, 10)).shape == (3, 1)


def test_dispose_is_idempotent_and_final():
    handle = build_trainer('mlp', SMALL)
    handle.dispose()
    handle.dispose()
    assert handle.disposed
    with pytest.raises(TrainerStepError):
        handle.fit(torch.zeros(4, 10), torch.zeros(4, 1), batch_size=2)
    with pytest.raises(TrainerStepError):
        handle.observed_weights((10, 8, 4, 1))


def test_shape_mismatch_is_a_step_error():
    handle = build_trainer('mlp', SMALL)
    try:
        with pytest.raises(TrainerStepError):
            handle.fit(torch.zeros(4, 3), torch.zeros(4, 1), batch_size=2)
    finally:
        handle.dispose()


def test_unknown_family_is_a_build_error():
    with pytest.raises(TrainerBuildError):
        build_trainer('transformer', SMALL)


@pytest.mark.parametrize("count, size, expected", [
    (17, 8, [(0, 8), (8, 17)]),
    (16, 8, [(0, 8), (8, 16)]),
    (5, 1, [(0, 2), (2, 5)]),
    (1, 16, [(0, 1)]),
    (0, 4, []),
])
def test_batches_never_leave_a_single_sample(count, size, expected):
    assert _batches(count, size) == expected
