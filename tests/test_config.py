import pytest

from neural_visualizer.config import CanvasSize, Family, Hyperparameters
from neural_visualizer.errors import InvalidHyperparametersError, InvalidTopologyError


class TestFamily:

    @pytest.mark.parametrize("value, expected", [
        ("fully_connected", Family.FULLY_CONNECTED),
        ("mlp", Family.FULLY_CONNECTED),
        ("ann", Family.FULLY_CONNECTED),
        (" CNN ", Family.CONVOLUTIONAL),
        ("convolutional", Family.CONVOLUTIONAL),
        ("rnn", Family.RECURRENT),
        (Family.RECURRENT, Family.RECURRENT),
    ])
    def test_parse(self, value, expected):
        assert Family.parse(value) is expected

    @pytest.mark.parametrize("value", ["transformer", "", None, 3])
    def test_parse_unknown(self, value):
        with pytest.raises(InvalidTopologyError):
            Family.parse(value)

    def test_short_name(self):
        assert Family.CONVOLUTIONAL.short_name == 'cnn'


class TestHyperparameters:

    def test_defaults(self):
        params = Hyperparameters()
        assert params.learning_rate == 0.01
        assert params.batch_size == 16
        assert params.epochs == 10
        assert params.hidden_units == 32
        assert params.filters == 8

    @pytest.mark.parametrize("changes", [
        {'hidden_units': 0},
        {'hidden_units': 129},
        {'filters': 33},
        {'epochs': 101},
        {'batch_size': 2.5},
        {'learning_rate': 0.5},
        {'learning_rate': float('nan')},
        {'learning_rate': True},
        {'epochs': '10'},
    ])
    def test_rejects_out_of_range_or_mistyped(self, changes):
        with pytest.raises(InvalidHyperparametersError):
            Hyperparameters(**changes)

    def test_invalid_hyperparameters_are_value_errors(self):
        with pytest.raises(ValueError):
            Hyperparameters(filters=0)

    def test_from_dict_accepts_camel_case_and_slider_floats(self):
        params = Hyperparameters.from_dict({
            'learningRate': 0.05,
            'batchSize': 32.0,
            'hiddenUnits': '64',
            'epochs': None,
        })
        assert params == Hyperparameters(learning_rate=0.05, batch_size=32, hidden_units=64)
        assert isinstance(params.batch_size, int)

    def test_from_dict_snake_case(self):
        assert Hyperparameters.from_dict({'filters': 4}).filters == 4

    def test_from_dict_rejects_text(self):
        with pytest.raises(InvalidHyperparametersError):
            Hyperparameters.from_dict({'epochs': 'many'})

    def test_replace_validates(self):
        assert Hyperparameters().replace(filters=16).filters == 16
        with pytest.raises(InvalidHyperparametersError):
            Hyperparameters().replace(filters=64)

    def test_to_dict_uses_control_names(self):
        assert Hyperparameters().to_dict() == {
            'learningRate': 0.01,
            'batchSize': 16,
            'epochs': 10,
            'hiddenUnits': 32,
            'filters': 8,
        }


@pytest.mark.parametrize("width, height", [(0, 500), (900, -1)])
def test_canvas_size_must_be_positive(width, height):
    with pytest.raises(ValueError):
        CanvasSize(width, height)
