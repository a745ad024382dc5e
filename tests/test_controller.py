import pytest

from neural_visualizer.config import CanvasSize, Hyperparameters
from neural_visualizer.controller import VisualizationController
from neural_visualizer.errors import InvalidTopologyError, NotInitializedError


def segments(trace):
    xs, ys = trace.x, trace.y
    return {((xs[i], ys[i]), (xs[i + 1], ys[i + 1])) for i in range(0, len(xs), 3)}


def test_update_before_initialize_fails(controller):
    with pytest.raises(NotInitializedError):
        controller.update({'0-0-0': 0.5})
    assert not controller.initialized


def test_fully_connected_network(controller):
    controller.initialize('fully_connected', Hyperparameters(hidden_units=32))

    assert controller.state.layer_widths == (10, 32, 16, 1)
    assert len(controller.state.layout) == 59
    assert controller.state.weight_map == {}
    for trace in controller.figure().data:
        if trace.mode == 'lines':
            assert trace.meta['magnitude'] <= 1.0


def test_convolutional_network(controller):
    controller.initialize('convolutional', Hyperparameters(filters=8))
    assert controller.state.layer_widths == (784, 32, 64, 10)
    assert len(controller.state.layout) == 890


def test_observed_weight_is_drawn_strong(controller):
    controller.initialize('fully_connected', Hyperparameters(hidden_units=32))
    controller.update({'0-0-0': 0.85})

    layout = controller.state.layout
    start, end = layout.position(0, 0), layout.position(1, 0)
    edge = ((start.x, start.y), (end.x, end.y))
    strong = [trace for trace in controller.figure().data
              if trace.mode == 'lines' and trace.meta == {'tier': 'strong', 'magnitude': 0.85}]
    assert len(strong) == 1
    assert edge in segments(strong[0])
    assert strong[0].line.width == pytest.approx(1.7)


def test_reinitialize_resets_weights_and_layout(controller):
    controller.initialize('fully_connected', Hyperparameters(hidden_units=32))
    controller.update({'0-0-0': 0.85})
    controller.initialize('fully_connected', Hyperparameters(hidden_units=64))

    assert controller.state.layer_widths == (10, 64, 32, 1)
    assert len(controller.state.layout) == 107
    assert controller.state.weight_map == {}


def test_failed_initialize_keeps_previous_state(controller):
    controller.initialize('recurrent', Hyperparameters(hidden_units=4))
    state = controller.state
    before = controller.figure().to_dict()

    with pytest.raises(InvalidTopologyError):
        controller.initialize('transformer', Hyperparameters())
    assert controller.state is state
    assert controller.figure().to_dict() == before


def test_update_replaces_the_whole_map(controller):
    controller.initialize('mlp', Hyperparameters(hidden_units=4))
    controller.update({'0-0-0': 0.5})
    controller.update({'0-1-0': 0.2})
    assert controller.state.weight_map == {(0, 1, 0): 0.2}


def test_same_topology_reuses_layout(controller):
    controller.initialize('mlp', Hyperparameters(hidden_units=8))
    layout = controller.state.layout
    controller.initialize('mlp', Hyperparameters(hidden_units=8, epochs=5))
    assert controller.state.layout is layout


def test_resize_moves_nodes_inside_new_canvas(controller):
    controller.initialize('mlp', Hyperparameters(hidden_units=8))
    controller.resize(CanvasSize(400, 300))

    assert controller.figure().layout.width == 400
    for node in controller.state.layout:
        assert 0 < node.x < 400
        assert 0 < node.y < 300


def test_resize_before_initialize(rng):
    controller = VisualizationController(rng=rng)
    controller.resize(CanvasSize(200, 100))
    assert controller.state.canvas_size == CanvasSize(200, 100)
    assert not controller.initialized


def test_initialize_with_canvas_size_resizes_the_surface(controller):
    controller.initialize('mlp', Hyperparameters(hidden_units=8), CanvasSize(1200, 600))

    layout = controller.figure().layout
    assert list(layout.xaxis.range) == [0, 1200]
    assert list(layout.yaxis.range) == [600, 0]
    for node in controller.state.layout:
        assert 0 < node.x < 1200
        assert 0 < node.y < 600

    controller.resize(CanvasSize(1200, 600))
    assert controller.figure().layout.width == 1200


def test_unobserved_weight_falls_back(controller):
    controller.initialize('mlp', Hyperparameters(hidden_units=4))
    controller.update({'0-0-0': None, '0-1-0': 0.4})
    assert controller.state.weight_map == {(0, 1, 0): 0.4}
