from collections import namedtuple

NodePosition = namedtuple('NodePosition', ['x', 'y', 'layer_index', 'neuron_index'])


class Layout(tuple):
    """Node positions ordered by layer, then by neuron."""

    def __new__(cls, positions, widths):
        layout = super().__new__(cls, positions)
        layout.widths = tuple(widths)
        return layout

    def layer(self, layer_index):
        start = sum(self.widths[:layer_index])
        return self[start:start + self.widths[layer_index]]

    def position(self, layer_index, neuron_index):
        return self[sum(self.widths[:layer_index]) + neuron_index]

    @property
    def layer_count(self):
        return len(self.widths)


def compute_layout(widths, width, height):
    """Place every neuron on the canvas.

    Layers are spread evenly across the width with one spacing of margin on
    each side; neurons of a layer are spread evenly down the height in the
    same way.
    """
    if not (width > 0 and height > 0):
        raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")

    x_spacing = width / (len(widths) + 1)
    positions = []
    for layer_index, neurons in enumerate(widths):
        x = x_spacing * (layer_index + 1)
        y_spacing = height / (neurons + 1)
        for neuron_index in range(neurons):
            positions.append(NodePosition(x, y_spacing * (neuron_index + 1), layer_index, neuron_index))
    return Layout(positions, widths)


class LayoutCache:
    """Recompute the layout only when the widths or the canvas size change."""

    def __init__(self):
        self._key = None
        self._layout = None
        self.computations = 0

    def get(self, widths, width, height):
        key = (tuple(widths), width, height)
        if key != self._key:
            self._layout = compute_layout(widths, width, height)
            self._key = key
            self.computations += 1
        return self._layout
