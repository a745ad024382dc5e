import logging
import threading
from dataclasses import dataclass, field

import numpy as np

from .config import CanvasSize, Family
from .errors import NotInitializedError
from .layout import LayoutCache
from .render import NetworkCanvas, render_network
from .topology import derive_layer_widths
from .weights import normalize_weight_map

logger = logging.getLogger(__name__)


@dataclass
class VisualizationState:
    family: Family = None
    hyperparameters: object = None
    layer_widths: tuple = ()
    layout: tuple = ()
    weight_map: dict = field(default_factory=dict)
    canvas_size: CanvasSize = field(default_factory=CanvasSize)
    initialized: bool = False


class VisualizationController:
    """Keeps the network diagram in sync with the selected model and its weights.

    Two states: Uninitialized until the first successful ``initialize`` and
    Ready afterwards. ``initialize`` rebuilds the topology and layout,
    ``update`` only swaps the weights and redraws on the cached layout.
    Calls are serialized with a lock since Dash may run callbacks on several
    threads.
    """

    def __init__(self, canvas_size=None, surface=None, rng=None):
        canvas_size = canvas_size or CanvasSize()
        self.state = VisualizationState(canvas_size=canvas_size)
        self.surface = surface or NetworkCanvas(canvas_size.width, canvas_size.height)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._layouts = LayoutCache()
        self._lock = threading.RLock()

    @property
    def initialized(self):
        return self.state.initialized

    def initialize(self, family, hyperparameters, canvas_size=None):
        with self._lock:
            family = Family.parse(family)
            canvas_size = canvas_size or self.state.canvas_size
            # Compute everything before touching state so a failure leaves it intact
            widths = derive_layer_widths(family, hyperparameters)
            layout = self._layouts.get(widths, canvas_size.width, canvas_size.height)

            self.state = VisualizationState(
                family=family,
                hyperparameters=hyperparameters,
                layer_widths=widths,
                layout=layout,
                weight_map={},
                canvas_size=canvas_size,
                initialized=True,
            )
            if (self.surface.width, self.surface.height) != (canvas_size.width, canvas_size.height):
                self.surface.resize(canvas_size.width, canvas_size.height)
            logger.info("Initializing network for %s: layers %s", family.value, list(widths))
            self._render()

    def update(self, weight_map):
        with self._lock:
            if not self.state.initialized:
                raise NotInitializedError("initialize() must be called before update()")
            self.state.weight_map = normalize_weight_map(weight_map)
            logger.debug("Updating network with %d observed weights", len(self.state.weight_map))
            self._render()

    def resize(self, canvas_size):
        with self._lock:
            if canvas_size == self.state.canvas_size:
                return
            self.state.canvas_size = canvas_size
            self.surface.resize(canvas_size.width, canvas_size.height)
            if self.state.initialized:
                self.state.layout = self._layouts.get(
                    self.state.layer_widths, canvas_size.width, canvas_size.height)
                self._render()

    def figure(self):
        return self.surface.figure

    def _render(self):
        render_network(self.surface, self.state.layout, self.state.weight_map, self.rng)
