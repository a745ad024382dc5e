from .config import AppConfig, CanvasSize, Family, Hyperparameters
from .controller import VisualizationController
from .errors import (
    InvalidHyperparametersError,
    InvalidTopologyError,
    NotInitializedError,
    RenderSurfaceUnavailableError,
    TrainerBuildError,
    TrainerError,
    TrainerStepError,
    VisualizerError,
)
from .layout import NodePosition, compute_layout
from .render import NetworkCanvas, render_network
from .session import Playground
from .topology import derive_layer_widths
from .weights import WeightKey, resolve_weight

__version__ = '0.1.0'
