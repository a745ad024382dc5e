class VisualizerError(Exception):
    """Base class for all errors raised by the visualizer."""


class InvalidTopologyError(VisualizerError):
    """Unknown model family or a topology with an empty layer."""


class InvalidHyperparametersError(VisualizerError, ValueError):
    """A hyperparameter is missing its type or falls outside its slider range."""


class NotInitializedError(VisualizerError):
    """The visualization was updated before it was ever initialized."""


class RenderSurfaceUnavailableError(VisualizerError):
    """The network graph or a chart component is missing from the page."""


class TrainerError(VisualizerError):
    """Base class for failures inside the training collaborator."""


class TrainerBuildError(TrainerError):
    """The model or its optimizer could not be created."""


class TrainerStepError(TrainerError):
    """A training epoch failed, or the handle was already disposed."""
