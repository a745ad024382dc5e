import dataclasses
import enum
import math
from dataclasses import dataclass, field

from .errors import InvalidHyperparametersError, InvalidTopologyError


class Family(enum.Enum):
    FULLY_CONNECTED = "fully_connected"
    CONVOLUTIONAL = "convolutional"
    RECURRENT = "recurrent"

    @classmethod
    def parse(cls, value):
        """Turn a user selection (enum, canonical value or short alias) into a Family."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in FAMILY_ALIASES:
                return FAMILY_ALIASES[key]
            for member in cls:
                if member.value == key:
                    return member
        raise InvalidTopologyError(f"Unknown model family: {value!r}")

    @property
    def short_name(self):
        return FAMILY_SHORT_NAMES[self]


FAMILY_ALIASES = {
    'mlp': Family.FULLY_CONNECTED,
    'ann': Family.FULLY_CONNECTED,
    'cnn': Family.CONVOLUTIONAL,
    'rnn': Family.RECURRENT,
}

FAMILY_SHORT_NAMES = {
    Family.FULLY_CONNECTED: 'mlp',
    Family.CONVOLUTIONAL: 'cnn',
    Family.RECURRENT: 'rnn',
}

# Flattened 28x28 grayscale image; only used to draw the input column of the diagram
INPUT_FEATURE_COUNT = 28 * 28

# Shapes the synthetic data and the models agree on
FEATURE_COUNT = 10
SEQUENCE_LENGTH = 20
IMAGE_SIZE = 28
CLASS_COUNT = 10

SAMPLE_COUNT = 100
CHART_WINDOW = 20
LOG_PANEL_LINES = 200

NODE_RADIUS = 7
WEAK_LIMIT = 0.3
MEDIUM_LIMIT = 0.7

COLORS = {
    'background': '#000000',
    'neuron': '#33ff33',
    'hidden_neuron': '#888888',
    'weight_weak': '#55aa55',
    'weight_medium': '#33cc33',
    'weight_strong': '#22ff22',
    'loss': '#ff3333',
    'accuracy': '#33ff33',
    'text': '#ffffff',
}

# Opacity per weight tier, brighter for stronger connections
TIER_OPACITY = {
    'weak': 0.35,
    'medium': 0.65,
    'strong': 1.0,
}

# Slider (min, max, step) for every hyperparameter
SLIDER_RANGES = {
    'learning_rate': (0.001, 0.1, 0.001),
    'batch_size': (1, 128, 1),
    'epochs': (1, 100, 1),
    'hidden_units': (1, 128, 1),
    'filters': (1, 32, 1),
}

# UI ids use the camelCase names of the original controls
CAMEL_CASE_NAMES = {
    'learning_rate': 'learningRate',
    'batch_size': 'batchSize',
    'epochs': 'epochs',
    'hidden_units': 'hiddenUnits',
    'filters': 'filters',
}


@dataclass(frozen=True)
class Hyperparameters:
    learning_rate: float = 0.01
    batch_size: int = 16
    epochs: int = 10
    hidden_units: int = 32
    filters: int = 8

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            low, high, _ = SLIDER_RANGES[f.name]
            if f.type in (int, 'int'):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise InvalidHyperparametersError(f"{f.name} must be an integer, got {value!r}")
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                    raise InvalidHyperparametersError(f"{f.name} must be a finite number, got {value!r}")
            if not low <= value <= high:
                raise InvalidHyperparametersError(f"{f.name}={value} is outside [{low}, {high}]")

    @classmethod
    def from_dict(cls, values):
        """Build hyperparameters from a UI/JSON mapping.

        Both snake_case and camelCase keys are accepted; missing keys keep
        their defaults. Integral floats (as sent by sliders) are coerced to int.
        """
        kwargs = {}
        for f in dataclasses.fields(cls):
            for key in (f.name, CAMEL_CASE_NAMES[f.name]):
                if key in values and values[key] is not None:
                    kwargs[f.name] = _coerce(f.name, f.type, values[key])
                    break
        return cls(**kwargs)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    def to_dict(self):
        return {CAMEL_CASE_NAMES[name]: value for name, value in dataclasses.asdict(self).items()}


def _coerce(name, kind, value):
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise InvalidHyperparametersError(f"{name} must be numeric, got {value!r}") from None
    if kind in (int, 'int') and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class CanvasSize:
    width: float = 900
    height: float = 500

    def __post_init__(self):
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Canvas dimensions must be positive, got {self.width}x{self.height}")


@dataclass
class AppConfig:
    host: str = '127.0.0.1'
    port: int = 8050
    debug: bool = False
    canvas: CanvasSize = field(default_factory=CanvasSize)
    chart_window: int = CHART_WINDOW
    sample_count: int = SAMPLE_COUNT
    # Milliseconds between epoch ticks in the browser
    tick_interval: int = 250
