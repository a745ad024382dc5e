import logging
import threading
from collections import deque

from .charts import MetricsChart
from .config import CHART_WINDOW, LOG_PANEL_LINES, SAMPLE_COUNT, Family, Hyperparameters
from .controller import VisualizationController
from .data import generate_dataset
from .errors import TrainerBuildError, TrainerStepError
from .trainer import build_trainer
from .training import CancellationToken, TrainingLoop

logger = logging.getLogger(__name__)

IDLE = 'idle'
TRAINING = 'training'
STOPPING = 'stopping'

BUTTON_LABELS = {
    IDLE: 'Start Training',
    TRAINING: 'Stop Training',
    STOPPING: 'Stopping...',
}


class LogPanel:
    """Scrolling text log shown to the user. Lines are mirrored to the logger."""

    def __init__(self, max_lines=LOG_PANEL_LINES):
        self.lines = deque(maxlen=max_lines)

    def append(self, message):
        self.lines.append(message)
        logger.info(message)

    def clear(self):
        self.lines.clear()

    def text(self):
        return '\n'.join(f'> {line}' for line in self.lines)


class Playground:
    """Everything one user session needs: visualization, charts, log and training.

    ``start`` builds a fresh trainer and dataset, then each ``advance`` call
    runs exactly one epoch, so the host can repaint between epochs. ``stop``
    only requests cancellation; it takes effect at the next ``advance``.
    """

    def __init__(self, controller=None, chart=None, log_panel=None, build=build_trainer,
                 generate=generate_dataset, sample_count=SAMPLE_COUNT, canvas_size=None,
                 chart_window=CHART_WINDOW):
        self.controller = controller or VisualizationController(canvas_size)
        self.chart = chart or MetricsChart(chart_window)
        self.log = log_panel or LogPanel()
        self.family = Family.FULLY_CONNECTED
        self.hyperparameters = Hyperparameters()
        self.sample_count = sample_count
        self._build = build
        self._generate = generate
        self._loop = None
        self._epochs = None
        self._token = None
        self._lock = threading.RLock()

    @property
    def status(self):
        if self._epochs is None:
            return IDLE
        if self._token.cancelled:
            return STOPPING
        return TRAINING

    @property
    def is_training(self):
        return self._epochs is not None

    @property
    def button_label(self):
        return BUTTON_LABELS[self.status]

    def select(self, family, hyperparameters=None):
        with self._lock:
            family = Family.parse(family)
            hyperparameters = hyperparameters or self.hyperparameters
            self.controller.initialize(family, hyperparameters)
            self.family = family
            self.hyperparameters = hyperparameters
            logger.info("Model selected: %s", family.value)

    def start(self):
        with self._lock:
            if self.is_training:
                return False
            if not self.controller.initialized:
                self.controller.initialize(self.family, self.hyperparameters)

            self.log.clear()
            self.chart.clear()
            self.log.append("Model initialized.")
            self.log.append(f"Training {self.family.short_name.upper()} model...")

            try:
                handle = self._build(self.family, self.hyperparameters)
            except TrainerBuildError as e:
                logger.error("Failed to create model: %s", e)
                self.log.append("Error creating model.")
                return False

            try:
                xs, ys = self._generate(self.family, self.sample_count)
            except Exception as e:
                handle.dispose()
                logger.error("Failed to create dataset: %s", e)
                self.log.append("Error creating dataset.")
                return False

            self._token = CancellationToken()
            self._loop = TrainingLoop(handle, xs, ys, self.hyperparameters, self._token,
                                      widths=self.controller.state.layer_widths)
            self._epochs = iter(self._loop)
            return True

    def stop(self):
        with self._lock:
            if self.status != TRAINING:
                return False
            self._token.cancel()
            self.log.append("Training stopped.")
            return True

    def advance(self):
        """Run one epoch. Returns True while more epochs remain."""
        with self._lock:
            if self._epochs is None:
                return False

            try:
                result = next(self._epochs)
            except StopIteration:
                if self._loop.interrupted:
                    self.log.append("Training interrupted.")
                self._finish()
                return False
            except TrainerStepError as e:
                logger.error("Training error: %s", e)
                self.log.append("Error during training.")
                self._finish()
                return False

            self._record(result)
            if result.epoch >= self._loop.hyperparameters.epochs:
                self._finish()
                return False
            return True

    def run(self):
        """Train to completion without yielding to a host (CLI and tests)."""
        while self.advance():
            pass

    def _record(self, result):
        accuracy = round(result.accuracy * 100, 2) if result.accuracy is not None else None
        accuracy_text = f"{accuracy:.2f}%" if accuracy is not None else "N/A"
        self.log.append(f"Epoch {result.epoch}: loss = {result.loss:.4f}, accuracy = {accuracy_text}")
        self.chart.push(result.epoch, round(result.loss, 4), accuracy if accuracy is not None else "N/A")

        if result.weights:
            self.controller.update(result.weights)

    def _finish(self):
        self._epochs.close()
        self._loop.handle.dispose()
        self._epochs = None
        self._loop = None
        self._token = None
        self.log.append("Training complete.")
