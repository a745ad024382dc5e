import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative stop request, honoured between epochs only."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()


@dataclass(frozen=True)
class EpochResult:
    epoch: int
    loss: float
    accuracy: Optional[float]
    weights: dict = field(default_factory=dict)


class TrainingLoop:
    """Train a handle epoch by epoch, yielding an EpochResult after each one.

    The token is checked at the top of every epoch, so a stop request lets
    the running ``fit`` call finish and prevents the next one; a hung step
    cannot be interrupted. The handle is disposed when the loop ends for any
    reason: all epochs done, cancelled, failed or closed early by the caller.
    Errors from ``fit`` propagate to the consumer.
    """

    def __init__(self, handle, xs, ys, hyperparameters, token, widths=()):
        self.handle = handle
        self.xs = xs
        self.ys = ys
        self.hyperparameters = hyperparameters
        self.token = token
        self.widths = widths
        self.interrupted = False
        self.completed_epochs = 0

    def __iter__(self):
        try:
            for epoch in range(1, self.hyperparameters.epochs + 1):
                if self.token.cancelled:
                    self.interrupted = True
                    logger.info("Training cancelled before epoch %d", epoch)
                    return

                history = self.handle.fit(self.xs, self.ys,
                                          batch_size=self.hyperparameters.batch_size, epochs=1)
                weights = self.handle.observed_weights(self.widths) if self.widths else {}
                self.completed_epochs = epoch
                yield EpochResult(epoch, history['loss'], history.get('accuracy'), weights)
        finally:
            self.handle.dispose()
