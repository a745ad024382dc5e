import logging

import torch
import torch.nn as nn
import torch.optim as optim

from .config import Family
from .errors import TrainerBuildError, TrainerStepError
from .models import build_model
from .weights import observed_weights

logger = logging.getLogger(__name__)

device = torch.device('cuda' if torch.cuda.is_available() else 'cpu')


class TrainerHandle:
    """A compiled model plus its optimizer, trained one ``fit`` call at a time.

    The handle owns device memory; call ``dispose`` before building the next
    one for the same slot.
    """

    def __init__(self, family, model, learning_rate):
        self.family = family
        self.model = model.to(device)
        self.optimizer = optim.Adam(self.model.parameters(), lr=learning_rate)
        if family is Family.CONVOLUTIONAL:
            self.criterion = nn.CrossEntropyLoss()
        else:
            self.criterion = nn.BCELoss()
        self.disposed = False

    def fit(self, xs, ys, batch_size, epochs=1):
        if self.disposed:
            raise TrainerStepError("Trainer has been disposed")
        try:
            history = None
            for _ in range(epochs):
                history = self._fit_epoch(xs.to(device), ys.to(device), batch_size)
            return history
        except TrainerStepError:
            raise
        except Exception as e:
            raise TrainerStepError(f"Training step failed: {e}") from e

    def _fit_epoch(self, xs, ys, batch_size):
        self.model.train()
        total_loss = 0.0
        correct = 0
        seen = 0
        for start, end in _batches(len(xs), batch_size):
            X_batch = xs[start:end]
            y_batch = ys[start:end]

            self.optimizer.zero_grad()
            outputs = self.model(X_batch)
            loss = self.criterion(outputs, self._targets(y_batch))
            loss.backward()
            self.optimizer.step()

            total_loss += loss.item() * (end - start)
            correct += self._correct(outputs.detach(), y_batch)
            seen += end - start

        loss = total_loss / seen if seen else float('nan')
        accuracy = correct / seen if seen else None
        return {'loss': loss, 'accuracy': accuracy}

    def _targets(self, y_batch):
        if self.family is Family.CONVOLUTIONAL:
            return y_batch.argmax(dim=1)
        return y_batch

    def _correct(self, outputs, y_batch):
        if self.family is Family.CONVOLUTIONAL:
            predicted = outputs.argmax(dim=1)
            return (predicted == y_batch.argmax(dim=1)).sum().item()
        predicted = (outputs >= 0.5).float()
        return (predicted == y_batch).sum().item()

    def observed_weights(self, widths):
        if self.disposed:
            raise TrainerStepError("Trainer has been disposed")
        return observed_weights(self.model, widths)

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        self.model = None
        self.optimizer = None
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
        logger.debug("Trainer for %s disposed", self.family.value)


def _batches(sample_count, batch_size):
    # Batch norm needs at least two samples per batch, so a trailing single
    # sample is folded into the previous batch
    batch_size = max(2, batch_size) if sample_count > 1 else 1
    bounds = []
    for start in range(0, sample_count, batch_size):
        end = min(start + batch_size, sample_count)
        if end - start == 1 and bounds:
            bounds[-1] = (bounds[-1][0], end)
        else:
            bounds.append((start, end))
    return bounds


def build_trainer(family, hyperparameters):
    try:
        family = Family.parse(family)
        model = build_model(family, hyperparameters)
        handle = TrainerHandle(family, model, hyperparameters.learning_rate)
    except Exception as e:
        raise TrainerBuildError(f"Could not build {family} model: {e}") from e
    logger.info("Built %s model on %s", family.value, device)
    return handle
