"""
Gradient descent training loop for scalargrad modules.
"""

import logging
from dataclasses import dataclass
from typing import List

from scalargrad.engine import Value
from scalargrad.losses import mse

logger = logging.getLogger(__name__)


@dataclass
class TrainConfig:
    """Hyperparameters for Trainer"""
    learning_rate: float = 0.01
    epochs: int = 100
    log_every: int = 10        # Log progress every N epochs (0 disables)


@dataclass
class StepResult:
    loss: float
    predictions: List[float]


@dataclass
class EpochRecord:
    epoch: int
    loss: float
    predictions: List[float]


class Trainer:
    """
    Drives a model through repeated zero-grad / forward / backward / update steps.

    Args:
        model: A Module whose forward takes one input sample
        loss_fn: Reduction (predictions, targets) -> Value (default: mse)
        config: TrainConfig, defaults used when omitted

    Example:
        >>> model = MLP(2, [4, 1], seed=0)
        >>> trainer = Trainer(model, config=TrainConfig(learning_rate=0.05))
        >>> history = trainer.train([[0, 0], [0, 1]], [0, 1], epochs=50)
        >>> trainer.loss_history[-1] < trainer.loss_history[0]
        True
    """

    def __init__(self, model, loss_fn=mse, config=None):
        self.model = model
        self.loss_fn = loss_fn
        self.config = config if config is not None else TrainConfig()
        self.loss_history = []

    def train_step(self, inputs, targets):
        """Run one full gradient descent step over the whole dataset."""
        self.model.zero_grad()

        predictions = [self.model(x) for x in inputs]
        loss = self.loss_fn(predictions, targets)

        loss.backward()
        self.model.step(self.config.learning_rate)

        self.loss_history.append(float(loss.data))
        return StepResult(
            loss=float(loss.data),
            predictions=[float(p.data) if isinstance(p, Value) else p for p in predictions],
        )

    def train(self, inputs, targets, epochs=None):
        """
        Train for a number of epochs (config.epochs when not given).

        Returns:
            list of EpochRecord, one per epoch
        """
        epochs = self.config.epochs if epochs is None else epochs
        history = []

        for epoch in range(epochs):
            result = self.train_step(inputs, targets)
            history.append(EpochRecord(epoch, result.loss, result.predictions))

            if self.config.log_every and epoch % self.config.log_every == 0:
                logger.info("Epoch %d: Loss = %.6f", epoch, result.loss)

        return history

    def reset(self):
        """Forget the recorded loss history (the model is left untouched)."""
        self.loss_history = []
