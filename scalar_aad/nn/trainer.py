"""
Gradient-descent training loop for an MLP on a small regression set.

Each step runs on a fresh tape: parameters are re-created as leaves, the
squared-error loss is built over all samples, one backward pass fills the
parameter gradients, and the parameters are re-created with
p - learning_rate * p.grad on that same tape. Nothing is recorded on the
caller's tape, so training leaves the current tape unchanged. After
fit() the parameters live on the last step's tape; call model.rebind()
inside the caller's own tape before using the model directly.
"""

import warnings
from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.engine import run_backward
from ..core.tape import use_tape
from ..core.var import Value, leaf
from ..ops import add, sub
from .layers import MLP, as_values


@dataclass
class TrainConfig:
    """Configuration for MLP training."""
    learning_rate: float = 0.1
    steps: int = 20

    # Logging
    verbose: bool = True
    log_every: int = 1  # print every N steps


class MLPTrainer:
    """
    Fit an MLP with plain gradient descent.

    Usage:
        >>> xs = [[2.0, 3.0, -1.0], [3.0, -1.0, 0.5], [0.5, 1.0, 1.0], [1.0, 1.0, -1.0]]
        >>> ys = [1.0, -1.0, -1.0, 1.0]
        >>> trainer = MLPTrainer(MLP(3, [4, 4, 1]), xs, ys)
        >>> result = trainer.fit()
        >>> result['final_loss']
    """

    def __init__(self,
                 model: MLP,
                 xs: Sequence[Sequence[float]],
                 ys: Sequence[float],
                 config: Optional[TrainConfig] = None):
        if len(xs) != len(ys):
            raise ValueError(f"xs and ys differ in length: {len(xs)} vs {len(ys)}")
        self.model = model
        self.xs = [list(x) for x in xs]
        self.ys = list(ys)
        self.config = config or TrainConfig()
        self.loss_history: List[float] = []

    def _loss(self) -> Value:
        """sum((y_pred - y)**2) over all samples, on the current tape."""
        terms = []
        for x, y in zip(self.xs, self.ys):
            ypred = self.model(as_values(x))
            terms.append(sub(ypred, leaf(y)) ** 2)
        return reduce(add, terms)

    def step(self) -> float:
        """One forward / backward / update cycle. Returns the loss before the update."""
        lr = self.config.learning_rate
        with use_tape():
            self.model.rebind()
            loss = self._loss()
            self.model.zero_grad()
            run_backward(loss)
            new_values = [p.value - lr * p.grad for p in self.model.parameters()]
            labels = [p.label for p in self.model.parameters()]
            self.model.assign([leaf(v, label=name) for v, name in zip(new_values, labels)])
        return float(loss.value)

    def fit(self) -> Dict:
        """
        Run `config.steps` steps.

        Returns:
            Dictionary with:
                - loss_history: loss at every step (before its update)
                - final_loss: loss of the trained parameters
                - predictions: model outputs on xs after training
                - n_steps: number of steps run
        """
        if self.config.verbose:
            print(f"\nTraining {self.model!r}")
            print(f"  Samples: {len(self.xs)}")
            print(f"  Parameters: {len(self.model.parameters())}")
            print(f"  Learning rate: {self.config.learning_rate}")

        self.loss_history = []
        for k in range(self.config.steps):
            loss = self.step()
            self.loss_history.append(loss)
            if not np.isfinite(loss):
                warnings.warn(f"Loss is not finite at step {k}: {loss}", RuntimeWarning)
            if self.config.verbose and k % self.config.log_every == 0:
                print(f"{k} {loss}")

        with use_tape():
            self.model.rebind()
            final_loss = float(self._loss().value)
        predictions = [self.predict(x) for x in self.xs]

        if self.config.verbose:
            print(f"\nTraining Complete:")
            print(f"  Final loss: {final_loss:.6e}")

        return {
            'loss_history': self.loss_history,
            'final_loss': final_loss,
            'predictions': predictions,
            'n_steps': self.config.steps,
        }

    def predict(self, x: Sequence[float]) -> float:
        """Forward pass on a fresh tape; the caller's tape is left untouched."""
        with use_tape():
            self.model.rebind()
            out = self.model(as_values(x))
            values = out if isinstance(out, list) else [out]
            result = [float(v.value) for v in values]
        return result[0] if len(result) == 1 else result
