"""Binary perceptron with a ReLU-thresholded output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np

from ..core.activations import relu, relu_update
from ..core.errors import InvalidArgumentError
from ..core.types import Array
from .base import augment, check_is_fitted, check_training_args


@dataclass
class Perceptron:
    """Rosenblatt perceptron over one sample per row.

    Labels are ``+1``/``-1``.  Each epoch applies
    ``w <- w + learning_rate * relu_update(X, y, w)`` over the whole dataset
    and records the misclassification rate in :attr:`history`.
    """

    seed: int = 0
    verbose: bool = False
    weights: Array | None = field(default=None, repr=False)
    history: List[float] = field(default_factory=list, repr=False)
    on_epoch: Callable[[int, dict], None] | None = field(default=None, repr=False)

    def fit(
        self,
        X: Array,
        y_true: Array,
        epochs: int = 1000,
        learning_rate: float = 0.01,
    ) -> Array:
        x, y = check_training_args(X, y_true, epochs)
        if not np.all(np.isin(y, (-1.0, 1.0))):
            raise InvalidArgumentError("The labels must be either 1 or -1")

        x_aug = augment(x)
        if self.weights is None:
            rng = np.random.default_rng(self.seed)
            self.weights = rng.uniform(-2.0, 2.0, size=(x_aug.shape[1], 1))
        elif self.weights.shape[0] != x_aug.shape[1]:
            raise InvalidArgumentError(
                f"The number of features must be equal to {self.weights.shape[0] - 1}"
            )

        self.history = []
        for epoch in range(epochs):
            self.weights = self.weights + learning_rate * relu_update(x_aug, y, self.weights)
            error = self._error_rate(x_aug, y)
            self.history.append(error)
            if self.on_epoch is not None:
                self.on_epoch(epoch, {"error": error, "accuracy": 1.0 - error})
            if self.verbose:
                print(f"Epoch: {epoch} Error: {error}")
        return self.weights

    def predict(self, X: Array) -> Array:
        """Return a boolean column, ``True`` for the ``+1`` class.

        ``X`` may be given with or without the bias column.
        """

        weights = check_is_fitted(self.weights, "Perceptron")
        x = np.asarray(X, dtype=np.float64)
        if x.ndim != 2:
            raise InvalidArgumentError(f"X must be a 2-D matrix, got shape {x.shape}")
        if x.shape[1] == weights.shape[0] - 1:
            x = augment(x)
        if x.shape[1] != weights.shape[0]:
            raise InvalidArgumentError(
                "The number of features must be equal to the number of weights: "
                f"{weights.shape[0]}"
            )
        return relu(x @ weights) > 0

    def _error_rate(self, x_aug: Array, y: Array) -> float:
        predicted = np.where(relu(x_aug @ self.weights) > 0, 1.0, -1.0)
        return float(np.mean(predicted != y))


__all__ = ["Perceptron"]
