"""Linear regression fitted by batch gradient descent."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np

from ..core.errors import InvalidArgumentError
from ..core.types import Array
from ..training.losses import REGISTRY as LOSS_REGISTRY
from .base import augment, check_is_fitted, check_training_args


@dataclass
class LinearRegression:
    """Least-squares (``"mse"``) or least-absolute (``"mae"``) linear model.

    ``X`` holds one sample per row; a bias column is appended internally so
    :attr:`weights` has ``n_features + 1`` rows, the last being the
    intercept.
    """

    loss: str = "mse"
    seed: int = 0
    verbose: bool = False
    weights: Array | None = field(default=None, repr=False)
    history: List[float] = field(default_factory=list, repr=False)
    on_epoch: Callable[[int, dict], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.set_loss_function(self.loss)

    def set_loss_function(self, loss_function: str) -> None:
        if loss_function not in LOSS_REGISTRY:
            raise InvalidArgumentError("The loss function must be either 'mse' or 'mae'")
        self.loss = loss_function

    @staticmethod
    def model(X: Array, weights: Array) -> Array:
        """Return ``X @ weights`` after checking that the shapes line up."""

        if weights.shape != (X.shape[1], 1):
            raise InvalidArgumentError(
                f"The weights matrix must be of size {X.shape[1]}x1, got {weights.shape}"
            )
        return X @ weights

    def fit(
        self,
        X: Array,
        y_true: Array,
        epochs: int = 1000,
        learning_rate: float = 0.01,
    ) -> Array:
        x, y = check_training_args(X, y_true, epochs)
        loss = LOSS_REGISTRY.get(self.loss)

        x_aug = augment(x)
        if self.weights is None:
            rng = np.random.default_rng(self.seed)
            self.weights = rng.uniform(-2.0, 2.0, size=(x_aug.shape[1], 1))

        self.history = []
        for epoch in range(epochs):
            grad = loss.grad(x_aug, y, self.model(x_aug, self.weights))
            self.weights = self.weights - learning_rate * grad
            error = loss(y, self.model(x_aug, self.weights))
            self.history.append(error)
            if self.on_epoch is not None:
                self.on_epoch(epoch, {"loss": error})
            if self.verbose:
                print(f"Epoch: {epoch} Error: {error}")
        return self.weights

    def predict(self, X: Array) -> Array:
        weights = check_is_fitted(self.weights, "LinearRegression")
        x = np.asarray(X, dtype=np.float64)
        if x.ndim != 2:
            raise InvalidArgumentError(f"X must be a 2-D matrix, got shape {x.shape}")
        return self.model(augment(x), weights)


__all__ = ["LinearRegression"]
