"""Interface shared by the single-weight-matrix models."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from ..core.errors import InvalidArgumentError, NotFittedError
from ..core.types import Array


class SupervisedModel(Protocol):
    """Protocol implemented by models trained with ``fit``/``predict``."""

    def fit(
        self,
        X: Array,
        y_true: Array,
        epochs: int = 1000,
        learning_rate: float = 0.01,
    ) -> Array:
        """Train the model and return its weights."""

    def predict(self, X: Array) -> Array:
        """Return predictions for ``X``."""


def check_is_fitted(weights: Array | None, name: str) -> Array:
    if weights is None or weights.size == 0:
        raise NotFittedError(f"{name} must be trained before making predictions")
    return weights


def check_training_args(X: Array, y_true: Array, epochs: int) -> tuple[Array, Array]:
    """Validate sample-major training inputs and return them as ``float64``."""

    if isinstance(epochs, bool) or not isinstance(epochs, (int, np.integer)) or epochs <= 0:
        raise InvalidArgumentError("The number of epochs must be greater than 0")
    x = np.asarray(X, dtype=np.float64)
    y = np.asarray(y_true, dtype=np.float64)
    if y.ndim == 1:
        y = y.reshape(-1, 1)
    if x.ndim != 2:
        raise InvalidArgumentError(f"X must be a 2-D matrix, got shape {x.shape}")
    if y.ndim != 2 or y.shape[1] != 1:
        raise InvalidArgumentError(f"y_true must be a single column, got shape {y.shape}")
    if x.shape[0] != y.shape[0]:
        raise InvalidArgumentError(
            f"X has {x.shape[0]} samples but y_true has {y.shape[0]}"
        )
    return x, y


def augment(X: Array) -> Array:
    """Append a bias column of ones to sample-major ``X``."""

    return np.hstack([X, np.ones((X.shape[0], 1))])


__all__ = ["SupervisedModel", "augment", "check_is_fitted", "check_training_args"]
