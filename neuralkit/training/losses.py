"""Loss functions and their weight gradients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from ..core.errors import InvalidArgumentError
from ..core.types import Array

LossFn = Callable[[Array, Array], float]
GradFn = Callable[[Array, Array, Array], Array]


def _check_targets(y_true: Array, y_pred: Array) -> None:
    if y_true.ndim != 2 or y_true.shape[1] != 1:
        raise InvalidArgumentError(
            f"y_true must be a single column, got shape {y_true.shape}"
        )
    if y_true.shape[0] == 0:
        raise InvalidArgumentError("y_true must hold at least one sample")
    if y_pred.ndim != 2 or y_pred.shape[1] != 1:
        raise InvalidArgumentError(
            f"y_pred must be a single column, got shape {y_pred.shape}"
        )
    if y_pred.shape[0] != y_true.shape[0]:
        raise InvalidArgumentError(
            f"y_pred must have {y_true.shape[0]} rows, got {y_pred.shape[0]}"
        )


def _check_samples(x: Array, n_rows: int) -> None:
    if x.ndim != 2 or x.shape[0] != n_rows:
        raise InvalidArgumentError(
            f"X must have {n_rows} rows (one per prediction), got shape {x.shape}"
        )


def mse(y_true: Array, y_pred: Array) -> float:
    """Mean squared error ``1/n * sum((y_pred - y_true)**2)``."""

    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    _check_targets(y_true, y_pred)
    return float(np.mean(np.square(y_pred - y_true)))


def mae(y_true: Array, y_pred: Array) -> float:
    """Mean absolute error ``1/n * sum(|y_pred - y_true|)``."""

    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    _check_targets(y_true, y_pred)
    return float(np.mean(np.abs(y_pred - y_true)))


def mse_grad(x: Array, y_true: Array, y_pred: Array) -> Array:
    """Gradient of :func:`mse` w.r.t. the weights of ``y_pred = x @ w``."""

    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    _check_targets(y_true, y_pred)
    _check_samples(x, y_pred.shape[0])
    n = y_true.shape[0]
    return 2.0 / n * x.T @ (y_pred - y_true)


def mae_grad(x: Array, y_true: Array, y_pred: Array) -> Array:
    """Sub-gradient of :func:`mae` w.r.t. the weights of ``y_pred = x @ w``."""

    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    _check_targets(y_true, y_pred)
    _check_samples(x, y_pred.shape[0])
    n = y_true.shape[0]
    return 1.0 / n * x.T @ np.sign(y_pred - y_true)


def binary_cross_entropy(y_true: Array, y_prob: Array) -> float:
    """Mean binary cross-entropy of probabilities ``y_prob``."""

    eps = 1e-12
    probs = np.clip(y_prob, eps, 1.0 - eps)
    target = np.asarray(y_true, dtype=np.float64)
    return float(-np.mean(target * np.log(probs) + (1 - target) * np.log(1 - probs)))


@dataclass(frozen=True)
class Loss:
    """Loss wrapper pairing the scalar loss with its weight gradient."""

    name: str
    fn: LossFn
    grad: GradFn

    def __call__(self, y_true: Array, y_pred: Array) -> float:
        return self.fn(y_true, y_pred)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn, grad: GradFn) -> None:
        self._registry[name] = Loss(name, fn, grad)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise InvalidArgumentError(
                f"Unknown loss {name!r}. Available losses: {available}"
            )
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def __contains__(self, name: object) -> bool:
        return name in self._registry


REGISTRY = LossRegistry()

REGISTRY.register("mse", mse, mse_grad)
REGISTRY.register("mae", mae, mae_grad)

__all__ = [
    "Loss",
    "LossRegistry",
    "REGISTRY",
    "mse",
    "mae",
    "mse_grad",
    "mae_grad",
    "binary_cross_entropy",
]
