"""Activation utilities for neuralkit."""

from __future__ import annotations

import numpy as np

from .types import Array


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def sigmoid(z: Array) -> Array:
    """Return ``1 / (1 + exp(-z))`` elementwise.

    Large negative inputs overflow ``exp`` and saturate to exactly ``0``;
    the overflow warning is suppressed since saturation is the expected
    result.
    """

    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-z))


def sigmoid_deriv(a: Array) -> Array:
    """Derivative of the sigmoid expressed through its output ``a``."""

    return a * (1.0 - a)


def relu_update(x: Array, y_true: Array, weights: Array) -> Array:
    """Perceptron update direction for a ReLU-thresholded linear unit.

    ``x`` holds one sample per row, ``y_true`` is a column of ``+1/-1``
    labels and ``weights`` a single column.  Samples whose signed margin
    ``y * (x @ w)`` is not positive are misclassified; the returned matrix is
    the sum of ``y_i * x_i`` over those samples, shaped like ``weights``.
    """

    margins = y_true * (x @ weights)
    wrong = (margins <= 0).reshape(-1)
    if not np.any(wrong):
        return np.zeros_like(weights)
    return (x[wrong].T @ y_true[wrong]).reshape(weights.shape)


__all__ = ["relu", "sigmoid", "sigmoid_deriv", "relu_update"]
