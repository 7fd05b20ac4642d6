"""Multi-layer sigmoid network trained by full-batch gradient descent.

Samples are stored column-wise: ``X`` has one row per feature and one column
per sample, ``y`` one row per output and one column per sample.  A constant
row of ones is appended to ``X`` for the bias, so the first weight matrix has
``n_features + 1`` columns.  Hidden layers carry no bias of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, MutableSequence, Sequence

import numpy as np

from ..training.losses import binary_cross_entropy
from ..training.metrics import accuracy
from .activations import sigmoid, sigmoid_deriv
from .errors import InvalidArgumentError, NotFittedError
from .types import Array, LayerCache, ModelDescription

#: Hidden widths of the default topology: a single sigmoid neuron per output.
DEFAULT_LAYER_DIMS: tuple[int, ...] = ()


def _is_width(value: object) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, np.integer)) and value > 0


def valid_layer_dims(layer_dims: Sequence[int]) -> bool:
    """Return whether ``layer_dims`` describes at least one weight layer."""

    dims = list(layer_dims)
    return len(dims) >= 2 and all(_is_width(d) for d in dims)


def _as_matrix(values: Array, name: str) -> Array:
    array = np.asarray(values, dtype=np.float64)
    if array.ndim == 1 and name == "y":
        array = array.reshape(1, -1)
    if array.ndim != 2:
        raise InvalidArgumentError(f"{name} must be a 2-D matrix, got shape {array.shape}")
    return array


def _check_count(value: object, name: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgumentError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


@dataclass
class LayeredNetwork:
    """Feed-forward network with sigmoid units on every layer.

    ``layer_dims`` lists the hidden widths only; the input and output sizes
    are taken from the first call to :meth:`fit`.  An invalid topology never
    raises here: the default is kept and :attr:`valid_topology` is ``False``.

    Numeric blow-up is not detected.  A learning rate large enough to make
    the weights diverge produces NaN/Inf that flows silently into later
    epochs and into :attr:`history`.
    """

    layer_dims: Sequence[int] = DEFAULT_LAYER_DIMS
    seed: int = 0
    valid_topology: bool = field(init=False)
    weights: MutableSequence[Array] = field(init=False, repr=False)
    cache: LayerCache = field(init=False, repr=False)
    history: List[float] = field(init=False, repr=False)
    epochs_run: int = field(init=False, default=0)
    _dims: List[int] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        try:
            hidden = tuple(self.layer_dims)
        except TypeError:
            hidden = None
        # Placeholder input/output sizes: only the hidden widths are checked.
        self.valid_topology = hidden is not None and valid_layer_dims((1, *hidden, 1))
        if self.valid_topology:
            self.layer_dims = tuple(int(d) for d in hidden)
        else:
            self.layer_dims = DEFAULT_LAYER_DIMS
        self.reset()

    # ------------------------------------------------------------------
    # Weight table

    @property
    def dims(self) -> List[int]:
        """Full dimension list ``[n_features + 1, *hidden, n_outputs]``."""

        return list(self._dims)

    @property
    def is_fitted(self) -> bool:
        return bool(self.weights)

    def describe(self) -> ModelDescription:
        self._require_weights()
        return ModelDescription(layer_dims=list(self._dims))

    def parameter_count(self) -> int:
        return int(sum(int(w.size) for w in self.weights))

    def reset(self) -> None:
        """Discard weights, caches and history; the next ``fit`` starts fresh."""

        self._dims = []
        self.weights = []
        self.cache = LayerCache()
        self.history = []
        self.epochs_run = 0

    def init_weights(self, n_features: int, n_outputs: int) -> None:
        dims = [n_features + 1, *self.layer_dims, n_outputs]
        if not valid_layer_dims(dims):
            raise InvalidArgumentError(f"Every layer width must be positive, got {dims}")
        weights: list[Array] = []
        for i in range(1, len(dims)):
            rng = np.random.default_rng(self.seed + i)
            weights.append(rng.uniform(-1.0, 1.0, size=(dims[i], dims[i - 1])))
        self._dims = dims
        self.weights = weights
        self.cache.clear()

    # ------------------------------------------------------------------
    # Training steps

    def forward(self, inputs: Array) -> Array:
        """Populate the activation cache for ``inputs`` and return ``A^L``."""

        x = self._check_inputs(inputs)
        activations: list[Array] = [np.vstack([x, np.ones((1, x.shape[1]))])]
        for W in self.weights:
            activations.append(sigmoid(W @ activations[-1]))
        self.cache.activations = activations
        return activations[-1]

    def backward(self, targets: Array) -> None:
        """Populate the gradient cache from the cached activations.

        The output error ``A^L - y`` is the gradient of the binary
        cross-entropy w.r.t. the output pre-activation, so the cache holds
        exact cross-entropy gradients only for 0/1 targets.
        """

        activations = self.cache.activations
        if not activations:
            raise NotFittedError("forward() must run before backward()")
        y = _as_matrix(targets, "y")
        if y.shape != activations[-1].shape:
            raise InvalidArgumentError(
                f"y must have shape {activations[-1].shape}, got {y.shape}"
            )
        m = y.shape[1]
        if m == 0:
            raise InvalidArgumentError("backward() needs at least one sample column")
        gradients: list[Array] = [np.empty(0)] * len(self.weights)
        delta = activations[-1] - y
        for idx in reversed(range(len(self.weights))):
            a_prev = activations[idx]
            gradients[idx] = delta @ a_prev.T / m
            if idx > 0:
                delta = (self.weights[idx].T @ delta) * sigmoid_deriv(a_prev)
        self.cache.gradients = gradients

    def apply_gradients(self, learning_rate: float) -> None:
        if not self.cache.gradients:
            raise NotFittedError("backward() must run before apply_gradients()")
        for idx, grad in enumerate(self.cache.gradients):
            self.weights[idx] -= learning_rate * grad

    # ------------------------------------------------------------------
    # Public API

    def fit(
        self,
        X: Array,
        y: Array,
        epochs: int = 1000,
        learning_rate: float = 0.01,
        evaluation_interval: int = 100,
        callbacks: Sequence[object] | None = None,
    ) -> "LayeredNetwork":
        """Train on ``(X, y)`` for ``epochs`` full-batch steps.

        Every ``evaluation_interval`` epochs (counting from epoch 0) the
        training accuracy is measured, ``1 - accuracy`` is appended to
        :attr:`history` and callbacks receive ``(epoch, metrics)``.  Training
        stops early only when that accuracy is exactly ``1.0``.  A second call
        continues from the current weights; call :meth:`reset` to start over.
        """

        x = _as_matrix(X, "X")
        targets = _as_matrix(y, "y")
        epochs = _check_count(epochs, "epochs", minimum=1)
        evaluation_interval = _check_count(evaluation_interval, "evaluation_interval", minimum=0)
        if x.shape[1] != targets.shape[1]:
            raise InvalidArgumentError(
                f"X has {x.shape[1]} samples but y has {targets.shape[1]}"
            )
        if x.shape[1] == 0:
            raise InvalidArgumentError("fit needs at least one sample column")
        if not self.weights:
            self.init_weights(x.shape[0], targets.shape[0])
        elif x.shape[0] + 1 != self._dims[0]:
            raise InvalidArgumentError(
                f"X must have {self._dims[0] - 1} feature rows, got {x.shape[0]}"
            )
        elif targets.shape[0] != self._dims[-1]:
            raise InvalidArgumentError(
                f"y must have {self._dims[-1]} rows, got {targets.shape[0]}"
            )

        self.history = []
        self.epochs_run = 0
        listeners = list(callbacks or [])
        for epoch in range(epochs):
            self.forward(x)
            self.backward(targets)
            self.apply_gradients(learning_rate)
            self.epochs_run = epoch + 1

            if evaluation_interval and epoch % evaluation_interval == 0:
                metrics = self.evaluate(x, targets)
                self.history.append(metrics["error"])
                self._emit_epoch(epoch, metrics, listeners)
                if metrics["accuracy"] == 1.0:
                    break
        return self

    def evaluate(self, X: Array, y: Array) -> Dict[str, float]:
        probs = self.predict_proba(X)
        acc = accuracy(probs > 0.5, y)
        return {
            "accuracy": acc,
            "error": 1.0 - acc,
            "loss": binary_cross_entropy(y, probs),
        }

    def predict_proba(self, X: Array) -> Array:
        return self.forward(X).copy()

    def predict(self, X: Array) -> Array:
        """Return ``A^L > 0.5`` as a boolean ``(n_outputs, n_samples)`` matrix."""

        return self.forward(X) > 0.5

    # ------------------------------------------------------------------
    # Internal helpers

    def _require_weights(self) -> None:
        if not self.weights:
            raise NotFittedError("LayeredNetwork must be fitted before use")

    def _check_inputs(self, inputs: Array) -> Array:
        self._require_weights()
        x = _as_matrix(inputs, "X")
        if x.shape[0] + 1 != self._dims[0]:
            raise InvalidArgumentError(
                f"X must have {self._dims[0] - 1} feature rows, got {x.shape[0]}"
            )
        return x

    @staticmethod
    def _emit_epoch(
        epoch: int,
        metrics: Dict[str, float],
        callbacks: Sequence[object],
    ) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["DEFAULT_LAYER_DIMS", "LayeredNetwork", "valid_layer_dims"]
