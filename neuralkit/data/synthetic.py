"""Pure in-memory synthetic datasets."""

from __future__ import annotations

import numpy as np

from ..core.errors import InvalidArgumentError
from .registry import DatasetSpec, register_dataset


def create_dataset(
    n_samples: int,
    n_features: int,
    n_classes: int,
    random_state: int = 0,
) -> tuple[np.ndarray, np.ndarray]:
    """Generate noisy class clusters.

    Returns ``X`` of shape ``(n_features, n_samples)`` and ``y`` of shape
    ``(1, n_samples)`` holding class indices ``0..n_classes - 1``.  Every
    sample of class ``c`` draws its features from one interval around ``c``
    whose bounds are jittered per sample; even feature rows are negated so
    the clusters spread across quadrants.
    """

    if n_samples <= 0:
        raise InvalidArgumentError("The number of samples must be greater than 0")
    if n_features <= 0:
        raise InvalidArgumentError("The number of features must be greater than 0")
    if n_classes <= 0:
        raise InvalidArgumentError("The number of classes must be greater than 0")

    rng = np.random.default_rng(random_state)
    X = np.empty((n_features, n_samples), dtype=np.float64)
    y = np.empty((1, n_samples), dtype=np.float64)
    signs = np.where(np.arange(n_features) % 2 == 1, 1.0, -1.0)

    for col in range(n_samples):
        label = float(rng.integers(0, n_classes))
        lower = label + rng.integers(0, 100) / 100.0 * rng.choice((-1.0, 1.0))
        upper = label + rng.integers(0, 100) / 100.0 * rng.choice((-1.0, 1.0))
        low, high = min(lower, upper), max(lower, upper)
        X[:, col] = rng.uniform(low, high, size=n_features) * signs
        y[0, col] = label
    return X, y


@register_dataset("blobs")
def load_blobs(
    n_samples: int = 200,
    n_features: int = 2,
    n_classes: int = 2,
    random_state: int = 0,
    **_: object,
) -> DatasetSpec:
    if n_classes > 2:
        raise InvalidArgumentError("Multi-class classification is not supported")
    X, y = create_dataset(n_samples, n_features, n_classes, random_state)
    return DatasetSpec(
        name="blobs",
        inputs=X,
        targets=y,
        task_type="binary",
        provenance={
            "type": "synthetic",
            "generator": "blobs",
            "n_samples": n_samples,
            "n_features": n_features,
            "n_classes": n_classes,
            "random_state": random_state,
        },
    )


@register_dataset("separable")
def load_separable(
    n_samples: int = 200,
    n_features: int = 2,
    spread: float = 0.5,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    """Two Gaussian clusters centred on ``-2`` and ``+2`` in every feature."""

    rng = np.random.default_rng(seed)
    labels = rng.integers(0, 2, size=n_samples)
    centres = np.where(labels == 1, 2.0, -2.0)
    X = centres[None, :] + spread * rng.standard_normal((n_features, n_samples))
    y = labels.astype(np.float64).reshape(1, -1)
    return DatasetSpec(
        name="separable",
        inputs=X,
        targets=y,
        task_type="binary",
        provenance={
            "type": "synthetic",
            "generator": "separable",
            "n_samples": n_samples,
            "n_features": n_features,
            "spread": spread,
            "seed": seed,
        },
    )


@register_dataset("xor")
def load_xor(
    n_samples: int = 200,
    noise: float = 0.1,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    rng = np.random.default_rng(seed)
    corners = rng.integers(0, 2, size=(2, n_samples))
    X = corners + noise * rng.standard_normal((2, n_samples))
    y = np.logical_xor(corners[0], corners[1]).astype(np.float64).reshape(1, -1)
    return DatasetSpec(
        name="xor",
        inputs=X,
        targets=y,
        task_type="binary",
        provenance={
            "type": "synthetic",
            "generator": "xor",
            "n_samples": n_samples,
            "noise": noise,
            "seed": seed,
        },
    )


@register_dataset("line")
def load_line(
    n_samples: int = 128,
    slope: float = 2.0,
    intercept: float = -1.0,
    noise: float = 0.05,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    rng = np.random.default_rng(seed)
    x = np.linspace(-1.0, 1.0, n_samples).reshape(1, -1)
    y = slope * x + intercept + noise * rng.standard_normal(x.shape)
    return DatasetSpec(
        name="line",
        inputs=x,
        targets=y,
        task_type="regression",
        provenance={
            "type": "synthetic",
            "generator": "line",
            "n_samples": n_samples,
            "slope": slope,
            "intercept": intercept,
            "noise": noise,
            "seed": seed,
        },
    )


__all__ = ["create_dataset", "load_blobs", "load_separable", "load_xor", "load_line"]
