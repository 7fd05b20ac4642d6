"""Utility helpers for dataset loaders."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Mapping

import numpy as np

from .registry import DatasetSpec


def seed_everything(seed: int) -> np.random.Generator:
    """Seed Python and NumPy RNGs and return a generator."""

    random.seed(seed)
    np.random.seed(seed % (2**32 - 1))
    return np.random.default_rng(seed)


@dataclass(frozen=True)
class SplitIndices:
    """Column indices for the train/test partitions."""

    train: np.ndarray
    test: np.ndarray

    @property
    def sizes(self) -> Mapping[str, int]:
        return {"train": int(self.train.size), "test": int(self.test.size)}


def deterministic_split(
    n_samples: int,
    *,
    test_split: float = 0.2,
    seed: int = 0,
) -> SplitIndices:
    """Return deterministic indices for the requested test ratio."""

    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")

    rng = np.random.default_rng(seed)
    indices = np.arange(n_samples)
    rng.shuffle(indices)

    test_size = int(round(n_samples * test_split))
    # Ensure at least one test sample when a split was requested
    test_size = min(max(test_size, 1 if test_split > 0 else 0), n_samples)
    if n_samples - test_size <= 0:
        raise ValueError("Not enough samples for the requested split")

    return SplitIndices(train=np.sort(indices[test_size:]), test=np.sort(indices[:test_size]))


def split_dataset(
    spec: DatasetSpec, *, test_split: float, seed: int
) -> tuple[DatasetSpec, DatasetSpec | None]:
    """Split ``spec`` column-wise into train and (optional) test datasets."""

    if test_split <= 0:
        return spec, None
    splits = deterministic_split(spec.n_samples, test_split=test_split, seed=seed)
    provenance = dict(spec.provenance, test_split=test_split, split_seed=seed)
    train = DatasetSpec(
        name=spec.name,
        inputs=spec.inputs[:, splits.train],
        targets=spec.targets[:, splits.train],
        task_type=spec.task_type,
        provenance=provenance,
    )
    test = DatasetSpec(
        name=spec.name,
        inputs=spec.inputs[:, splits.test],
        targets=spec.targets[:, splits.test],
        task_type=spec.task_type,
        provenance=provenance,
    )
    return train, test


def standardize(
    array: np.ndarray,
    *,
    mean: np.ndarray | None = None,
    std: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Standard-scale each row of a feature-major matrix."""

    if mean is None or std is None:
        mean = array.mean(axis=1, keepdims=True)
        std = array.std(axis=1, keepdims=True)
        std = np.where(std == 0, 1.0, std)
    scaled = (array - mean) / std
    return scaled, mean, std


__all__ = [
    "SplitIndices",
    "deterministic_split",
    "seed_everything",
    "split_dataset",
    "standardize",
]
