"""Core typing contracts for neuralkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

Array = np.ndarray


@dataclass
class LayerCache:
    """Per-layer matrices captured during one training step.

    ``activations[0]`` holds the bias-augmented input and ``activations[i]``
    the sigmoid output of weight layer ``i``.  ``gradients[i - 1]`` holds the
    weight gradient of layer ``i`` and shares its shape.
    """

    activations: List[Array] = field(default_factory=list)
    gradients: List[Array] = field(default_factory=list)

    def clear(self) -> None:
        self.activations = []
        self.gradients = []


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]

    @property
    def num_weight_layers(self) -> int:
        return len(self.layer_dims) - 1


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`neuralkit.training.pipelines.run_pipeline`."""

    epochs_run: int
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    history: List[float] = field(default_factory=list)
