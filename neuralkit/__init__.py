"""neuralkit public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import InvalidArgumentError, NotFittedError
from .core.layers import LayeredNetwork
from .data import create_dataset, get_dataset
from .models import LinearRegression, Perceptron
from .training import losses
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "LayeredNetwork",
    "LinearRegression",
    "Perceptron",
    "InvalidArgumentError",
    "NotFittedError",
    "activations",
    "losses",
    "types",
    "create_dataset",
    "get_dataset",
    "load_preset",
    "presets",
    "run_pipeline",
]
