"""Dataset registry and loader helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import csv_generic as _csv_generic  # noqa: F401
from . import synthetic as _synthetic  # noqa: F401
from .registry import (
    DatasetSpec,
    available_datasets,
    get_dataset,
    register_dataset,
)
from .synthetic import create_dataset

__all__ = [
    "DatasetSpec",
    "available_datasets",
    "create_dataset",
    "get_dataset",
    "register_dataset",
]
