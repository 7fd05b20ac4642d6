"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from ..core.types import Array

TASK_TYPES = frozenset({"regression", "binary"})


@dataclass(frozen=True)
class DatasetSpec:
    """A fully materialised dataset.

    Attributes
    ----------
    name:
        Registry identifier the dataset was built from.
    inputs:
        Feature-major sample matrix: one row per feature, one column per
        sample.
    targets:
        Feature-major label matrix with one column per sample.  Binary
        datasets use ``0``/``1`` indicators.
    task_type:
        One of ``{"regression", "binary"}``.
    provenance:
        Parameters needed to rebuild the dataset deterministically.
    """

    name: str
    inputs: Array
    targets: Array
    task_type: str
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_features(self) -> int:
        return int(self.inputs.shape[0])

    @property
    def n_outputs(self) -> int:
        return int(self.targets.shape[0])

    @property
    def n_samples(self) -> int:
        return int(self.inputs.shape[1])


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("blobs")
        def make_blobs(**kwargs):
            ...

    or directly::

        register_dataset("blobs", make_blobs)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str | None = None, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered under ``dataset``."""

    if dataset is None:
        if "name" in options:
            dataset = str(options.pop("name"))
        else:
            raise TypeError("Dataset name must be provided")

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset: {dataset}. Available datasets: {available}")

    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {spec.task_type}")
    if spec.inputs.ndim != 2 or spec.targets.ndim != 2:
        raise ValueError("Dataset inputs and targets must be 2-D matrices")
    if spec.inputs.shape[1] != spec.targets.shape[1]:
        raise ValueError(
            f"Dataset {spec.name!r} has {spec.inputs.shape[1]} samples "
            f"but {spec.targets.shape[1]} labels"
        )


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
