"""Generic CSV loader for regression and binary classification tasks."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from ..core.errors import InvalidArgumentError
from .registry import DatasetSpec, register_dataset
from .utils import standardize


def _load_csv(path: Path, target_col: str) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path)
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    y = df.pop(target_col).to_numpy()
    X = df.to_numpy(dtype=np.float64)
    return X, y


@register_dataset("csv")
def load_csv(
    *,
    csv_path: str | Path,
    target_col: str = "target",
    task_type: str = "binary",
    standardize_inputs: bool = True,
    **_: object,
) -> DatasetSpec:
    """Load a CSV file with one sample per row into feature-major matrices.

    For ``task_type="binary"`` the target column must hold exactly two
    distinct values; the sorted second value becomes the positive class.
    """

    path = Path(csv_path)
    X_rows, y_raw = _load_csv(path, target_col)
    X = X_rows.T

    provenance: dict[str, object] = {
        "path": str(path),
        "target_col": target_col,
        "standardize_inputs": standardize_inputs,
    }
    if standardize_inputs:
        X, mean, std = standardize(X)
        provenance["normalization"] = {
            "mean": mean.flatten().tolist(),
            "std": std.flatten().tolist(),
        }

    if task_type == "binary":
        classes = pd.unique(pd.Series(y_raw)).tolist()
        if len(classes) > 2:
            raise InvalidArgumentError(
                f"Multi-class classification is not supported, found {len(classes)} classes"
            )
        classes = sorted(classes)
        y = (y_raw == classes[-1]).astype(np.float64).reshape(1, -1)
        provenance["classes"] = [str(c) for c in classes]
    elif task_type == "regression":
        y = np.asarray(y_raw, dtype=np.float64).reshape(1, -1)
    else:
        raise ValueError(f"Unknown task type: {task_type}")

    return DatasetSpec(
        name="csv",
        inputs=X,
        targets=y,
        task_type=task_type,
        provenance=provenance,
    )


__all__ = ["load_csv"]
