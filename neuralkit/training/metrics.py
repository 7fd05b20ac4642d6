"""Metric helpers shared by the models and the pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.errors import InvalidArgumentError
from ..core.types import Array


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics(task_type: str) -> List[str]:
    if task_type == "regression":
        return ["mae", "rmse", "r2"]
    if task_type == "binary":
        return ["accuracy", "precision", "recall", "f1"]
    raise ValueError(f"Unknown task type: {task_type}")


def accuracy(predictions: Array, targets: Array) -> float:
    """Fraction of samples whose every output matches the binary target.

    Both arguments are feature-major: one column per sample.  Non-zero
    targets count as the positive class.
    """

    truth = np.asarray(targets) != 0
    preds = np.asarray(predictions, dtype=bool)
    if preds.ndim != 2 or preds.shape[1] == 0:
        raise InvalidArgumentError(
            f"accuracy needs at least one sample column, got shape {preds.shape}"
        )
    correct = np.all(preds == truth, axis=0)
    return float(np.sum(correct)) / preds.shape[1]


def compute_metric(
    name: str,
    predictions: Array,
    targets: Array,
) -> MetricResult:
    key = name.lower()
    preds = np.asarray(predictions)
    targs = np.asarray(targets)
    if key == "mae":
        value = float(np.mean(np.abs(preds - targs)))
    elif key == "rmse":
        value = float(np.sqrt(np.mean((preds - targs) ** 2)))
    elif key == "r2":
        mean = np.mean(targs)
        ss_res = float(np.sum((targs - preds) ** 2))
        ss_tot = float(np.sum((targs - mean) ** 2))
        value = 1.0 if ss_tot == 0 else float(1 - ss_res / (ss_tot + 1e-9))
    elif key == "accuracy":
        value = accuracy(preds.reshape(preds.shape[0], -1), targs.reshape(targs.shape[0], -1))
    elif key in {"precision", "recall", "f1"}:
        pred_pos = preds.astype(bool)
        targ_pos = targs != 0
        tp = float(np.sum(pred_pos & targ_pos))
        fp = float(np.sum(pred_pos & ~targ_pos))
        fn = float(np.sum(~pred_pos & targ_pos))
        precision = tp / (tp + fp + 1e-9)
        recall = tp / (tp + fn + 1e-9)
        if key == "precision":
            value = float(precision)
        elif key == "recall":
            value = float(recall)
        else:
            value = float(2 * precision * recall / (precision + recall + 1e-9))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str],
    predictions: Array,
    targets: Array,
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


__all__ = ["MetricResult", "accuracy", "default_metrics", "compute_metrics"]
