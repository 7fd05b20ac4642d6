"""Checkpoint sinks fed by the ``on_epoch`` training callbacks.

A sink is opened with the metric names its model reports at every
checkpoint.  Records must carry exactly those names, so ``metrics.jsonl`` and
``metrics.csv`` keep one schema per run.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Mapping, Sequence

from .artifacts import git_sha

#: Metric names reported at each checkpoint, per model type.
CHECKPOINT_FIELDS: Dict[str, tuple[str, ...]] = {
    "layered": ("accuracy", "error", "loss"),
    "perceptron": ("accuracy", "error"),
    "linear": ("loss",),
}


def checkpoint_fields(model_type: str) -> tuple[str, ...]:
    if model_type not in CHECKPOINT_FIELDS:
        raise ValueError(f"No checkpoint schema for model type {model_type!r}")
    return CHECKPOINT_FIELDS[model_type]


class _CheckpointSink:
    def __init__(self, path: str | Path, fields: Sequence[str], split: str) -> None:
        if not fields:
            raise ValueError("A checkpoint sink needs at least one metric name")
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.fields = tuple(fields)
        self.split = split
        self.rows_written = 0

    def _values(self, metrics: Mapping[str, float]) -> Dict[str, float]:
        missing = [name for name in self.fields if name not in metrics]
        unexpected = sorted(set(metrics) - set(self.fields))
        if missing or unexpected:
            raise ValueError(
                f"{type(self).__name__} expects metrics {list(self.fields)}; "
                f"missing {missing}, unexpected {unexpected}"
            )
        return {name: float(metrics[name]) for name in self.fields}

    def _write(self, epoch: int, values: Mapping[str, float]) -> None:
        raise NotImplementedError

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self._write(int(epoch), self._values(metrics))
        self.rows_written += 1

    def __call__(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.on_epoch(epoch, metrics)


class JsonlSink(_CheckpointSink):
    """One JSON object per checkpoint, tagged with split, seed and git sha."""

    def __init__(
        self,
        path: str | Path,
        fields: Sequence[str] = CHECKPOINT_FIELDS["layered"],
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(path, fields, split)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or git_sha()

    def _write(self, epoch: int, values: Mapping[str, float]) -> None:
        record = {"epoch": epoch, "split": self.split, "seed": self.seed, "sha": self.sha}
        record.update(values)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_CheckpointSink):
    """CSV with the header ``epoch, split, *fields`` written on open."""

    def __init__(
        self,
        path: str | Path,
        fields: Sequence[str] = CHECKPOINT_FIELDS["layered"],
        *,
        split: str = "train",
    ) -> None:
        super().__init__(path, fields, split)
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            csv.writer(handle).writerow(["epoch", "split", *self.fields])

    def _write(self, epoch: int, values: Mapping[str, float]) -> None:
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            csv.writer(handle).writerow([epoch, self.split, *values.values()])


__all__ = ["CHECKPOINT_FIELDS", "CsvSink", "JsonlSink", "checkpoint_fields"]
