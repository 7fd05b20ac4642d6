"""Config-driven training runs for the neuralkit models."""

from __future__ import annotations

import json
import os
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping, Sequence

import numpy as np

from ..core.layers import LayeredNetwork
from ..core.types import RunResult
from ..data import registry
from ..data.registry import DatasetSpec
from ..data.utils import seed_everything, split_dataset
from ..models import LinearRegression, Perceptron
from ..reporting.artifacts import config_hash, write_json, write_manifest
from ..reporting.metrics import CsvSink, JsonlSink, checkpoint_fields
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .metrics import compute_metrics, default_metrics

MODEL_TYPES = ("layered", "perceptron", "linear")

_PRESETS: Dict[str, Mapping[str, object]] = {
    "separable-single-neuron": {
        "data": {
            "name": "separable",
            "options": {"n_samples": 200, "n_features": 2, "seed": 0},
        },
        "model": {"type": "layered", "hidden": []},
        "train": {
            "epochs": 1000,
            "lr": 0.1,
            "eval_every": 10,
            "test_split": 0.2,
            "seed": 0,
            "run_dir": "runs/separable-single-neuron",
            "enable_plots": False,
        },
    },
    "blobs-hidden": {
        "data": {
            "name": "blobs",
            "options": {"n_samples": 300, "n_features": 2, "n_classes": 2, "random_state": 3},
        },
        "model": {"type": "layered", "hidden": [4]},
        "train": {
            "epochs": 2000,
            "lr": 0.5,
            "eval_every": 50,
            "test_split": 0.2,
            "seed": 1,
            "run_dir": "runs/blobs-hidden",
            "enable_plots": False,
        },
    },
    "xor-two-layer": {
        "data": {"name": "xor", "options": {"n_samples": 200, "noise": 0.1, "seed": 0}},
        "model": {"type": "layered", "hidden": [8, 4]},
        "train": {
            "epochs": 5000,
            "lr": 1.0,
            "eval_every": 100,
            "test_split": 0.0,
            "seed": 2,
            "run_dir": "runs/xor-two-layer",
            "enable_plots": False,
        },
    },
    "perceptron-separable": {
        "data": {
            "name": "separable",
            "options": {"n_samples": 200, "n_features": 2, "seed": 4},
        },
        "model": {"type": "perceptron"},
        "train": {
            "epochs": 100,
            "lr": 0.01,
            "eval_every": 1,
            "test_split": 0.2,
            "seed": 4,
            "run_dir": "runs/perceptron-separable",
            "enable_plots": False,
        },
    },
    "linear-line": {
        "data": {"name": "line", "options": {"n_samples": 128, "seed": 0}},
        "model": {"type": "linear", "loss": "mse"},
        "train": {
            "epochs": 500,
            "lr": 0.1,
            "eval_every": 10,
            "test_split": 0.2,
            "seed": 5,
            "run_dir": "runs/linear-line",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    if name not in _PRESETS:
        available = ", ".join(sorted(presets()))
        raise KeyError(f"Unknown preset: {name}. Available presets: {available}")
    return deepcopy(_PRESETS[name])


class _Every:
    """Forward ``on_epoch`` to ``sinks`` on every ``interval``-th epoch."""

    def __init__(self, interval: int, sinks: Sequence[object]) -> None:
        self.interval = max(1, interval)
        self.sinks = list(sinks)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if epoch % self.interval != 0:
            return
        for sink in self.sinks:
            sink.on_epoch(epoch, metrics)

    __call__ = on_epoch


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config.get("train", {}))

    model_type = str(model_cfg.get("type", "layered"))
    if model_type not in MODEL_TYPES:
        raise ValueError(f"Unknown model type {model_type!r}; expected one of {MODEL_TYPES}")

    seed = int(train_cfg.get("seed", 0))
    seed_everything(seed)
    epochs = int(train_cfg.get("epochs", 1000))
    lr = float(train_cfg.get("lr", 0.01))
    eval_every = int(train_cfg.get("eval_every", 100))
    test_split = float(train_cfg.get("test_split", 0.0))

    dataset = registry.get_dataset(data_cfg["name"], **data_cfg.get("options", {}))
    if model_type == "linear" and dataset.task_type != "regression":
        raise ValueError("The linear model requires a regression dataset")
    if model_type != "linear" and dataset.task_type != "binary":
        raise ValueError(f"The {model_type} model requires a binary dataset")
    train_set, test_set = split_dataset(dataset, test_split=test_split, seed=seed)

    run_dir = _resolve_run_dir(train_cfg, dataset.name, model_type)
    run_dir.mkdir(parents=True, exist_ok=True)

    fields = checkpoint_fields(model_type)
    train_jsonl = JsonlSink(run_dir / "metrics.jsonl", fields, split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics.csv", fields, split="train")
    plot = PlotAdapter(
        run_dir,
        enable_plots=bool(train_cfg.get("enable_plots", False)),
        metric="loss" if model_type == "linear" else "error",
    )
    sinks = [train_jsonl, train_csv, plot]

    model_seed = int(model_cfg.get("seed", seed))
    if model_type == "layered":
        hidden = [int(h) for h in model_cfg.get("hidden", [])]
        network = LayeredNetwork(layer_dims=hidden, seed=model_seed)
        if not network.valid_topology:
            raise ValueError(f"Invalid hidden layer widths: {model_cfg.get('hidden')}")
        dims = [train_set.n_features + 1, *hidden, train_set.n_outputs]
        _print_startup_summary(dataset.name, model_type, dims, epochs, lr)
        network.fit(
            train_set.inputs,
            train_set.targets,
            epochs=epochs,
            learning_rate=lr,
            evaluation_interval=eval_every,
            callbacks=sinks,
        )
        history = list(network.history)
        epochs_run = network.epochs_run
        model_meta = {"type": model_type, "layer_dims": network.dims, "seed": model_seed}
        predict = network.predict
    else:
        model = _build_single_layer(model_type, model_cfg, model_seed)
        model.on_epoch = _Every(eval_every, sinks)
        dims = [train_set.n_features + 1, 1]
        _print_startup_summary(dataset.name, model_type, dims, epochs, lr)
        model.fit(
            train_set.inputs.T,
            _sample_major_targets(train_set, model_type),
            epochs=epochs,
            learning_rate=lr,
        )
        history = list(model.history)
        epochs_run = len(history)
        model_meta = {"type": model_type, "layer_dims": dims, "seed": model_seed}
        if model_type == "linear":
            model_meta["loss"] = model.loss

        def predict(inputs: np.ndarray) -> np.ndarray:
            return model.predict(inputs.T).T

    plot.close()

    if test_set is not None:
        test_metrics = compute_metrics(
            default_metrics(test_set.task_type),
            predict(test_set.inputs),
            test_set.targets,
        )
        write_json(run_dir / "metrics_test.json", test_metrics)

    safe_config = json.loads(json.dumps(config))
    write_json(run_dir / "config.json", safe_config)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=train_set.provenance,
        model=model_meta,
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(train_jsonl.path, run_dir / "summary.json", tail=summary_tail)

    return RunResult(
        epochs_run=epochs_run,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        history=history,
    )


def _build_single_layer(model_type: str, model_cfg: Mapping[str, object], seed: int):
    if model_type == "perceptron":
        return Perceptron(seed=seed)
    return LinearRegression(loss=str(model_cfg.get("loss", "mse")), seed=seed)


def _sample_major_targets(dataset: DatasetSpec, model_type: str) -> np.ndarray:
    targets = dataset.targets.T
    if model_type == "perceptron":
        return np.where(targets != 0, 1.0, -1.0)
    return targets


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str, model_type: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(train_cfg["run_dir"])
    root = Path(os.environ.get("NEURALKIT_RUNS_DIR", "runs"))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return root / timestamp / dataset / model_type


def _print_startup_summary(
    dataset_name: str,
    model_type: str,
    dims: Sequence[int],
    epochs: int,
    lr: float,
) -> None:
    param_count = sum(dims[i] * dims[i + 1] for i in range(len(dims) - 1))
    print("=== neuralkit run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Model         : {model_type}")
    print(f"Dimensions    : {list(dims)}")
    print(f"Epochs        : {epochs}")
    print(f"Learning rate : {lr}")
    print(f"Parameters    : {param_count}")
    print("=====================")


__all__ = ["MODEL_TYPES", "config_hash", "load_preset", "presets", "run_pipeline"]
