"""Command line entry point for neuralkit training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from neuralkit.training import pipelines


def _format_result(result, run_id: str | None = None) -> str:
    payload = {
        "epochs_run": result.epochs_run,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
        "checkpoints": len(result.history),
    }
    if result.history:
        payload["final_error"] = result.history[-1]
    if run_id is not None:
        payload["run_id"] = run_id
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="separable-single-neuron",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a training curve to loss.png"
    )
    parser.add_argument("--seed", type=int, help="Seed used for splits and weight init")
    parser.add_argument("--epochs", type=int, help="Override the number of epochs")
    parser.add_argument(
        "--learning-rate", type=float, help="Override the gradient-descent learning rate"
    )
    parser.add_argument(
        "--hidden",
        type=int,
        nargs="*",
        help="Override the hidden layer widths of a layered model",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        import yaml

        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))
    from_file = False
    if args.config:
        override = _load_override(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)
        from_file = True

    train_cfg = config.setdefault("train", {})
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.learning_rate is not None:
        train_cfg["lr"] = float(args.learning_rate)
    if args.hidden is not None:
        config.setdefault("model", {})["hidden"] = list(args.hidden)

    run_id: str | None = None
    if from_file:
        run_id = pipelines.config_hash(config)
        train_cfg["run_dir"] = str(Path(".artifacts") / run_id)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result, run_id=run_id))


if __name__ == "__main__":
    main()
