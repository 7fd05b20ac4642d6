import json

import pytest

from neuralkit.training import pipelines


def _config(name, tmp_path, **train):
    config = pipelines.load_preset(name)
    config["train"].update({"run_dir": str(tmp_path / name), **train})
    return config


def test_builtin_and_file_presets_are_listed():
    names = set(pipelines.presets())
    assert {
        "separable-single-neuron",
        "blobs-hidden",
        "xor-two-layer",
        "perceptron-separable",
        "linear-line",
        "blobs-wide",
    } <= names


def test_load_preset_returns_independent_copies():
    first = pipelines.load_preset("separable-single-neuron")
    first["train"]["epochs"] = 1
    assert pipelines.load_preset("separable-single-neuron")["train"]["epochs"] == 1000


def test_unknown_preset_lists_available():
    with pytest.raises(KeyError, match="linear-line"):
        pipelines.load_preset("does-not-exist")


def test_config_hash_is_order_independent():
    assert pipelines.config_hash({"a": 1, "b": [1, 2]}) == pipelines.config_hash(
        {"b": [1, 2], "a": 1}
    )
    assert len(pipelines.config_hash({})) == 12


def test_layered_pipeline_writes_artifacts(tmp_path):
    config = _config("separable-single-neuron", tmp_path, epochs=40, eval_every=10)
    result = pipelines.run_pipeline(config)
    run_dir = tmp_path / "separable-single-neuron"

    for name in ("metrics.jsonl", "metrics.csv", "config.json", "manifest.json", "summary.json"):
        assert (run_dir / name).exists(), name
    assert result.metrics_path == str(run_dir / "metrics.jsonl")
    assert 1 <= result.epochs_run <= 40
    assert len(result.history) <= 4

    records = [json.loads(line) for line in (run_dir / "metrics.jsonl").read_text().splitlines()]
    assert len(records) == len(result.history)
    assert all(r["split"] == "train" for r in records)
    assert [r["error"] for r in records] == pytest.approx(result.history)

    manifest = json.loads((run_dir / "manifest.json").read_text())
    assert manifest["model"]["layer_dims"] == [3, 1]
    assert manifest["dataset"]["test_split"] == 0.2
    assert len(manifest["config_hash"]) == 12
    header = (run_dir / "metrics.csv").read_text().splitlines()[0]
    assert header == "epoch,split,accuracy,error,loss"

    test_metrics = json.loads((run_dir / "metrics_test.json").read_text())
    assert set(test_metrics) == {"accuracy", "precision", "recall", "f1"}


def test_xor_pipeline_without_test_split(tmp_path):
    config = _config("xor-two-layer", tmp_path, epochs=20, eval_every=5)
    result = pipelines.run_pipeline(config)
    run_dir = tmp_path / "xor-two-layer"
    assert not (run_dir / "metrics_test.json").exists()
    manifest = json.loads((run_dir / "manifest.json").read_text())
    assert manifest["model"]["layer_dims"] == [3, 8, 4, 1]
    assert result.epochs_run <= 20


def test_perceptron_pipeline_throttles_sinks(tmp_path):
    config = _config("perceptron-separable", tmp_path, epochs=12, eval_every=5)
    result = pipelines.run_pipeline(config)
    run_dir = tmp_path / "perceptron-separable"
    assert result.epochs_run == 12
    assert len(result.history) == 12
    records = [json.loads(line) for line in (run_dir / "metrics.jsonl").read_text().splitlines()]
    assert [r["epoch"] for r in records] == [0, 5, 10]
    assert set(records[0]) == {"epoch", "split", "seed", "sha", "accuracy", "error"}
    assert "accuracy" in json.loads((run_dir / "metrics_test.json").read_text())


def test_linear_pipeline_reports_regression_metrics(tmp_path):
    config = _config("linear-line", tmp_path, epochs=300)
    result = pipelines.run_pipeline(config)
    run_dir = tmp_path / "linear-line"
    test_metrics = json.loads((run_dir / "metrics_test.json").read_text())
    assert set(test_metrics) == {"mae", "rmse", "r2"}
    assert test_metrics["r2"] > 0.9
    assert result.history[-1] < result.history[0]
    manifest = json.loads((run_dir / "manifest.json").read_text())
    assert manifest["model"]["loss"] == "mse"


def test_plots_are_written_when_enabled(tmp_path):
    pytest.importorskip("matplotlib")
    config = _config("separable-single-neuron", tmp_path, epochs=20, eval_every=5, enable_plots=True)
    pipelines.run_pipeline(config)
    assert (tmp_path / "separable-single-neuron" / "loss.png").exists()


def test_pipeline_prints_startup_banner(tmp_path, capsys):
    pipelines.run_pipeline(_config("separable-single-neuron", tmp_path, epochs=2))
    out = capsys.readouterr().out
    assert "=== neuralkit run ===" in out
    assert "Dimensions    : [3, 1]" in out


def test_run_dir_defaults_to_env_root(tmp_path, monkeypatch):
    monkeypatch.setenv("NEURALKIT_RUNS_DIR", str(tmp_path / "root"))
    config = pipelines.load_preset("separable-single-neuron")
    config["train"].pop("run_dir")
    config["train"]["epochs"] = 2
    result = pipelines.run_pipeline(config)
    assert result.metrics_path.startswith(str(tmp_path / "root"))
    assert result.metrics_path.endswith("separable/layered/metrics.jsonl")


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda c: c["model"].update(type="svm"), "Unknown model type"),
        (lambda c: c["model"].update(hidden=[0]), "Invalid hidden"),
        (lambda c: c["model"].update(type="linear"), "regression dataset"),
    ],
)
def test_pipeline_rejects_bad_configs(tmp_path, mutate, message):
    config = _config("separable-single-neuron", tmp_path, epochs=2)
    mutate(config)
    with pytest.raises(ValueError, match=message):
        pipelines.run_pipeline(config)


def test_binary_models_reject_regression_data(tmp_path):
    config = _config("linear-line", tmp_path, epochs=2)
    config["model"] = {"type": "layered", "hidden": []}
    with pytest.raises(ValueError, match="binary dataset"):
        pipelines.run_pipeline(config)
