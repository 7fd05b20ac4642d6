import csv
import json

import pytest

from neuralkit.reporting import (
    CsvSink,
    JsonlSink,
    PlotAdapter,
    checkpoint_fields,
    config_hash,
    write_manifest,
    write_summary,
)
from neuralkit.reporting.summary import compute_auc, summarise_records


def test_jsonl_sink_writes_one_record_per_call(tmp_path):
    sink = JsonlSink(tmp_path / "m.jsonl", ("accuracy", "error"), seed=3, sha="abc")
    sink.on_epoch(0, {"error": 0.5, "accuracy": 0.5})
    sink(10, {"error": 0.25, "accuracy": 0.75})
    lines = (tmp_path / "m.jsonl").read_text().splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["epoch"] for r in records] == [0, 10]
    assert sink.rows_written == 2
    assert records[0] == {
        "epoch": 0,
        "split": "train",
        "seed": 3,
        "sha": "abc",
        "accuracy": 0.5,
        "error": 0.5,
    }


def test_jsonl_sink_truncates_existing_file(tmp_path):
    path = tmp_path / "m.jsonl"
    path.write_text('{"stale": true}\n')
    JsonlSink(path, sha="x")
    assert path.read_text() == ""


@pytest.mark.parametrize(
    "metrics",
    [
        {"accuracy": 1.0, "error": 0.0},
        {"accuracy": 1.0, "error": 0.0, "loss": 0.1, "note": 1.0},
    ],
)
def test_sinks_reject_metrics_outside_schema(tmp_path, metrics):
    jsonl = JsonlSink(tmp_path / "m.jsonl", checkpoint_fields("layered"), sha="x")
    table = CsvSink(tmp_path / "m.csv", checkpoint_fields("layered"))
    for sink in (jsonl, table):
        with pytest.raises(ValueError):
            sink.on_epoch(0, metrics)
        assert sink.rows_written == 0
    assert jsonl.path.read_text() == ""


def test_checkpoint_fields_per_model_type():
    assert checkpoint_fields("layered") == ("accuracy", "error", "loss")
    assert checkpoint_fields("perceptron") == ("accuracy", "error")
    assert checkpoint_fields("linear") == ("loss",)
    with pytest.raises(ValueError):
        checkpoint_fields("svm")
    with pytest.raises(ValueError):
        CsvSink("unused.csv", ())


def test_csv_sink_writes_fixed_header(tmp_path):
    sink = CsvSink(tmp_path / "m.csv", ("loss",), split="test")
    assert (tmp_path / "m.csv").read_text().splitlines() == ["epoch,split,loss"]
    sink.on_epoch(0, {"loss": 1.0})
    sink.on_epoch(5, {"loss": 0.5})
    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert [row["epoch"] for row in rows] == ["0", "5"]
    assert rows[1]["split"] == "test"
    assert float(rows[1]["loss"]) == 0.5


def test_plot_adapter_disabled_writes_nothing(tmp_path):
    plot = PlotAdapter(tmp_path / "run", enable_plots=False)
    plot.on_epoch(0, {"error": 1.0})
    assert plot.close() is None
    assert not (tmp_path / "run").exists()


def test_plot_adapter_saves_curve(tmp_path):
    pytest.importorskip("matplotlib")
    plot = PlotAdapter(tmp_path, enable_plots=True, metric="loss", filename="curve.png")
    plot.on_epoch(0, {"loss": 1.0})
    plot.on_epoch(1, {"error": 0.3})
    plot.on_epoch(2, {"loss": 0.4})
    path = plot.close()
    assert path == tmp_path / "curve.png"
    assert path.exists() and path.stat().st_size > 0


def test_compute_auc_is_trapezoidal():
    assert compute_auc([1.0]) == 0.0
    assert compute_auc([1.0, 0.0, 0.0]) == pytest.approx(0.5)


def test_summarise_records_skips_identity_fields():
    records = [
        {"epoch": 0, "seed": 1, "split": "train", "error": 0.5},
        {"epoch": 10, "seed": 1, "split": "train", "error": 0.25},
    ]
    summary = summarise_records(records, tail=8)
    assert set(summary["metrics"]) == {"error"}
    assert summary["last_epoch"] == 10
    assert summary["metrics"]["error"]["last"] == 0.25
    assert summary["metrics"]["error"]["min"] == 0.25


def test_write_summary_handles_missing_metrics(tmp_path):
    out = write_summary(tmp_path / "missing.jsonl", tmp_path / "summary.json")
    summary = json.loads((tmp_path / "summary.json").read_text())
    assert out == str(tmp_path / "summary.json")
    assert summary["records"] == 0
    assert summary["metrics"] == {}


def test_write_manifest_records_environment(tmp_path):
    path = write_manifest(
        tmp_path / "nested" / "manifest.json",
        config={"train": {"epochs": 3}},
        dataset_provenance={"generator": "xor"},
        model={"type": "layered"},
    )
    manifest = json.loads(open(path).read())
    assert manifest["config"]["train"]["epochs"] == 3
    assert manifest["dataset"] == {"generator": "xor"}
    assert manifest["model"] == {"type": "layered"}
    assert set(manifest["environment"]) == {"python", "platform", "numpy", "pandas"}
    assert manifest["config_hash"] == config_hash({"train": {"epochs": 3}})
    assert manifest["git_sha"]
