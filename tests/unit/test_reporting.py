import json

from neuralnetwork.reporting.metrics import CsvSink, JsonlSink
from neuralnetwork.reporting.plots import PlotAdapter
from neuralnetwork.reporting.summary import format_fold, format_summary

FOLD = {"tp": 3.0, "fp": 1.0, "tn": 4.0, "fn": 0.0, "precision": 0.75, "recall": 1.0, "f1": 0.857142}


def test_jsonl_sink_records_folds(tmp_path):
    sink = JsonlSink(tmp_path / "metrics.jsonl", seed=3)
    sink.on_fold(1, FOLD)
    sink.on_fold(2, FOLD)
    records = [json.loads(line) for line in (tmp_path / "metrics.jsonl").read_text().splitlines()]
    assert [r["fold"] for r in records] == [1, 2]
    assert records[0]["seed"] == 3
    assert records[0]["precision"] == 0.75


def test_csv_sink_writes_header_once(tmp_path):
    sink = CsvSink(tmp_path / "metrics.csv")
    sink.on_fold(1, FOLD)
    sink.on_fold(2, FOLD)
    lines = (tmp_path / "metrics.csv").read_text().splitlines()
    assert len(lines) == 3
    assert lines[0].split(",")[0] == "f1"


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_step(1, {"cost": 0.7})
    adapter.on_step(2, {"cost": 0.5})
    path = adapter.close()
    assert path == tmp_path / "cost.png"
    assert path.exists()


def test_plot_adapter_keeps_one_curve_per_fold(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    for fold, costs in ((1, [0.9, 0.6]), (2, [0.8, 0.5, 0.4])):
        for step, cost in enumerate(costs, start=1):
            adapter.on_step(step, {"cost": cost})
        adapter.on_fold(fold, FOLD)
    assert adapter.curves() == {"fold 1": [0.9, 0.6], "fold 2": [0.8, 0.5, 0.4]}
    assert adapter.close() == tmp_path / "cost.png"


def test_plot_adapter_disabled(tmp_path):
    adapter = PlotAdapter(tmp_path / "plots")
    adapter.on_step(1, {"cost": 0.7})
    assert adapter.close() is None
    assert not (tmp_path / "plots").exists()


def test_summary_lines():
    fold_lines = format_fold(FOLD)
    assert fold_lines[0] == "True Positives 3"
    assert fold_lines[-1].startswith("F1 0.857")
    stats = {key: (1.0, 0.0) for key in FOLD}
    summary = format_summary(stats)
    assert summary[0] == "Overall Statistics"
    assert summary[6] == "Recall 1.000000 (0.000000)"
