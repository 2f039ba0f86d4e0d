import json

import numpy as np

from cli.main import main


def _write_csv(path, n=80, seed=0):
    rng = np.random.default_rng(seed)
    labels = rng.integers(0, 2, size=n)
    features = np.where(labels[:, None] == 1, 0.8, 0.2) + 0.05 * rng.standard_normal((n, 4))
    rows = np.hstack([np.clip(features, 0.0, 1.0), labels[:, None]])
    path.write_text("\n".join(",".join(f"{v:.6f}" for v in row) for row in rows) + "\n")
    return path


def test_cli_csv_run(tmp_path, capsys):
    csv_path = _write_csv(tmp_path / "data.csv")
    metrics = tmp_path / "metrics.jsonl"
    result = main(
        [
            "--csv-file", str(csv_path),
            "--iterations", "200",
            "--learning-rate", "1.0",
            "--folds", "2",
            "--split", "50",
            "--seed", "3",
            "--metrics-out", str(metrics),
            "--plot-dir", str(tmp_path / "plots"),
        ]
    )
    out = capsys.readouterr().out
    assert "loaded 80 sample(s)" in out
    assert "Overall Statistics" in out
    assert out.count("True Positives") == 3
    assert len(result.folds) == 2
    records = [json.loads(line) for line in metrics.read_text().splitlines()]
    assert [r["fold"] for r in records] == [1, 2]
    assert (tmp_path / "plots" / "cost.png").exists()


def test_cli_config_override_and_dump(tmp_path, capsys):
    csv_path = _write_csv(tmp_path / "data.csv", seed=1)
    override = tmp_path / "override.yaml"
    override.write_text(
        "model:\n  layer1: 3\ntrain:\n  iterations: 50\n  activation: sigmoid\n"
        "eval:\n  stratified: false\n"
    )
    dumped = tmp_path / "resolved.json"
    main(
        [
            "--csv-file", str(csv_path),
            "--config", str(override),
            "--dump-config", str(dumped),
            "--heartbeat", "25",
        ]
    )
    config = json.loads(dumped.read_text())
    assert config["model"]["layer1"] == 3
    assert config["train"]["iterations"] == 50
    assert config["eval"]["stratified"] is False
    out = capsys.readouterr().out
    assert "Iteration: 25," in out and "Iteration: 50," in out


def test_cli_exports_misclassified_images(tmp_path):
    csv_path = _write_csv(tmp_path / "data.csv", n=40, seed=2)
    save_dir = tmp_path / "errors"
    save_dir.mkdir()
    # Two iterations leave the network nearly untrained, so some rows are misclassified.
    result = main(
        [
            "--csv-file", str(csv_path),
            "--iterations", "2",
            "--learning-rate", "0.01",
            "--threshold", "0.0",
            "--width", "2",
            "--height", "2",
            "--save-dir", str(save_dir),
            "--seed", "0",
        ]
    )
    assert result.best_network is not None
    assert list(save_dir.glob("fp*.png"))


def test_cli_prints_each_fold_as_it_completes(tmp_path, capsys):
    csv_path = _write_csv(tmp_path / "data.csv", seed=4)
    main(
        [
            "--csv-file", str(csv_path),
            "--iterations", "20",
            "--heartbeat", "20",
            "--folds", "2",
            "--no-stratified",
            "--seed", "5",
        ]
    )
    lines = capsys.readouterr().out.splitlines()
    heartbeats = [i for i, line in enumerate(lines) if line.startswith("Iteration: 20,")]
    assert len(heartbeats) == 2
    assert heartbeats[0] < lines.index("Fold 1") < heartbeats[1] < lines.index("Fold 2")
    assert lines.index("Fold 2") < lines.index("Overall Statistics")
