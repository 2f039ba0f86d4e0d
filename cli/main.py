"""Command line entry point: cross-validated training of a binary classifier."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from neuralnetwork.core.activations import available_activations
from neuralnetwork.data.dataset import DataSet
from neuralnetwork.data.image_io import load_from_directory, save_image
from neuralnetwork.evaluation.crossval import CrossValidationResult, cross_validate
from neuralnetwork.evaluation.prediction import Prediction
from neuralnetwork.reporting.metrics import JsonlSink
from neuralnetwork.reporting.plots import PlotAdapter
from neuralnetwork.reporting.summary import format_fold, format_summary
from neuralnetwork.training.config import TrainerConfig

DEFAULTS: dict = {
    "data": {
        "csv_file": "",
        "positive_dir": "",
        "negative_dir": "",
        "width": 64,
        "height": 64,
        "color": False,
    },
    "model": {"layer1": 0, "layer2": 0, "output_layer": 1},
    "train": {
        "learning_rate": 0.1,
        "lambda": 0.0,
        "iterations": 1000,
        "heartbeat": 0,
        "activation": "sigmoid",
        "seed": None,
    },
    "eval": {
        "folds": 1,
        "split": 70,
        "threshold": 0.5,
        "stratified": True,
        "save_dir": "",
        "metrics_out": "",
        "plot_dir": "",
    },
}

# CLI flag -> (section, key)
_FLAG_TARGETS = {
    "csv_file": ("data", "csv_file"),
    "positive_dir": ("data", "positive_dir"),
    "negative_dir": ("data", "negative_dir"),
    "width": ("data", "width"),
    "height": ("data", "height"),
    "color": ("data", "color"),
    "layer1": ("model", "layer1"),
    "layer2": ("model", "layer2"),
    "output_layer": ("model", "output_layer"),
    "learning_rate": ("train", "learning_rate"),
    "lambda_": ("train", "lambda"),
    "iterations": ("train", "iterations"),
    "heartbeat": ("train", "heartbeat"),
    "activation": ("train", "activation"),
    "seed": ("train", "seed"),
    "folds": ("eval", "folds"),
    "split": ("eval", "split"),
    "threshold": ("eval", "threshold"),
    "stratified": ("eval", "stratified"),
    "save_dir": ("eval", "save_dir"),
    "metrics_out": ("eval", "metrics_out"),
    "plot_dir": ("eval", "plot_dir"),
}


class FoldPrinter:
    """Print each fold's statistics as soon as the fold is scored."""

    def on_fold(self, fold: int, metrics) -> None:
        print(f"Fold {fold}")
        for line in format_fold(metrics):
            print(line)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--csv-file", help="Headerless CSV; last column is the label")
    parser.add_argument("--positive-dir", help="Directory of positive example images")
    parser.add_argument("--negative-dir", help="Directory of negative example images")
    parser.add_argument("--width", type=int, help="Required image width")
    parser.add_argument("--height", type=int, help="Required image height")
    parser.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use RGB planes instead of grayscale",
    )
    parser.add_argument("--layer1", type=int, help="Hidden layer 1 size (0 = none)")
    parser.add_argument("--layer2", type=int, help="Hidden layer 2 size (0 = none)")
    parser.add_argument("--output-layer", type=int, help="Output layer size")
    parser.add_argument("--learning-rate", type=float)
    parser.add_argument("--lambda", dest="lambda_", type=float, help="L2 coefficient")
    parser.add_argument("--iterations", type=int, help="Gradient-descent iterations")
    parser.add_argument(
        "--heartbeat", type=int, help="Print progress every N iterations (0 = off)"
    )
    parser.add_argument("--activation", choices=available_activations())
    parser.add_argument("--seed", type=int, help="Seed for shuffling and weights")
    parser.add_argument("--folds", type=int, help="Number of cross-validation folds")
    parser.add_argument("--split", type=float, help="Training percentage per fold")
    parser.add_argument("--threshold", type=float, help="Classification threshold")
    parser.add_argument(
        "--stratified",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Balance classes in the training split",
    )
    parser.add_argument("--save-dir", help="Export best-fold misclassified images here")
    parser.add_argument("--metrics-out", help="Write per-fold metrics as JSONL")
    parser.add_argument("--plot-dir", help="Write the cost curve of every fold here")
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


def resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(DEFAULTS))
    if args.config:
        config = _merge(config, _load_override(args.config))
    for flag, (section, key) in _FLAG_TARGETS.items():
        value = getattr(args, flag, None)
        if value is not None:
            config[section][key] = value
    return config


def load_dataset(data_cfg: dict, seed: int | None) -> DataSet:
    dataset = DataSet(True, rng=seed)
    if data_cfg["csv_file"]:
        dataset.add_from_csv(data_cfg["csv_file"])
    else:
        size = (data_cfg["width"], data_cfg["height"], data_cfg["color"])
        if data_cfg["positive_dir"]:
            load_from_directory(data_cfg["positive_dir"], *size, 1.0, dataset)
        if data_cfg["negative_dir"]:
            load_from_directory(data_cfg["negative_dir"], *size, 0.0, dataset)
    return dataset


def layer_sizes(dataset: DataSet, model_cfg: dict) -> list[int]:
    sizes = [dataset.num_cols_samples]
    for key in ("layer1", "layer2"):
        if model_cfg[key]:
            sizes.append(int(model_cfg[key]))
    sizes.append(int(model_cfg["output_layer"]))
    return sizes


def save_results(result: CrossValidationResult, config: dict) -> int:
    """Write the best fold's misclassified rows as ``fp{i}.png`` / ``fn{i}.png``."""

    save_dir = Path(config["eval"]["save_dir"])
    if not save_dir.is_dir():
        raise SystemExit(f"save directory [{save_dir}] is not a directory")
    if result.best_network is None or result.best_fold is None:
        return 0
    data_cfg = config["data"]
    size = (data_cfg["width"], data_cfg["height"], data_cfg["color"])
    prediction = Prediction(result.best_network, config["eval"]["threshold"])
    prediction.predict(result.best_fold)
    written = 0
    for prefix, rows in (
        ("fp", prediction.false_positive_samples),
        ("fn", prediction.false_negative_samples),
    ):
        for index, row in enumerate(rows, start=1):
            save_image(row, *size, save_dir / f"{prefix}{index}.png")
            written += 1
    return written


def main(argv: Iterable[str] | None = None) -> CrossValidationResult:
    args = parse_args(argv)
    config = resolve_config(args)
    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    train_cfg = config["train"]
    eval_cfg = config["eval"]
    dataset = load_dataset(config["data"], train_cfg["seed"])
    if dataset.is_empty():
        raise SystemExit("no data set could be built, exiting")
    print(f"loaded {dataset.num_samples} sample(s)")

    trainer_config = TrainerConfig(
        layer_sizes=layer_sizes(dataset, config["model"]),
        learning_rate=float(train_cfg["learning_rate"]),
        lambda_=float(train_cfg["lambda"]),
        max_iterations=int(train_cfg["iterations"]),
        heartbeat=int(train_cfg["heartbeat"]),
        activation=train_cfg["activation"],
        record_costs=True,
        seed=train_cfg["seed"],
    ).validate()

    sinks: list = [FoldPrinter()]
    callbacks: list = []
    if eval_cfg["metrics_out"]:
        sinks.append(JsonlSink(eval_cfg["metrics_out"], seed=train_cfg["seed"]))
    plot = None
    if eval_cfg["plot_dir"]:
        plot = PlotAdapter(eval_cfg["plot_dir"], enable_plots=True)
        callbacks.append(plot)
        sinks.append(plot)

    result = cross_validate(
        dataset,
        trainer_config,
        folds=int(eval_cfg["folds"]),
        split=float(eval_cfg["split"]),
        threshold=float(eval_cfg["threshold"]),
        stratified=bool(eval_cfg["stratified"]),
        callbacks=callbacks,
        sinks=sinks,
    )

    if plot is not None:
        plot.close()

    if eval_cfg["save_dir"]:
        save_results(result, config)

    for line in format_summary(result.summary()):
        print(line)
    return result


if __name__ == "__main__":
    main()
