"""Metrics sinks for per-fold and per-iteration records."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Mapping


class JsonlSink:
    """Append-only JSONL writer for metrics."""

    def __init__(self, path: str | Path, *, seed: int | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed

    def _write(self, key: str, index: int, metrics: Mapping[str, float]) -> None:
        record = {key: int(index), "seed": self.seed}
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        self._write("iteration", step, metrics)

    def on_fold(self, fold: int, metrics: Mapping[str, float]) -> None:
        self._write("fold", fold, metrics)

    __call__ = on_fold


class CsvSink:
    """Write fold metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def on_fold(self, fold: int, metrics: Mapping[str, float]) -> None:
        row = {"fold": int(fold)}
        row.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            fieldnames = sorted(row.keys())
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)

    __call__ = on_fold


__all__ = ["JsonlSink", "CsvSink"]
