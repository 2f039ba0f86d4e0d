"""Repeated randomise/split/train/score folds with aggregate statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.network import NeuralNetwork
from ..data.dataset import DataSet
from ..training.config import TrainerConfig
from ..training.trainer import Trainer
from .prediction import ConfusionMatrix, Prediction

METRICS = ("tp", "fp", "tn", "fn", "precision", "recall", "f1")


@dataclass
class FoldResult:
    """Outcome of a single train/test partition."""

    fold: int
    confusion: ConfusionMatrix
    costs: List[float] = field(default_factory=list)

    @property
    def metrics(self) -> Mapping[str, float]:
        return self.confusion.as_dict()


@dataclass
class CrossValidationResult:
    """Per-fold results plus the best network found (by F1)."""

    folds: List[FoldResult]
    best_network: NeuralNetwork | None = None
    best_fold: DataSet | None = None
    best_index: int | None = None

    def values(self, metric: str) -> np.ndarray:
        return np.asarray([fold.metrics[metric] for fold in self.folds], dtype=np.float64)

    def summary(self) -> Dict[str, Tuple[float, float]]:
        """Return ``{metric: (mean, sample variance)}`` over every fold."""

        stats: Dict[str, Tuple[float, float]] = {}
        for metric in METRICS:
            values = self.values(metric)
            if values.size == 0:
                stats[metric] = (0.0, 0.0)
                continue
            variance = float(np.var(values, ddof=1)) if values.size > 1 else 0.0
            stats[metric] = (float(np.mean(values)), variance)
        return stats


def cross_validate(
    dataset: DataSet,
    config: TrainerConfig,
    *,
    folds: int = 1,
    split: float = 70,
    threshold: float = 0.5,
    stratified: bool = True,
    callbacks: Sequence[object] | None = None,
    sinks: Sequence[object] | None = None,
) -> CrossValidationResult:
    """Train and score ``folds`` networks on fresh random partitions of ``dataset``.

    ``dataset`` is shuffled in place on every fold. Each fold trains on
    ``split`` percent of the rows (class balanced when ``stratified``) and is
    scored on the remainder. ``sinks`` receive ``on_fold(fold, metrics)``.
    """

    if folds < 1:
        raise ConfigurationError(f"folds must be >= 1, got {folds}")
    if not dataset.has_truth():
        raise ConfigurationError("cross-validation requires a DataSet with truth")
    config = config.validate()

    result = CrossValidationResult(folds=[])
    best_f1 = 0.0
    for fold in range(1, folds + 1):
        dataset.randomize()
        if stratified:
            training, testing = dataset.split_equally(split)
        else:
            training, testing = dataset.split_sequentially(split)
        training.randomize()

        trainer = Trainer(config, training, callbacks=callbacks)
        network = trainer.train()
        prediction = Prediction(network, threshold)
        confusion = prediction.predict(testing)

        fold_result = FoldResult(fold=fold, confusion=confusion, costs=list(trainer.costs))
        result.folds.append(fold_result)
        for sink in sinks or []:
            sink.on_fold(fold, fold_result.metrics)  # type: ignore[attr-defined]

        if confusion.f1 > best_f1:
            best_f1 = confusion.f1
            result.best_network = network
            result.best_fold = dataset.dup()
            result.best_index = fold
    return result


__all__ = ["FoldResult", "CrossValidationResult", "cross_validate", "METRICS"]
