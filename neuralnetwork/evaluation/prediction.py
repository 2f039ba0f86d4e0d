"""Confusion-matrix scoring of a trained network against labelled data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from ..core.network import NeuralNetwork
from ..core.types import Array
from ..data.dataset import DataSet


def _ratio(numerator: float, denominator: float) -> float:
    # Zero denominators score 0.0 rather than NaN.
    return float(numerator / denominator) if denominator else 0.0


@dataclass(frozen=True)
class ConfusionMatrix:
    """Counts of thresholded predictions against truth."""

    tp: int = 0
    fp: int = 0
    tn: int = 0
    fn: int = 0

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn

    @property
    def precision(self) -> float:
        return _ratio(self.tp, self.tp + self.fp)

    @property
    def recall(self) -> float:
        return _ratio(self.tp, self.tp + self.fn)

    @property
    def f1(self) -> float:
        precision, recall = self.precision, self.recall
        return _ratio(2.0 * precision * recall, precision + recall)

    @property
    def accuracy(self) -> float:
        return _ratio(self.tp + self.tn, self.total)

    def as_dict(self) -> Mapping[str, float]:
        return {
            "tp": float(self.tp),
            "fp": float(self.fp),
            "tn": float(self.tn),
            "fn": float(self.fn),
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
        }


class Prediction:
    """Score ``network`` on labelled data at a fixed classification ``threshold``.

    Precision, recall and F1 are 0.0 whenever their denominator is zero.
    """

    def __init__(self, network: NeuralNetwork, threshold: float = 0.5) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        self.network = network
        self.threshold = float(threshold)
        self.confusion = ConfusionMatrix()
        self._false_positive_samples = np.empty((0, network.input_size + 1))
        self._false_negative_samples = np.empty((0, network.input_size + 1))

    def predict(self, dataset: DataSet) -> ConfusionMatrix:
        if not dataset.has_truth():
            raise ValueError("predict requires a DataSet with truth")
        width = self.network.input_size + 1
        if dataset.is_empty():
            self.confusion = ConfusionMatrix()
            self._false_positive_samples = np.empty((0, width))
            self._false_negative_samples = np.empty((0, width))
            return self.confusion

        samples = dataset.samples
        truth = dataset.truth[:, 0]
        outputs = self.network.predict(samples)[:, 0]
        predicted = outputs >= self.threshold
        actual = truth == 1.0

        false_pos = predicted & ~actual
        false_neg = ~predicted & actual
        self.confusion = ConfusionMatrix(
            tp=int(np.sum(predicted & actual)),
            fp=int(np.sum(false_pos)),
            tn=int(np.sum(~predicted & ~actual)),
            fn=int(np.sum(false_neg)),
        )
        labelled = np.hstack([samples, dataset.truth])
        self._false_positive_samples = labelled[false_pos].copy()
        self._false_negative_samples = labelled[false_neg].copy()
        return self.confusion

    @property
    def true_positives(self) -> int:
        return self.confusion.tp

    @property
    def false_positives(self) -> int:
        return self.confusion.fp

    @property
    def true_negatives(self) -> int:
        return self.confusion.tn

    @property
    def false_negatives(self) -> int:
        return self.confusion.fn

    @property
    def precision(self) -> float:
        return self.confusion.precision

    @property
    def recall(self) -> float:
        return self.confusion.recall

    @property
    def f1(self) -> float:
        return self.confusion.f1

    @property
    def false_positive_samples(self) -> Array:
        return self._false_positive_samples

    @property
    def false_negative_samples(self) -> Array:
        return self._false_negative_samples


__all__ = ["ConfusionMatrix", "Prediction"]
