"""Row-aligned sample/truth storage with shuffling and train/test splits."""

from __future__ import annotations

import math
import warnings
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..core.errors import InsufficientClassBalanceWarning
from ..core.types import Array
from .csv_io import read_csv_rows

SHUFFLE_PASSES = 5


class DataSet:
    """Example inputs (``samples``) with optional binary labels (``truth``).

    Row ``i`` of ``samples`` and row ``i`` of ``truth`` always describe the same
    example. Appended rows are buffered and only stacked into matrices when
    the matrices are read.
    """

    def __init__(
        self,
        has_truth: bool,
        samples: Array | None = None,
        truth: Array | None = None,
        *,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        self._has_truth = bool(has_truth)
        self._samples = _as_matrix(samples)
        self._truth = _as_matrix(truth) if has_truth else None
        if self._has_truth and (self._samples is None) != (self._truth is None):
            raise ValueError("samples and truth must be supplied together")
        if self._has_truth and self._samples is not None:
            if self._truth.shape != (self._samples.shape[0], 1):
                raise ValueError(
                    f"truth must be a {self._samples.shape[0]} x 1 column, "
                    f"got shape {self._truth.shape}"
                )
        self._pending_samples: List[Array] = []
        self._pending_truth: List[float] = []
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    # ------------------------------------------------------------------
    # Storage

    def _flush(self) -> None:
        if not self._pending_samples:
            return
        block = np.vstack(self._pending_samples)
        self._samples = block if self._samples is None else np.vstack([self._samples, block])
        if self._has_truth:
            column = np.asarray(self._pending_truth, dtype=np.float64).reshape(-1, 1)
            self._truth = column if self._truth is None else np.vstack([self._truth, column])
        self._pending_samples = []
        self._pending_truth = []

    @property
    def samples(self) -> Array | None:
        self._flush()
        return self._samples

    @property
    def truth(self) -> Array | None:
        self._flush()
        return self._truth

    def has_truth(self) -> bool:
        return self._has_truth

    @property
    def num_samples(self) -> int:
        samples = self.samples
        return 0 if samples is None else int(samples.shape[0])

    @property
    def num_cols_samples(self) -> int:
        samples = self.samples
        return 0 if samples is None else int(samples.shape[1])

    @property
    def num_cols_truth(self) -> int:
        truth = self.truth
        return 0 if truth is None else int(truth.shape[1])

    def is_empty(self) -> bool:
        return self.num_samples == 0

    def __len__(self) -> int:
        return self.num_samples

    def add_samples(self, rows: Iterable[Sequence[float]] | None) -> None:
        """Append rows; with truth the last value of each row is the label."""

        if rows is None:
            warnings.warn("no samples supplied to dataset", RuntimeWarning, stacklevel=2)
            return
        for row in rows:
            values = np.asarray(row, dtype=np.float64).reshape(-1)
            if self._has_truth:
                if values.size < 2:
                    raise ValueError("rows need at least one feature and a truth value")
                self._append(values[:-1], float(values[-1]))
            else:
                self._append(values, None)

    def add_sample(self, row: Sequence[float], truth: float | None = None) -> None:
        """Append a single row, with ``truth`` passed alongside or embedded last."""

        values = np.asarray(row, dtype=np.float64).reshape(-1)
        if truth is None or not self._has_truth:
            self.add_samples([values])
        else:
            self._append(values, float(truth))

    def _append(self, features: Array, label: float | None) -> None:
        width = self._row_width()
        if width is not None and features.size != width:
            raise ValueError(f"expected {width} feature(s), got {features.size}")
        self._pending_samples.append(features.reshape(1, -1))
        if self._has_truth:
            self._pending_truth.append(label)

    def _row_width(self) -> int | None:
        if self._samples is not None:
            return int(self._samples.shape[1])
        if self._pending_samples:
            return int(self._pending_samples[0].shape[1])
        return None

    def add_from_csv(self, path: str | Path) -> None:
        self.add_samples(read_csv_rows(path))

    # ------------------------------------------------------------------
    # Shuffling

    def swap_rows(self, first: int, second: int) -> None:
        """Exchange two rows of ``samples`` and ``truth`` together."""

        samples = self.samples
        samples[[first, second]] = samples[[second, first]]
        if self._has_truth:
            self._truth[[first, second]] = self._truth[[second, first]]

    def randomize(self) -> None:
        """Mix rows in place with ``5 * rows`` random pairwise swaps.

        Indices are drawn with replacement, so this is not a uniform
        permutation.
        """

        rows = self.num_samples
        for _ in range(rows * SHUFFLE_PASSES):
            first = int(self.rng.integers(rows))
            second = int(self.rng.integers(rows))
            self.swap_rows(first, second)

    # ------------------------------------------------------------------
    # Splitting

    def _subset(self, indices: Sequence[int]) -> "DataSet":
        index = np.asarray(indices, dtype=np.int64)
        samples = self.samples
        width = 0 if samples is None else samples.shape[1]
        subset_samples = (
            samples[index].copy() if samples is not None else np.empty((0, width))
        )
        subset_truth = None
        if self._has_truth:
            truth = self.truth
            subset_truth = truth[index].copy() if truth is not None else np.empty((0, 1))
        return DataSet(
            self._has_truth, subset_samples, subset_truth, rng=self.rng.spawn(1)[0]
        )

    def split_sequentially(self, percentage: float) -> Tuple["DataSet", "DataSet"]:
        """Put the first ``percentage`` percent of rows in training, the rest in testing."""

        _check_percentage(percentage)
        rows = self.num_samples
        train_end = min(rows, math.ceil((percentage / 100.0) * rows))
        return self._subset(range(train_end)), self._subset(range(train_end, rows))

    def split_equally(self, percentage: float) -> Tuple["DataSet", "DataSet"]:
        """Build a training set holding equal numbers of positive and negative rows.

        Falls back to :meth:`split_sequentially` with an
        :class:`InsufficientClassBalanceWarning` when either class has fewer
        rows than the per-class quota.
        """

        _check_percentage(percentage)
        if not self._has_truth:
            raise ValueError("split_equally requires a DataSet with truth")
        rows = self.num_samples
        half = math.ceil(((percentage / 100.0) * rows) / 2)
        labels = self.truth[:, 0] if rows else np.empty(0)
        positives = int(np.sum(labels == 1.0))
        negatives = int(np.sum(labels == 0.0))
        if negatives < half or positives < half:
            warnings.warn(
                f"cannot split DataSet equally ({positives} pos, {negatives} neg, "
                f"want {half} each)",
                InsufficientClassBalanceWarning,
                stacklevel=2,
            )
            return self.split_sequentially(percentage)

        selected = np.zeros(rows, dtype=bool)
        training: List[int] = []
        pos_count = 0
        neg_count = 0
        while pos_count < half or neg_count < half:
            index = int(self.rng.integers(rows))
            if selected[index]:
                continue
            label = labels[index]
            if label == 1.0 and pos_count < half:
                pos_count += 1
            elif label == 0.0 and neg_count < half:
                neg_count += 1
            else:
                continue
            selected[index] = True
            training.append(index)

        testing = np.flatnonzero(~selected)
        return self._subset(training), self._subset(testing)

    def dup(self) -> "DataSet":
        """Return a deep copy that shares no storage with this DataSet."""

        samples = self.samples
        truth = self.truth
        return DataSet(
            self._has_truth,
            None if samples is None else samples.copy(),
            None if truth is None else truth.copy(),
            rng=self.rng.spawn(1)[0],
        )

    def __repr__(self) -> str:
        return (
            f"DataSet(has_truth={self._has_truth}, rows={self.num_samples}, "
            f"cols={self.num_cols_samples})"
        )


def _as_matrix(values: Array | None) -> Array | None:
    if values is None:
        return None
    matrix = np.array(values, dtype=np.float64)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    return matrix


def _check_percentage(percentage: float) -> None:
    if not 0 <= percentage <= 100:
        raise ValueError(f"percentage must be in [0, 100], got {percentage}")


__all__ = ["DataSet", "SHUFFLE_PASSES"]
