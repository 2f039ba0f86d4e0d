import warnings

import numpy as np
import pytest

from neuralnetwork.core.errors import InsufficientClassBalanceWarning
from neuralnetwork.data.dataset import DataSet


def _labelled(n_pos: int, n_neg: int, seed: int = 0) -> DataSet:
    # Feature 0 is a unique row id so pairings can be checked after shuffles.
    rows = n_pos + n_neg
    ids = np.arange(rows, dtype=np.float64).reshape(-1, 1)
    noise = np.random.default_rng(seed).normal(size=(rows, 2))
    truth = np.concatenate([np.ones(n_pos), np.zeros(n_neg)]).reshape(-1, 1)
    return DataSet(True, np.hstack([ids, noise]), truth, rng=seed)


def _pairs(dataset: DataSet) -> set:
    return {(int(row[0]), float(label)) for row, label in zip(dataset.samples, dataset.truth[:, 0])}


def test_add_samples_splits_trailing_truth():
    dataset = DataSet(True)
    dataset.add_samples([[1, 1, 1], [1, 0, 0], [0, 1, 0], [0, 0, 0]])
    assert dataset.num_samples == 4
    assert dataset.num_cols_samples == 2
    assert dataset.num_cols_truth == 1
    np.testing.assert_array_equal(dataset.truth[:, 0], [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_array_equal(dataset.samples[1], [1.0, 0.0])


def test_add_sample_with_truth_alongside():
    dataset = DataSet(True)
    dataset.add_sample([0.2, 0.4, 0.6], 1.0)
    dataset.add_sample([0.1, 0.3, 0.5], 0.0)
    assert dataset.samples.shape == (2, 3)
    np.testing.assert_array_equal(dataset.truth, [[1.0], [0.0]])


def test_add_samples_without_truth_keeps_every_column():
    dataset = DataSet(False)
    dataset.add_samples([[1, 2, 3]])
    assert dataset.samples.shape == (1, 3)
    assert dataset.truth is None
    assert not dataset.has_truth()


def test_appends_after_materialisation_keep_alignment():
    dataset = DataSet(True)
    dataset.add_samples([[1, 2, 1]])
    assert dataset.num_samples == 1
    dataset.add_samples([[3, 4, 0], [5, 6, 1]])
    np.testing.assert_array_equal(dataset.samples, [[1, 2], [3, 4], [5, 6]])
    np.testing.assert_array_equal(dataset.truth[:, 0], [1, 0, 1])


def test_add_samples_rejects_ragged_rows():
    dataset = DataSet(True)
    dataset.add_samples([[1, 2, 1]])
    with pytest.raises(ValueError):
        dataset.add_samples([[1, 2, 3, 1]])


def test_add_samples_none_warns():
    dataset = DataSet(True)
    with pytest.warns(RuntimeWarning, match="no samples"):
        dataset.add_samples(None)
    assert dataset.is_empty()


def test_mismatched_truth_rejected():
    with pytest.raises(ValueError):
        DataSet(True, np.ones((3, 2)), np.ones((2, 1)))


def test_swap_rows_moves_samples_and_truth_together():
    dataset = _labelled(2, 2)
    dataset.swap_rows(0, 3)
    assert dataset.samples[0, 0] == 3.0 and dataset.truth[0, 0] == 0.0
    assert dataset.samples[3, 0] == 0.0 and dataset.truth[3, 0] == 1.0


def test_randomize_preserves_rows_and_pairing():
    dataset = _labelled(20, 30, seed=4)
    before = _pairs(dataset)
    dataset.randomize()
    assert _pairs(dataset) == before
    assert not np.array_equal(dataset.samples[:, 0], np.arange(50))


def test_randomize_performs_five_swaps_per_row():
    calls = []
    dataset = _labelled(3, 4)
    original = dataset.swap_rows
    dataset.swap_rows = lambda a, b: (calls.append((a, b)), original(a, b))
    dataset.randomize()
    assert len(calls) == 5 * 7


def test_randomize_is_reproducible_with_seed():
    first = _labelled(10, 10, seed=9)
    second = _labelled(10, 10, seed=9)
    first.randomize()
    second.randomize()
    np.testing.assert_array_equal(first.samples, second.samples)


def test_randomize_empty_dataset_is_noop():
    dataset = DataSet(True)
    dataset.randomize()
    assert dataset.is_empty()


def test_split_sequentially_uses_ceiling():
    dataset = _labelled(5, 5)
    training, testing = dataset.split_sequentially(25)
    assert training.num_samples == 3
    assert testing.num_samples == 7
    np.testing.assert_array_equal(training.samples[:, 0], [0, 1, 2])
    np.testing.assert_array_equal(testing.samples[:, 0], np.arange(3, 10))
    assert training.has_truth() and testing.has_truth()


@pytest.mark.parametrize("percentage", [0, 50, 100])
def test_split_sequentially_edges(percentage):
    dataset = _labelled(4, 4)
    training, testing = dataset.split_sequentially(percentage)
    assert training.num_samples + testing.num_samples == 8
    assert training.num_samples == int(np.ceil(percentage / 100 * 8))


def test_split_sequentially_copies_rows():
    dataset = _labelled(2, 2)
    training, _ = dataset.split_sequentially(50)
    training.samples[0, 0] = 99.0
    assert dataset.samples[0, 0] == 0.0


@pytest.mark.parametrize("percentage", [-1, 101])
def test_split_rejects_out_of_range_percentage(percentage):
    dataset = _labelled(2, 2)
    with pytest.raises(ValueError):
        dataset.split_sequentially(percentage)
    with pytest.raises(ValueError):
        dataset.split_equally(percentage)


def test_split_equally_balances_training_set():
    dataset = _labelled(30, 70, seed=2)
    with warnings.catch_warnings():
        warnings.simplefilter("error", InsufficientClassBalanceWarning)
        training, testing = dataset.split_equally(50)
    labels = training.truth[:, 0]
    assert np.sum(labels == 1.0) == 25
    assert np.sum(labels == 0.0) == 25
    assert training.num_samples + testing.num_samples == 100
    assert _pairs(training) | _pairs(testing) == _pairs(dataset)
    assert not _pairs(training) & _pairs(testing)
    # Unselected rows keep their original order.
    ids = testing.samples[:, 0]
    assert np.all(np.diff(ids) > 0)


def test_split_equally_falls_back_to_sequential():
    dataset = _labelled(5, 45, seed=3)
    expected_train, expected_test = dataset.split_sequentially(50)
    with pytest.warns(InsufficientClassBalanceWarning, match="5 pos, 45 neg, want 13 each"):
        training, testing = dataset.split_equally(50)
    np.testing.assert_array_equal(training.samples, expected_train.samples)
    np.testing.assert_array_equal(training.truth, expected_train.truth)
    np.testing.assert_array_equal(testing.samples, expected_test.samples)
    np.testing.assert_array_equal(testing.truth, expected_test.truth)


def test_split_equally_requires_truth():
    dataset = DataSet(False, np.ones((4, 2)))
    with pytest.raises(ValueError):
        dataset.split_equally(50)


def test_dup_is_independent():
    dataset = _labelled(3, 3)
    copy = dataset.dup()
    snapshot_samples = copy.samples.copy()
    snapshot_truth = copy.truth.copy()
    dataset.randomize()
    dataset.samples[:] = -1.0
    dataset.truth[:] = 1.0
    dataset.add_samples([[1, 2, 3, 0]])
    np.testing.assert_array_equal(copy.samples, snapshot_samples)
    np.testing.assert_array_equal(copy.truth, snapshot_truth)
    assert copy.num_samples == 6


def test_split_partitions_draw_from_their_own_generators():
    dataset = _labelled(4, 4, seed=7)
    twin = _labelled(4, 4, seed=7)
    training, testing = dataset.split_sequentially(50)
    twin.split_sequentially(50)
    assert training.rng is not dataset.rng
    assert training.rng is not testing.rng
    training.randomize()
    testing.randomize()
    np.testing.assert_array_equal(dataset.rng.integers(1000, size=5), twin.rng.integers(1000, size=5))
