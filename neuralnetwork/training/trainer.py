"""Full-batch gradient descent with backpropagation and L2 regularisation."""

from __future__ import annotations

from typing import List, Mapping, Sequence

import numpy as np

from ..core.activations import get_activation
from ..core.errors import ConfigurationError
from ..core.network import NeuralNetwork
from ..core.types import Array, ForwardCache, Gradients
from ..data.dataset import DataSet
from .config import TrainerConfig
from .losses import cross_entropy, l2_gradient, l2_penalty


class Trainer:
    """Train a :class:`NeuralNetwork` on one labelled training set.

    ``data`` is either a :class:`DataSet` with truth, or a samples matrix
    passed together with ``truth``.
    """

    def __init__(
        self,
        config: TrainerConfig,
        data: DataSet | Array,
        truth: Array | None = None,
        *,
        network: NeuralNetwork | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.config = config.validate()
        self.samples, self.truth = self._resolve_data(data, truth)
        n0 = self.config.layer_sizes[0]
        if self.samples.shape[1] != n0:
            raise ConfigurationError(
                f"training data has {self.samples.shape[1]} feature column(s), "
                f"input layer expects {n0}"
            )
        nk = self.config.layer_sizes[-1]
        if self.truth.shape[1] != nk:
            raise ConfigurationError(
                f"truth has {self.truth.shape[1]} column(s), output layer has {nk}"
            )
        if network is None:
            network = NeuralNetwork(
                self.config.layer_sizes, self.config.activation, rng=self.config.seed
            )
        else:
            self._check_network(network)
        self.network = network
        self.callbacks = list(callbacks or [])
        self.costs: List[float] = []

    def _check_network(self, network: NeuralNetwork) -> None:
        if list(network.layer_sizes) != list(self.config.layer_sizes):
            raise ConfigurationError(
                f"network layers {network.layer_sizes} do not match "
                f"configured layers {list(self.config.layer_sizes)}"
            )
        expected = _activation_name(get_activation(self.config.activation))
        actual = _activation_name(network.activation)
        if actual != expected:
            raise ConfigurationError(
                f"network uses activation {actual!r}, configured {expected!r}"
            )

    @staticmethod
    def _resolve_data(data: DataSet | Array, truth: Array | None) -> tuple[Array, Array]:
        if isinstance(data, DataSet):
            if not data.has_truth():
                raise ConfigurationError("training DataSet has no truth values")
            if data.is_empty():
                raise ConfigurationError("training DataSet is empty")
            return data.samples, data.truth
        if truth is None:
            raise ConfigurationError("truth is required when training from a matrix")
        samples = np.asarray(data, dtype=np.float64)
        labels = np.asarray(truth, dtype=np.float64)
        if samples.ndim != 2:
            raise ConfigurationError(f"samples must be a matrix, got shape {samples.shape}")
        if labels.ndim == 1:
            labels = labels.reshape(-1, 1)
        if labels.shape[0] != samples.shape[0]:
            raise ConfigurationError(
                f"{samples.shape[0]} sample row(s) but {labels.shape[0]} truth row(s)"
            )
        return samples, labels

    @property
    def neural_network(self) -> NeuralNetwork:
        return self.network

    def train(self) -> NeuralNetwork:
        """Run ``max_iterations`` gradient-descent steps and return the network."""

        heartbeat = self.config.heartbeat
        for iteration in range(1, self.config.max_iterations + 1):
            cost = self.step()
            if self.config.record_costs:
                self.costs.append(cost)
            if heartbeat and iteration % heartbeat == 0:
                print(f"Iteration: {iteration}, cost: {cost:.6f}")
            self._emit_step(iteration, {"cost": cost})
        return self.network

    def step(self) -> float:
        """Perform one update and return the cost measured before it."""

        predictions, cache = self.network.forward(self.samples)
        cost, error = self.cost(predictions, self.truth)
        grads = self.backpropagate(cache, error)
        self.network.apply_gradients(grads, self.config.learning_rate)
        return cost

    def cost(self, predictions: Array, truth: Array) -> tuple[float, Array]:
        """Return the regularised cost and the output-layer error."""

        m = truth.shape[0]
        loss, error = cross_entropy(predictions, truth)
        return loss + l2_penalty(self.network.weights, self.config.lambda_, m), error

    def backpropagate(self, cache: ForwardCache, error: Array) -> Gradients:
        weights = self.network.weights
        activation = self.network.activation
        m = error.shape[0]
        lambda_ = self.config.lambda_
        grads: Gradients = {}
        delta = error
        for idx in reversed(range(len(weights))):
            W = weights[idx]
            grads[f"W{idx}"] = cache.layer_inputs[idx].T @ delta / m + l2_gradient(
                W, lambda_, m
            )
            if idx > 0:
                delta = (delta @ W[1:].T) * activation.gradient(
                    cache.pre_activations[idx - 1]
                )
        return grads

    def _emit_step(self, iteration: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(iteration, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(iteration, metrics)


def _activation_name(activation: object) -> str:
    return getattr(activation, "name", type(activation).__name__)


__all__ = ["Trainer"]
