"""Fully-connected feed-forward network with a shared activation."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, MutableSequence, Sequence, Tuple

import numpy as np

from .activations import ActivationFunction, get_activation
from .errors import ConfigurationError, IncompatibleShapeError
from .types import Array, ForwardCache

INIT_SCALE = 0.1


def add_bias(x: Array) -> Array:
    """Prepend a column of ones to ``x``."""

    return np.hstack([np.ones((x.shape[0], 1), dtype=np.float64), x])


class NeuralNetwork:
    """Feed-forward network holding one ``(n_i + 1) x n_{i+1}`` matrix per layer.

    Row 0 of every weight matrix multiplies the implicit bias input.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        activation: str | ActivationFunction | None = None,
        *,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        sizes = [int(size) for size in layer_sizes]
        if len(sizes) < 2:
            raise ConfigurationError(
                "layer_sizes needs at least an input and an output layer"
            )
        if any(size <= 0 for size in sizes):
            raise ConfigurationError(f"layer sizes must be positive, got {sizes}")
        self.layer_sizes = sizes
        self.activation = get_activation(activation)
        self.weights: MutableSequence[Array] = []
        self.reset(rng)

    def reset(self, rng: np.random.Generator | int | None = None) -> None:
        """Draw fresh small-magnitude random weights."""

        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)
        self.weights = [
            rng.normal(0.0, INIT_SCALE, size=(in_dim + 1, out_dim))
            for in_dim, out_dim in zip(self.layer_sizes[:-1], self.layer_sizes[1:])
        ]

    @property
    def input_size(self) -> int:
        return self.layer_sizes[0]

    @property
    def output_size(self) -> int:
        return self.layer_sizes[-1]

    def _check_inputs(self, inputs: Array) -> Array:
        x = np.asarray(inputs, dtype=np.float64)
        if x.ndim == 1:
            x = x.reshape(1, -1)
        if x.ndim != 2 or x.shape[1] != self.input_size:
            raise IncompatibleShapeError(
                f"expected inputs with {self.input_size} column(s), got shape {x.shape}"
            )
        return x

    def forward(self, inputs: Array) -> Tuple[Array, ForwardCache]:
        """Run the forward pass and keep what backpropagation needs."""

        x = self._check_inputs(inputs)
        layer_inputs: list[Array] = []
        pre_activations: list[Array] = []
        for W in self.weights:
            augmented = add_bias(x)
            z = augmented @ W
            layer_inputs.append(augmented)
            pre_activations.append(z)
            x = self.activation.apply(z)
        return x, ForwardCache(
            layer_inputs=layer_inputs, pre_activations=pre_activations, output=x
        )

    def predict(self, inputs: Array) -> Array:
        """Return an ``m x n_k`` matrix of activations for ``inputs``."""

        output, _ = self.forward(inputs)
        return output

    def apply_gradients(self, grads: Mapping[str, Array], learning_rate: float) -> None:
        for idx, W in enumerate(self.weights):
            grad = grads.get(f"W{idx}")
            if grad is None:
                continue
            self.weights[idx] = W - learning_rate * grad

    def state_dict(self) -> Mapping[str, Array]:
        return {f"W{idx}": W.copy() for idx, W in enumerate(self.weights)}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx, W in enumerate(self.weights):
            key = f"W{idx}"
            if key not in state:
                raise KeyError(f"Missing weight {key} in state dict")
            if state[key].shape != W.shape:
                raise IncompatibleShapeError(
                    f"{key} has shape {state[key].shape}, expected {W.shape}"
                )
            self.weights[idx] = np.array(state[key], dtype=np.float64)

    def parameter_count(self) -> int:
        return int(sum(int(w.size) for w in self.weights))

    def save(self, path: str | Path) -> Path:
        """Write layer sizes and weights to a compressed ``.npz`` file."""

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = dict(self.state_dict())
        payload["layer_sizes"] = np.asarray(self.layer_sizes, dtype=np.int64)
        with path.open("wb") as handle:
            np.savez_compressed(handle, **payload)
        return path

    @classmethod
    def load(
        cls, path: str | Path, activation: str | ActivationFunction | None = None
    ) -> "NeuralNetwork":
        with np.load(Path(path)) as data:
            network = cls([int(v) for v in data["layer_sizes"]], activation)
            network.load_state_dict({k: data[k] for k in data.files if k.startswith("W")})
        return network

    def __repr__(self) -> str:
        return f"NeuralNetwork(layer_sizes={self.layer_sizes}, activation={self.activation!r})"


__all__ = ["NeuralNetwork", "add_bias", "INIT_SCALE"]
