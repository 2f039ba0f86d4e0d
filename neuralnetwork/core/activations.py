"""Activation functions shared by every layer of a network."""

from __future__ import annotations

from typing import Dict, Protocol, Union

import numpy as np

from .errors import ConfigurationError
from .types import Array


class ActivationFunction(Protocol):
    """Protocol implemented by elementwise activation functions."""

    name: str

    def apply(self, value):
        """Apply the function to a matrix or a scalar."""

    def gradient(self, value: Array) -> Array:
        """Return the derivative evaluated at the pre-activation ``value``."""


def _stable_sigmoid(z: Array) -> Array:
    # Only ever exponentiate non-positive numbers.
    z = np.asarray(z, dtype=np.float64)
    out = np.empty_like(z)
    positive = z >= 0
    out[positive] = 1.0 / (1.0 + np.exp(-z[positive]))
    exp_z = np.exp(z[~positive])
    out[~positive] = exp_z / (1.0 + exp_z)
    return out


class Sigmoid:
    """Logistic sigmoid with range (0, 1)."""

    name = "sigmoid"

    def apply(self, value):
        if np.isscalar(value):
            return float(_stable_sigmoid(np.array([value]))[0])
        return _stable_sigmoid(value)

    def gradient(self, value: Array) -> Array:
        s = _stable_sigmoid(value)
        return s * (1.0 - s)

    def __repr__(self) -> str:
        return "Sigmoid()"


class HyperbolicTangent:
    """Hyperbolic tangent with range (-1, 1)."""

    name = "tanh"

    def apply(self, value):
        if np.isscalar(value):
            return float(np.tanh(value))
        return np.tanh(np.asarray(value, dtype=np.float64))

    def gradient(self, value: Array) -> Array:
        t = np.tanh(np.asarray(value, dtype=np.float64))
        return 1.0 - t**2

    def __repr__(self) -> str:
        return "HyperbolicTangent()"


_REGISTRY: Dict[str, type] = {
    "sigmoid": Sigmoid,
    "logistic": Sigmoid,
    "tanh": HyperbolicTangent,
    "hyperbolic_tangent": HyperbolicTangent,
}


def available_activations() -> list[str]:
    return sorted(_REGISTRY)


def get_activation(
    activation: Union[str, ActivationFunction, None] = None,
) -> ActivationFunction:
    """Resolve ``activation`` to an instance, defaulting to :class:`Sigmoid`."""

    if activation is None:
        return Sigmoid()
    if isinstance(activation, str):
        key = activation.strip().lower()
        if key not in _REGISTRY:
            available = ", ".join(available_activations())
            raise ConfigurationError(
                f"Unknown activation {activation!r}. Available activations: {available}"
            )
        return _REGISTRY[key]()
    if not (hasattr(activation, "apply") and hasattr(activation, "gradient")):
        raise ConfigurationError(f"Not an activation function: {activation!r}")
    return activation


__all__ = [
    "ActivationFunction",
    "Sigmoid",
    "HyperbolicTangent",
    "available_activations",
    "get_activation",
]
