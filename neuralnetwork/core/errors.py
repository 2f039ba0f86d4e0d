"""Exception and warning types raised by the learning engine."""

from __future__ import annotations


class NeuralNetworkError(Exception):
    """Base class for errors raised by :mod:`neuralnetwork`."""


class ConfigurationError(NeuralNetworkError, ValueError):
    """Invalid trainer configuration or training data."""


class IncompatibleShapeError(NeuralNetworkError, ValueError):
    """Input matrix does not match the network's input layer."""


class InsufficientClassBalanceWarning(UserWarning):
    """A stratified split fell back to a sequential split."""


__all__ = [
    "NeuralNetworkError",
    "ConfigurationError",
    "IncompatibleShapeError",
    "InsufficientClassBalanceWarning",
]
