"""Binary-classification feed-forward neural network public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.activations import HyperbolicTangent, Sigmoid, get_activation
from .core.errors import (
    ConfigurationError,
    IncompatibleShapeError,
    InsufficientClassBalanceWarning,
    NeuralNetworkError,
)
from .core.network import NeuralNetwork
from .data.dataset import DataSet
from .evaluation.crossval import cross_validate
from .evaluation.prediction import ConfusionMatrix, Prediction
from .training.config import TrainerConfig
from .training.trainer import Trainer

__all__ = [
    "ConfigurationError",
    "ConfusionMatrix",
    "DataSet",
    "HyperbolicTangent",
    "IncompatibleShapeError",
    "InsufficientClassBalanceWarning",
    "NeuralNetwork",
    "NeuralNetworkError",
    "Prediction",
    "Sigmoid",
    "Trainer",
    "TrainerConfig",
    "activations",
    "cross_validate",
    "get_activation",
    "types",
]
