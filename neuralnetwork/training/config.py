"""Validated, immutable trainer configuration and its fluent builder."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Sequence, Tuple, Union

from ..core.activations import ActivationFunction, get_activation
from ..core.errors import ConfigurationError

ActivationSpec = Union[str, ActivationFunction]

DEFAULT_LEARNING_RATE = 0.1
DEFAULT_MAX_ITERATIONS = 1000


@dataclass(frozen=True)
class TrainerConfig:
    """Everything the :class:`~neuralnetwork.training.trainer.Trainer` needs.

    Attributes
    ----------
    layer_sizes:
        ``[n0, ..., nk]`` with ``n0`` the feature count and ``nk`` the output
        count (normally 1).
    learning_rate:
        Gradient-descent step size, strictly positive.
    lambda_:
        L2 regularisation coefficient, non-negative.
    max_iterations:
        Number of full-batch steps; ``0`` leaves the network untrained.
    heartbeat:
        Print a progress line every ``heartbeat`` iterations; ``0`` disables.
    activation:
        Activation name (``"sigmoid"``, ``"tanh"``) or an instance.
    record_costs:
        Keep the cost of every iteration.
    seed:
        Optional seed for weight initialisation.
    """

    layer_sizes: Tuple[int, ...]
    learning_rate: float = DEFAULT_LEARNING_RATE
    lambda_: float = 0.0
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    heartbeat: int = 0
    activation: ActivationSpec = "sigmoid"
    record_costs: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "layer_sizes", tuple(self.layer_sizes))

    @classmethod
    def builder(cls, layer_sizes: Sequence[int]) -> "TrainerConfigBuilder":
        return TrainerConfigBuilder(layer_sizes)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TrainerConfig":
        """Build from a plain mapping, accepting ``lambda`` for ``lambda_``."""

        data = dict(values)
        if "lambda" in data:
            data["lambda_"] = data.pop("lambda")
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown trainer option(s): {', '.join(unknown)}")
        return cls(**data).validate()

    def validate(self) -> "TrainerConfig":
        """Raise :class:`ConfigurationError` unless every value is usable."""

        if not self.layer_sizes:
            raise ConfigurationError("layer_sizes must not be empty")
        if len(self.layer_sizes) < 2:
            raise ConfigurationError(
                "layer_sizes needs at least an input and an output layer"
            )
        if any(int(size) <= 0 for size in self.layer_sizes):
            raise ConfigurationError(
                f"layer sizes must be positive, got {list(self.layer_sizes)}"
            )
        if not self.learning_rate > 0:
            raise ConfigurationError(
                f"learning_rate must be > 0, got {self.learning_rate}"
            )
        if not self.lambda_ >= 0:
            raise ConfigurationError(f"lambda must be >= 0, got {self.lambda_}")
        if self.max_iterations < 0:
            raise ConfigurationError(
                f"max_iterations must be >= 0, got {self.max_iterations}"
            )
        if self.heartbeat < 0:
            raise ConfigurationError(f"heartbeat must be >= 0, got {self.heartbeat}")
        get_activation(self.activation)
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        activation = self.activation
        if not isinstance(activation, str):
            data["activation"] = getattr(activation, "name", type(activation).__name__)
        data["layer_sizes"] = list(self.layer_sizes)
        return data


@dataclass
class TrainerConfigBuilder:
    """Fluent construction of a :class:`TrainerConfig`.

    ``TrainerConfig.builder([2, 1]).learning_rate(0.5).record_costs().build()``
    """

    _layer_sizes: Sequence[int]
    _options: dict = field(default_factory=dict)

    def learning_rate(self, value: float) -> "TrainerConfigBuilder":
        self._options["learning_rate"] = float(value)
        return self

    def lambda_(self, value: float) -> "TrainerConfigBuilder":
        self._options["lambda_"] = float(value)
        return self

    def max_iterations(self, value: int) -> "TrainerConfigBuilder":
        self._options["max_iterations"] = int(value)
        return self

    def heartbeat(self, value: int) -> "TrainerConfigBuilder":
        self._options["heartbeat"] = int(value)
        return self

    def activation(self, value: ActivationSpec) -> "TrainerConfigBuilder":
        self._options["activation"] = value
        return self

    def record_costs(self, enabled: bool = True) -> "TrainerConfigBuilder":
        self._options["record_costs"] = bool(enabled)
        return self

    def seed(self, value: int | None) -> "TrainerConfigBuilder":
        self._options["seed"] = value
        return self

    def build(self) -> TrainerConfig:
        return TrainerConfig(layer_sizes=tuple(self._layer_sizes), **self._options).validate()


__all__ = ["TrainerConfig", "TrainerConfigBuilder", "DEFAULT_LEARNING_RATE", "DEFAULT_MAX_ITERATIONS"]
