"""Training configuration, cost and the gradient-descent loop."""

from .config import TrainerConfig, TrainerConfigBuilder
from .trainer import Trainer

__all__ = ["Trainer", "TrainerConfig", "TrainerConfigBuilder"]
