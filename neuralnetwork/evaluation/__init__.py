"""Scoring and cross-validation."""

from .crossval import CrossValidationResult, FoldResult, cross_validate
from .prediction import ConfusionMatrix, Prediction

__all__ = [
    "ConfusionMatrix",
    "Prediction",
    "CrossValidationResult",
    "FoldResult",
    "cross_validate",
]
