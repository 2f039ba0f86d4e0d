"""Regularised cross-entropy cost used by the trainer."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.types import Array

EPSILON = 1e-12


def cross_entropy(predictions: Array, truth: Array) -> tuple[float, Array]:
    """Return the mean binary cross-entropy and the output-layer error.

    The error ``predictions - truth`` is the gradient of the loss with respect
    to the final pre-activation when the output unit is a sigmoid.
    """

    probs = np.clip(predictions, EPSILON, 1.0 - EPSILON)
    per_example = -(truth * np.log(probs) + (1.0 - truth) * np.log(1.0 - probs))
    loss = float(np.mean(np.sum(per_example, axis=1)))
    return loss, predictions - truth


def l2_penalty(weights: Sequence[Array], lambda_: float, m: int) -> float:
    """``lambda / (2m) * sum(w^2)`` over every non-bias weight."""

    if lambda_ == 0 or m == 0:
        return 0.0
    total = sum(float(np.sum(np.square(W[1:]))) for W in weights)
    return lambda_ / (2.0 * m) * total


def l2_gradient(W: Array, lambda_: float, m: int) -> Array:
    """Gradient of :func:`l2_penalty` for one weight matrix; the bias row is zero."""

    grad = np.zeros_like(W)
    if lambda_ and m:
        grad[1:] = (lambda_ / m) * W[1:]
    return grad


__all__ = ["EPSILON", "cross_entropy", "l2_penalty", "l2_gradient"]
