"""Core typing contracts for the neural network package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

Array = np.ndarray


@dataclass
class ForwardCache:
    """Intermediate values captured during the forward pass.

    ``layer_inputs[i]`` is the bias-augmented input fed to ``weights[i]`` and
    ``pre_activations[i]`` is the product before the activation is applied.
    """

    layer_inputs: List[Array]
    pre_activations: List[Array]
    output: Array


Gradients = Dict[str, Array]
