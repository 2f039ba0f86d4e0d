"""Core numerical primitives: activations, the network and error types."""

from . import activations, errors, network, types

__all__ = ["activations", "errors", "network", "types"]
