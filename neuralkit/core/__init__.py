"""Core numerical primitives for neuralkit."""

from . import activations, errors, layers, types

__all__ = ["activations", "errors", "layers", "types"]
