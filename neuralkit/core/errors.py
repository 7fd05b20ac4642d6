"""Exception types raised by neuralkit models."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when shapes, labels or hyper-parameters are malformed."""


class NotFittedError(RuntimeError):
    """Raised when a model is used before ``fit`` has created its weights."""


__all__ = ["InvalidArgumentError", "NotFittedError"]
