"""Single-weight-matrix models sharing the ``fit``/``predict`` contract."""

from .base import SupervisedModel, check_is_fitted
from .linear_regression import LinearRegression
from .perceptron import Perceptron

__all__ = ["SupervisedModel", "check_is_fitted", "LinearRegression", "Perceptron"]
