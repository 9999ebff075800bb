"""Optimizers that update layer parameters from their gradients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from snakers.layers import Dense, Layer
from snakers.tensor import Tensor


def _array(tensor: Tensor) -> np.ndarray:
    return np.asarray(tensor.tolist(), dtype=np.float32).reshape(tensor.shape)


def _descend(param: Tensor, grad: Tensor, rate: float) -> Tensor:
    if param.shape != grad.shape:
        raise ValueError("tensors must have the same shape")
    updated = _array(param) - np.float32(rate) * _array(grad)
    return Tensor(updated, updated.shape)


class Optimizer(ABC):
    """Applies one update to the parameters of a list of layers."""

    @abstractmethod
    def step(self, layers: Iterable[Layer]) -> None:
        """Update every trainable layer that holds gradients."""

    def to_dict(self) -> dict[str, Any]:
        """A plain representation suitable for serialisation."""
        return {"type": type(self).__name__}


@dataclass
class SGD(Optimizer):
    """Plain stochastic gradient descent."""

    learning_rate: float

    def step(self, layers: Iterable[Layer]) -> None:
        for layer in layers:
            if not isinstance(layer, Dense):
                continue
            if layer.d_weights is None or layer.d_biases is None:
                continue
            layer.weights = _descend(layer.weights, layer.d_weights, self.learning_rate)
            layer.biases = _descend(layer.biases, layer.d_biases, self.learning_rate)

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "learning_rate": self.learning_rate}


def optimizer_from_dict(data: dict[str, Any]) -> Optimizer:
    """Rebuild an optimizer from the output of its ``to_dict``."""
    try:
        kind = data["type"]
    except (KeyError, TypeError):
        raise ValueError("optimizer data has no type") from None
    if kind == "SGD":
        try:
            return SGD(float(data["learning_rate"]))
        except KeyError:
            raise ValueError("SGD data has no learning_rate") from None
    raise ValueError(f"unknown optimizer type: {kind!r}")