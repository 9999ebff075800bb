"""Network layers with forward and backward passes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from snakers.tensor import Tensor

_NO_FORWARD = "complete forward pass first"


def _array(tensor: Tensor) -> np.ndarray:
    return np.asarray(tensor.tolist(), dtype=np.float32).reshape(tensor.shape)


def _tensor(array: np.ndarray) -> Tensor:
    return Tensor(array, array.shape)


class Layer(ABC):
    """One stage of a sequential network."""

    @abstractmethod
    def forward(self, inputs: Tensor) -> Tensor:
        """Compute the layer output, remembering what backward needs."""

    @abstractmethod
    def backward(self, d_output: Tensor) -> Tensor:
        """Gradient with respect to the input, given the output gradient."""

    def to_dict(self) -> dict[str, Any]:
        """A plain representation suitable for serialisation."""
        return {"type": type(self).__name__}

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Layer:
        return cls()


class Dense(Layer):
    """Fully connected layer: ``inputs @ weights + biases``."""

    def __init__(self, input_size: int, output_size: int) -> None:
        self.weights = Tensor.random((input_size, output_size))
        self.biases = Tensor.zeros((1, output_size))
        self.d_weights: Tensor | None = None
        self.d_biases: Tensor | None = None
        self._cached_input: Tensor | None = None

    def forward(self, inputs: Tensor) -> Tensor:
        self._cached_input = inputs
        product = inputs.matmul(self.weights)
        return _tensor(_array(product) + _array(self.biases))

    def backward(self, d_output: Tensor) -> Tensor:
        if self._cached_input is None:
            raise RuntimeError(_NO_FORWARD)
        self.d_weights = self._cached_input.transpose().matmul(d_output)
        self.d_biases = d_output.sum(0)
        return d_output.matmul(self.weights.transpose())

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "weights": self.weights.to_dict(),
            "biases": self.biases.to_dict(),
        }

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Dense:
        try:
            weights = Tensor.from_dict(data["weights"])
            biases = Tensor.from_dict(data["biases"])
        except KeyError as exc:
            raise ValueError(f"missing layer field {exc}") from None
        if len(weights.shape) != 2:
            raise ValueError("dense weights must be a 2D tensor")
        layer = cls(*weights.shape)
        layer.weights = weights
        layer.biases = biases
        return layer


class ReLU(Layer):
    """Rectified linear unit: ``max(x, 0)`` element-wise."""

    def __init__(self) -> None:
        self._cached_input: Tensor | None = None

    def forward(self, inputs: Tensor) -> Tensor:
        self._cached_input = inputs
        return _tensor(np.maximum(_array(inputs), np.float32(0.0)))

    def backward(self, d_output: Tensor) -> Tensor:
        if self._cached_input is None:
            raise RuntimeError(_NO_FORWARD)
        if self._cached_input.shape != d_output.shape:
            raise ValueError("tensors must have the same shape")
        inputs = _array(self._cached_input)
        grads = _array(d_output)
        return _tensor(np.where(inputs > 0.0, grads, np.float32(0.0)))


class Softmax(Layer):
    """Row-wise softmax over a 2-D tensor.

    The backward pass passes the gradient through unchanged, as it is meant
    to be paired with categorical cross entropy.
    """

    def __init__(self) -> None:
        self._cached_output: Tensor | None = None

    def forward(self, inputs: Tensor) -> Tensor:
        values = _array(inputs)
        if values.size:
            shifted = np.exp(values - values.max(axis=1, keepdims=True))
            values = shifted / shifted.sum(axis=1, keepdims=True)
        output = _tensor(values.astype(np.float32))
        self._cached_output = output
        return output

    def backward(self, d_output: Tensor) -> Tensor:
        if self._cached_output is None:
            raise RuntimeError(_NO_FORWARD)
        return d_output.deep_clone()


_LAYERS: dict[str, type[Layer]] = {
    cls.__name__: cls for cls in (Dense, ReLU, Softmax)
}


def layer_from_dict(data: dict[str, Any]) -> Layer:
    """Rebuild a layer from the output of its ``to_dict``."""
    try:
        kind = data["type"]
    except (KeyError, TypeError):
        raise ValueError("layer data has no type") from None
    try:
        cls = _LAYERS[kind]
    except KeyError:
        raise ValueError(f"unknown layer type: {kind!r}") from None
    return cls._from_dict(data)