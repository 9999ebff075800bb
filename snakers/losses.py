"""Loss functions for training sequential models."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from snakers.tensor import Tensor

_EPSILON = 1e-9


class Loss(ABC):
    """A loss measures how far predictions are from targets."""

    @abstractmethod
    def calculate(self, y_pred: Tensor, y_true: Tensor) -> float:
        """The loss value averaged over the batch."""

    @abstractmethod
    def gradient(self, y_pred: Tensor, y_true: Tensor) -> Tensor:
        """The derivative of the loss with respect to the predictions."""


@dataclass(frozen=True)
class CategoricalCrossEntropy(Loss):
    """Cross entropy for one-hot targets.

    The gradient assumes the predictions come from a softmax, so it is
    simply ``y_pred - y_true``.
    """

    def calculate(self, y_pred: Tensor, y_true: Tensor) -> float:
        if y_pred.shape != y_true.shape:
            raise ValueError("prediction and true labels must have the same shape")
        batch_size = y_pred.shape[0]
        if batch_size == 0:
            return 0.0
        num_classes = y_pred.shape[1]
        preds = y_pred.tolist()
        trues = y_true.tolist()

        total = 0.0
        for start in range(0, batch_size * num_classes, num_classes):
            pred_row = preds[start:start + num_classes]
            true_row = trues[start:start + num_classes]
            hit = next(
                (p for p, t in zip(pred_row, true_row) if t == 1.0), None
            )
            if hit is not None:
                total -= math.log(hit + _EPSILON)
        return total / batch_size

    def gradient(self, y_pred: Tensor, y_true: Tensor) -> Tensor:
        return y_pred.map2(y_true, lambda p, t: p - t)


@dataclass(frozen=True)
class MeanSquaredError(Loss):
    """Sum of squared errors divided by the number of rows."""

    def calculate(self, y_pred: Tensor, y_true: Tensor) -> float:
        diff = y_pred.map2(y_true, lambda p, t: p - t)
        return sum(x * x for x in diff.tolist()) / y_pred.shape[0]

    def gradient(self, y_pred: Tensor, y_true: Tensor) -> Tensor:
        rows = y_pred.shape[0]
        return y_pred.map2(y_true, lambda p, t: 2.0 * (p - t) / rows)


_LOSSES: dict[str, type[Loss]] = {
    cls.__name__: cls for cls in (CategoricalCrossEntropy, MeanSquaredError)
}


def loss_from_name(name: str) -> Loss:
    """Create the loss whose class name is ``name``."""
    try:
        return _LOSSES[name]()
    except KeyError:
        raise ValueError(f"unknown loss: {name!r}") from None