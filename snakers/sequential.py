"""A stack of layers trained with a loss and an optimizer."""

from __future__ import annotations

import math
import random
from collections.abc import Iterable
from typing import Any

from snakers.layers import Dense, Layer, Softmax, layer_from_dict
from snakers.losses import Loss, loss_from_name
from snakers.optimizers import Optimizer, optimizer_from_dict
from snakers.tensor import Tensor


class Sequential:
    """Layers applied one after another."""

    def __init__(self, layers: Iterable[Layer], loss: Loss, optimizer: Optimizer) -> None:
        self.layers = list(layers)
        self.loss = loss
        self.optimizer = optimizer

    def predict(self, inputs: Tensor) -> Tensor:
        """Run a forward pass through every layer."""
        output = inputs
        for layer in self.layers:
            output = layer.forward(output)
        return output

    def _backward(self, d_output: Tensor) -> None:
        for layer in reversed(self.layers):
            d_output = layer.backward(d_output)
        self.optimizer.step(self.layers)

    def fit(self, x_train: Tensor, y_train: Tensor, epochs: int, batch_size: int) -> list[float]:
        """Train on shuffled mini-batches with a softmax on the outputs.

        Prints and returns the mean batch loss of each epoch.
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        num_samples = x_train.shape[0]
        epoch_losses: list[float] = []

        for epoch in range(epochs):
            indices = list(range(num_samples))
            random.shuffle(indices)

            total_loss = 0.0
            num_batches = 0
            for start in range(0, num_samples, batch_size):
                batch = indices[start:start + batch_size]
                x_batch = x_train.gather_rows(batch)
                y_batch = y_train.gather_rows(batch)

                y_pred = Softmax().forward(self.predict(x_batch))
                total_loss += self.loss.calculate(y_pred, y_batch)
                num_batches += 1
                self._backward(self.loss.gradient(y_pred, y_batch))

            mean_loss = total_loss / num_batches if num_batches else math.nan
            epoch_losses.append(mean_loss)
            print(f"Epoch: {epoch + 1}, Loss: {mean_loss}")

        return epoch_losses

    def train_on_batch(self, x_batch: Tensor, y_batch: Tensor) -> None:
        """One gradient step on a single batch, without softmax."""
        y_pred = self.predict(x_batch)
        self._backward(self.loss.gradient(y_pred, y_batch))

    def copy_weights_from(self, other: Sequential) -> None:
        """Copy the parameters of every matching dense layer from ``other``."""
        for mine, theirs in zip(self.layers, other.layers):
            if isinstance(mine, Dense) and isinstance(theirs, Dense):
                mine.weights = theirs.weights.deep_clone()
                mine.biases = theirs.biases.deep_clone()

    def clone(self) -> Sequential:
        """An independent copy with the same parameters."""
        return Sequential.from_dict(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        """A plain representation suitable for serialisation."""
        return {
            "layers": [layer.to_dict() for layer in self.layers],
            "loss": type(self.loss).__name__,
            "optimizer": self.optimizer.to_dict(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Sequential:
        """Rebuild a model from the output of :meth:`to_dict`."""
        try:
            layers = [layer_from_dict(item) for item in data["layers"]]
            loss = loss_from_name(data["loss"])
            optimizer = optimizer_from_dict(data["optimizer"])
        except KeyError as exc:
            raise ValueError(f"missing model field {exc}") from None
        return Sequential(layers, loss, optimizer)