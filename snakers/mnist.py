"""Command that trains a digit classifier on MNIST data in CSV form."""

from __future__ import annotations

import argparse
import csv
import math
import sys
from collections.abc import Sequence
from os import PathLike

from snakers.layers import Dense, ReLU
from snakers.losses import CategoricalCrossEntropy
from snakers.optimizers import SGD
from snakers.sequential import Sequential
from snakers.tensor import Tensor

NUM_CLASSES = 10
HIDDEN_SIZE = 128


def _pixel(text: str) -> float:
    try:
        return float(text) / 255.0
    except ValueError:
        return 0.0


def load_mnist(path: str | PathLike[str]) -> tuple[Tensor, Tensor]:
    """Read ``label,pixel,...`` rows into scaled images and one-hot labels."""
    images: list[float] = []
    labels: list[float] = []
    num_samples = 0
    with open(path, newline="", encoding="utf-8") as handle:
        for record in csv.reader(handle):
            if not record:
                continue
            try:
                label = int(record[0])
            except ValueError:
                raise ValueError(f"invalid label: {record[0]!r}") from None
            if not 0 <= label < NUM_CLASSES:
                raise ValueError(f"label out of range: {label}")
            images.extend(_pixel(value) for value in record[1:])
            one_hot = [0.0] * NUM_CLASSES
            one_hot[label] = 1.0
            labels.extend(one_hot)
            num_samples += 1

    if num_samples == 0:
        raise ValueError(f"no samples in {path}")
    num_features = len(images) // num_samples
    return (
        Tensor(images, (num_samples, num_features)),
        Tensor(labels, (num_samples, NUM_CLASSES)),
    )


def _argmax(row: Sequence[float]) -> int:
    best = 0
    for index, value in enumerate(row):
        if value >= row[best]:
            best = index
    return best


def accuracy(predictions: Tensor, targets: Tensor) -> float:
    """Fraction of rows whose highest prediction matches the highest target."""
    if predictions.shape != targets.shape:
        raise ValueError("predictions and targets must have the same shape")
    rows, width = targets.shape
    if rows == 0:
        return math.nan
    pred = predictions.tolist()
    true = targets.tolist()
    correct = sum(
        _argmax(pred[start:start + width]) == _argmax(true[start:start + width])
        for start in range(0, rows * width, width)
    )
    return correct / rows


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Train a digit classifier.")
    parser.add_argument("--train", default="./input/mnist_train.csv")
    parser.add_argument("--test", default="./input/mnist_test.csv")
    parser.add_argument("--epochs", type=int, default=5)
    parser.add_argument("--batch-size", type=int, default=32)
    args = parser.parse_args(argv)

    try:
        print("Loading MNIST data...")
        x_train, y_train = load_mnist(args.train)
        x_test, y_test = load_mnist(args.test)
        print("Data loaded successfully.")
        print(f"Training samples: {x_train.shape[0]}, Test samples: {x_test.shape[0]}")

        model = Sequential(
            [Dense(x_train.shape[1], HIDDEN_SIZE), ReLU(), Dense(HIDDEN_SIZE, NUM_CLASSES)],
            CategoricalCrossEntropy(),
            SGD(0.01),
        )

        print("\nStarting training...")
        model.fit(x_train, y_train, args.epochs, args.batch_size)
        print("Training finished.")

        print("\nEvaluating model on test data...")
        score = accuracy(model.predict(x_test), y_test)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Test Accuracy: {score * 100.0:.2f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())