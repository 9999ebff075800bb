"""Dense float32 tensors with an explicit shape and element strides."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import numpy as np

_DTYPE = np.float32
_rng = np.random.default_rng()


def calc_strides(shape: Sequence[int]) -> tuple[int, ...]:
    """Row-major strides, in elements, for a tensor of the given shape."""
    strides: list[int] = []
    step = 1
    for dim in reversed(shape):
        strides.append(step)
        step *= dim
    return tuple(reversed(strides))


class Tensor:
    """An n-dimensional array of float32 values.

    Transposing returns a view that shares storage with the original tensor;
    every other operation produces a fresh tensor.
    """

    __slots__ = ("_array",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: Iterable[float], shape: Sequence[int]) -> None:
        dims = tuple(int(d) for d in shape)
        if any(d < 0 for d in dims):
            raise ValueError(f"shape dimensions must be non-negative: {dims}")
        if isinstance(data, np.ndarray):
            flat = np.array(data, dtype=_DTYPE).ravel()
        else:
            flat = np.fromiter(data, dtype=_DTYPE)
        if flat.size != math.prod(dims):
            raise ValueError(
                f"{flat.size} values do not fit a tensor of shape {dims}"
            )
        self._array = flat.reshape(dims)

    @classmethod
    def _wrap(cls, array: np.ndarray) -> Tensor:
        tensor = cls.__new__(cls)
        tensor._array = array
        return tensor

    @staticmethod
    def zeros(shape: Sequence[int]) -> Tensor:
        """A tensor of the given shape filled with zeros."""
        return Tensor._wrap(np.zeros(tuple(shape), dtype=_DTYPE))

    @staticmethod
    def random(shape: Sequence[int]) -> Tensor:
        """A tensor of samples from the standard normal distribution."""
        values = _rng.standard_normal(tuple(shape)).astype(_DTYPE)
        return Tensor._wrap(values)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._array.shape)

    @property
    def strides(self) -> tuple[int, ...]:
        """Distance, in elements, between neighbours along each axis."""
        itemsize = self._array.itemsize
        return tuple(step // itemsize for step in self._array.strides)

    def tolist(self) -> list[float]:
        """All values as a flat list in row-major order."""
        return self._array.ravel().tolist()

    def transpose(self) -> Tensor:
        """A view with the axes reversed, sharing storage with this tensor."""
        return Tensor._wrap(self._array.T)

    def matmul(self, other: Tensor) -> Tensor:
        """Matrix product of two 2-D tensors."""
        if len(self.shape) != 2:
            raise ValueError("self must be a 2D tensor")
        if len(other.shape) != 2:
            raise ValueError("other must be a 2D tensor")
        if self.shape[1] != other.shape[0]:
            raise ValueError(
                f"self columns ({self.shape[1]}) must equal "
                f"other rows ({other.shape[0]})"
            )
        product = np.matmul(self._array, other._array)
        return Tensor._wrap(np.ascontiguousarray(product, dtype=_DTYPE))

    def sum(self, axis: int) -> Tensor:
        """Sum a 2-D tensor along axis 0 (giving 1 x n) or 1 (giving m x 1)."""
        if not 0 <= axis < len(self.shape):
            raise ValueError(f"axis {axis} out of bounds")
        if len(self.shape) != 2:
            raise ValueError("sum only works for 2D tensors")
        total = self._array.sum(axis=axis, keepdims=True, dtype=_DTYPE)
        return Tensor._wrap(np.ascontiguousarray(total))

    def map(self, func: Callable[[float], float]) -> Tensor:
        """Apply ``func`` to every element."""
        values = np.fromiter(
            (func(x) for x in self._array.ravel().tolist()),
            dtype=_DTYPE,
            count=self._array.size,
        )
        return Tensor._wrap(values.reshape(self.shape))

    def map2(self, other: Tensor, func: Callable[[float, float], float]) -> Tensor:
        """Apply ``func`` to matching elements of two tensors of equal shape."""
        if self.shape != other.shape:
            raise ValueError(
                f"tensors must have the same shape: {self.shape} vs {other.shape}"
            )
        pairs = zip(self._array.ravel().tolist(), other._array.ravel().tolist())
        values = np.fromiter(
            (func(a, b) for a, b in pairs),
            dtype=_DTYPE,
            count=self._array.size,
        )
        return Tensor._wrap(values.reshape(self.shape))

    def gather_rows(self, indices: Iterable[int]) -> Tensor:
        """A new 2-D tensor made of the given rows, in the given order."""
        if len(self.shape) != 2:
            raise ValueError("gather_rows only works for 2D tensors")
        rows = [int(i) for i in indices]
        for row in rows:
            if not 0 <= row < self.shape[0]:
                raise IndexError(f"row index {row} out of bounds")
        gathered = self._array[np.asarray(rows, dtype=np.intp)]
        return Tensor._wrap(
            np.ascontiguousarray(gathered).reshape(len(rows), self.shape[1])
        )

    def deep_clone(self) -> Tensor:
        """An independent contiguous copy of this tensor."""
        return Tensor._wrap(np.array(self._array, dtype=_DTYPE, order="C"))

    def to_dict(self) -> dict[str, Any]:
        """A plain representation suitable for serialisation."""
        return {"shape": list(self.shape), "data": self.tolist()}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Tensor:
        """Rebuild a tensor from the output of :meth:`to_dict`."""
        try:
            return Tensor(data["data"], data["shape"])
        except KeyError as exc:
            raise ValueError(f"missing tensor field {exc}") from None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._array, other._array)
        )

    def __repr__(self) -> str:
        return f"Tensor(shape={list(self.shape)}, data={self.tolist()})"