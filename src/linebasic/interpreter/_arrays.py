"""DIM'd arrays stored as flat row-major buffers."""

from __future__ import annotations

from ._values import (
    BadSubscriptError,
    IllegalQuantityError,
    Value,
    coerce_for,
    default_value,
)

# element limit for a single DIM
MAX_ELEMENTS = 1_000_000


class BasicArray:
    """A multi-dimensional BASIC array.

    ``DIM A(N, M)`` declares upper bounds ``(N, M)``; each axis is
    addressable ``0..bound`` inclusive, so the buffer holds
    ``(N + 1) * (M + 1)`` elements.
    """

    def __init__(self, name: str, bounds: list[int]) -> None:
        if not bounds or any(b < 0 for b in bounds):
            raise IllegalQuantityError()
        self.name = name
        self.bounds = tuple(bounds)

        strides = []
        size = 1
        for bound in reversed(self.bounds):
            strides.append(size)
            size *= bound + 1
            if size > MAX_ELEMENTS:
                raise IllegalQuantityError()
        self.strides = tuple(reversed(strides))
        self.values: list[Value] = [default_value(name)] * size

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"BasicArray({self.name!r}, {list(self.bounds)!r})"

    def _offset(self, indices: list[int]) -> int:
        if len(indices) != len(self.bounds):
            raise BadSubscriptError()
        offset = 0
        for index, bound, stride in zip(indices, self.bounds, self.strides):
            if index < 0 or index > bound:
                raise BadSubscriptError()
            offset += index * stride
        return offset

    def get(self, indices: list[int]) -> Value:
        return self.values[self._offset(indices)]

    def set(self, indices: list[int], value: Value) -> None:
        self.values[self._offset(indices)] = coerce_for(self.name, value)
