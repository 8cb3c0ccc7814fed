"""
Point Abstraction and Built-in Coordinate Adapters.

The clustering core never inspects a point directly. It only needs two
operations, supplied by a `PointAdapter`:

- ``distance(a, b)``: a non-negative, symmetric real distance.
- ``mean(points)``: the centre of a non-empty sequence of points, of the
  same representation as its inputs.

Built-in adapters cover fixed-arity numeric tuples whose coordinates are
floating point, unsigned integer or signed integer numpy dtypes. All of
them use the Euclidean distance; they only differ in how the absolute
coordinate difference is taken and how the mean is narrowed back to the
coordinate type.

Custom representations (high-dimensional vectors, geographic coordinates,
...) are supported by subclassing `PointAdapter`.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Sequence

import numpy as np

from .exceptions import InvalidArgumentError, NarrowingError


class PointAdapter(ABC):
    """
    Capability contract for a point representation.

    Subclasses must implement `distance` and `mean`. `validate` may be
    overridden to reject points the adapter cannot handle; it is called on
    every input point before clustering starts.

    The clustering loop stops when two rounds produce the same memberships
    and `equal` centroids. Override `equal` when `==` on the representation
    does not return a plain bool.
    """

    @abstractmethod
    def distance(self, a: Any, b: Any) -> float:
        """Distance between two points of this representation."""

    @abstractmethod
    def mean(self, points: Sequence[Any]) -> Any:
        """Centre of a non-empty sequence of points."""

    def validate(self, point: Any) -> None:
        """Raise `InvalidArgumentError` if `point` is not representable."""
        return None

    def equal(self, a: Any, b: Any) -> bool:
        """Whether two points are the same point."""
        if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
            return bool(np.array_equal(a, b))
        return bool(a == b)


class NumericTupleAdapter(PointAdapter):
    """
    Euclidean adapter for tuples of ``dims`` numeric coordinates.

    Parameters
    ----------
    dims : int
        Number of coordinates per point (2, 3 and 4 are the common shapes).
    dtype : numpy dtype or type
        Coordinate type. Centroids are returned as tuples of scalars of this
        dtype.
    """

    kinds: str

    def __init__(self, dims: int, dtype=np.float64):
        if isinstance(dims, bool) or not isinstance(dims, (int, np.integer)) or dims < 1:
            raise InvalidArgumentError(f"dims must be a positive integer, got {dims!r}.")
        self.dims = int(dims)
        self.dtype = np.dtype(dtype)
        if self.dtype.kind not in self.kinds:
            raise InvalidArgumentError(
                f"{type(self).__name__} does not support dtype '{self.dtype}'."
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dims={self.dims}, dtype={self.dtype.name})"

    def __eq__(self, other) -> bool:
        return (
            type(self) is type(other)
            and self.dims == other.dims
            and self.dtype == other.dtype
        )

    def __hash__(self) -> int:
        return hash((type(self), self.dims, self.dtype))

    @abstractmethod
    def _abs_diff(self, a, b):
        """|a - b| for one coordinate, without wrapping."""

    @abstractmethod
    def _narrow(self, total, count: int):
        """Mean of one axis from its `_sum` result, cast to the dtype."""

    def distance(self, a, b) -> float:
        return math.hypot(*(self._abs_diff(x, y) for x, y in zip(a, b)))

    def mean(self, points):
        if len(points) == 0:
            raise InvalidArgumentError("The mean of an empty sequence of points is undefined.")
        count = len(points)
        return tuple(
            self._narrow(self._sum(p[axis] for p in points), count)
            for axis in range(self.dims)
        )

    def _sum(self, values):
        return sum(int(v) for v in values)

    def validate(self, point) -> None:
        try:
            size = len(point)
        except TypeError:
            raise InvalidArgumentError(
                f"Point {point!r} is not a sequence of coordinates."
            ) from None
        if size != self.dims:
            raise InvalidArgumentError(
                f"Point {point!r} has {size} coordinates, expected {self.dims}."
            )


class FloatTupleAdapter(NumericTupleAdapter):
    """
    Floating point coordinates.

    Differences and sums are taken in float64; the mean is cast back to the
    coordinate dtype.
    """

    kinds = "f"

    def _abs_diff(self, a, b):
        return abs(float(a) - float(b))

    def _sum(self, values):
        return [float(v) for v in values]

    def _narrow(self, values, count: int):
        try:
            mean = math.fsum(values) / count
        except OverflowError:
            # The sum leaves the float64 range; divide each term first
            mean = math.fsum(v / count for v in values)
        return self.dtype.type(mean)


class _IntegerTupleAdapter(NumericTupleAdapter):
    """Shared range checks for integer coordinates."""

    def __init__(self, dims: int, dtype=np.int64):
        super().__init__(dims, dtype)
        info = np.iinfo(self.dtype)
        self.min_value = int(info.min)
        self.max_value = int(info.max)

    def _fits(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def validate(self, point) -> None:
        super().validate(point)
        for coordinate in point:
            if isinstance(coordinate, (float, np.floating)) and not float(coordinate).is_integer():
                raise InvalidArgumentError(
                    f"Point {point!r} has a non-integer coordinate for dtype '{self.dtype}'."
                )
            if not self._fits(int(coordinate)):
                raise InvalidArgumentError(
                    f"Coordinate {coordinate!r} of {point!r} is outside the range of '{self.dtype}'."
                )

    def _narrow(self, total: int, count: int):
        quotient = self._divide(total, count)
        if not self._fits(quotient):
            raise NarrowingError(
                f"Mean coordinate {quotient} does not fit in dtype '{self.dtype}'."
            )
        return self.dtype.type(quotient)

    @abstractmethod
    def _divide(self, total: int, count: int) -> int:
        """Integer division rounded the way the dtype family rounds."""


class UnsignedTupleAdapter(_IntegerTupleAdapter):
    """Unsigned integer coordinates; |a - b| is taken before squaring."""

    kinds = "u"

    def __init__(self, dims: int, dtype=np.uint64):
        super().__init__(dims, dtype)

    def _abs_diff(self, a, b):
        a, b = int(a), int(b)
        return a - b if a > b else b - a

    def _divide(self, total: int, count: int) -> int:
        return total // count


class SignedTupleAdapter(_IntegerTupleAdapter):
    """Signed integer coordinates, widened before subtracting."""

    kinds = "i"

    def _abs_diff(self, a, b):
        return abs(int(a) - int(b))

    def _divide(self, total: int, count: int) -> int:
        # Truncate toward zero, like a fixed-width integer division.
        quotient = abs(total) // count
        return -quotient if total < 0 else quotient


_ADAPTERS_BY_KIND = {
    "f": FloatTupleAdapter,
    "u": UnsignedTupleAdapter,
    "i": SignedTupleAdapter,
}


def tuple_adapter(dims: int, dtype=np.float64) -> NumericTupleAdapter:
    """
    Build the built-in adapter matching a coordinate dtype.

    Parameters
    ----------
    dims : int
        Number of coordinates per point.
    dtype : numpy dtype or type
        Floating, unsigned or signed integer coordinate type.

    Returns
    -------
    NumericTupleAdapter
    """
    dtype = np.dtype(dtype)
    try:
        adapter_cls = _ADAPTERS_BY_KIND[dtype.kind]
    except KeyError:
        raise InvalidArgumentError(
            f"No built-in adapter for dtype '{dtype}'; pass a custom PointAdapter."
        ) from None
    return adapter_cls(dims, dtype)


def infer_adapter(points) -> NumericTupleAdapter:
    """
    Pick a built-in adapter from the points themselves.

    The points are stacked with numpy: plain Python floats give float64,
    plain ints give int64 and numpy scalars keep their own dtype.

    Parameters
    ----------
    points : sequence of tuples or np.ndarray
        Input points; must form a 2-D numeric array.

    Returns
    -------
    NumericTupleAdapter
    """
    try:
        array = np.asarray(points)
    except ValueError as exc:
        raise InvalidArgumentError(f"Points have inconsistent shapes: {exc}") from exc

    if array.ndim != 2 or array.shape[0] == 0:
        raise InvalidArgumentError(
            "Cannot infer an adapter: points must be a non-empty sequence of "
            f"equal-length numeric tuples (got array of shape {array.shape})."
        )
    return tuple_adapter(array.shape[1], array.dtype)
