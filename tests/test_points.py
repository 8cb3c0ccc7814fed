import math

import numpy as np
import pytest

from kmeanspp import (
    FloatTupleAdapter,
    InvalidArgumentError,
    NarrowingError,
    NumericTupleAdapter,
    PointAdapter,
    SignedTupleAdapter,
    UnsignedTupleAdapter,
    infer_adapter,
    tuple_adapter,
)

ADAPTER_CASES = [
    (tuple_adapter(2, np.float64), (1.5, -2.0), (4.5, 2.0), 5.0),
    (tuple_adapter(2, np.float32), (np.float32(0), np.float32(0)), (np.float32(3), np.float32(4)), 5.0),
    (tuple_adapter(3, np.uint8), (1, 2, 2), (0, 0, 0), 3.0),
    (tuple_adapter(3, np.int16), (-1, -2, -2), (0, 0, 0), 3.0),
    (tuple_adapter(4, np.uint32), (1, 1, 1, 1), (2, 2, 2, 2), 2.0),
    (tuple_adapter(4, np.int64), (-1, -1, -1, -1), (1, 1, 1, 1), 4.0),
]


@pytest.mark.parametrize("adapter, a, b, expected", ADAPTER_CASES)
def test_distance_is_symmetric_and_euclidean(adapter, a, b, expected):
    assert adapter.distance(a, b) == pytest.approx(expected)
    assert adapter.distance(b, a) == adapter.distance(a, b)
    assert adapter.distance(a, b) > 0


@pytest.mark.parametrize("adapter, a, b, expected", ADAPTER_CASES)
def test_distance_to_itself_is_zero(adapter, a, b, expected):
    assert adapter.distance(a, a) == 0
    assert adapter.distance(b, b) == 0


def test_unsigned_distance_does_not_underflow():
    adapter = UnsignedTupleAdapter(2, np.uint8)
    low = (np.uint8(0), np.uint8(0))
    high = (np.uint8(255), np.uint8(255))

    assert adapter.distance(low, high) == pytest.approx(255 * math.sqrt(2))
    assert adapter.distance(high, low) == pytest.approx(255 * math.sqrt(2))


def test_signed_distance_does_not_overflow():
    adapter = SignedTupleAdapter(2, np.int8)
    low = (np.int8(-128), np.int8(-128))
    high = (np.int8(127), np.int8(127))

    assert adapter.distance(low, high) == pytest.approx(255 * math.sqrt(2))


def test_float_mean_is_coordinatewise():
    adapter = FloatTupleAdapter(3, np.float64)
    mean = adapter.mean([(0.0, 1.0, 2.0), (2.0, 3.0, 4.0), (4.0, 5.0, 9.0)])
    assert mean == pytest.approx((2.0, 3.0, 5.0))


def test_float32_mean_keeps_dtype():
    adapter = FloatTupleAdapter(2, np.float32)
    mean = adapter.mean([(1.0, 2.0), (2.0, 3.0)])
    assert all(isinstance(v, np.float32) for v in mean)
    assert mean == (1.5, 2.5)


def test_float_distance_stays_finite_near_float64_limit():
    adapter = FloatTupleAdapter(2, np.float64)
    assert adapter.distance((1e200, 0.0), (-1e200, 0.0)) == pytest.approx(2e200)
    assert adapter.distance((1e300, 1e300), (0.0, 0.0)) == pytest.approx(math.sqrt(2) * 1e300)


def test_float_mean_survives_a_sum_past_float64_range():
    adapter = FloatTupleAdapter(1, np.float64)
    assert adapter.mean([(1e308,), (1e308,)]) == pytest.approx((1e308,))


def test_unsigned_mean_truncates_and_keeps_dtype():
    adapter = UnsignedTupleAdapter(2, np.uint8)
    mean = adapter.mean([(np.uint8(1), np.uint8(200)), (np.uint8(2), np.uint8(255))])
    # 255 + 200 would wrap in uint8; the sum is taken with Python ints
    assert mean == (1, 227)
    assert all(isinstance(v, np.uint8) for v in mean)


def test_signed_mean_truncates_toward_zero():
    adapter = SignedTupleAdapter(2, np.int8)
    assert adapter.mean([(-1, 1), (-2, 2)]) == (-1, 1)
    assert adapter.mean([(-128, 127), (-128, 127)]) == (-128, 127)


def test_integer_mean_outside_dtype_raises():
    adapter = UnsignedTupleAdapter(1, np.uint8)
    with pytest.raises(NarrowingError):
        adapter.mean([(300,), (302,)])


def test_mean_of_nothing_raises():
    with pytest.raises(InvalidArgumentError):
        FloatTupleAdapter(2).mean([])


def test_validate_rejects_wrong_arity():
    with pytest.raises(InvalidArgumentError, match="expected 2"):
        FloatTupleAdapter(2).validate((1.0, 2.0, 3.0))


def test_validate_rejects_out_of_range_coordinates():
    adapter = UnsignedTupleAdapter(2, np.uint8)
    adapter.validate((0, 255))
    with pytest.raises(InvalidArgumentError):
        adapter.validate((0, 256))
    with pytest.raises(InvalidArgumentError):
        adapter.validate((-1, 0))


def test_validate_rejects_fractional_integer_coordinates():
    with pytest.raises(InvalidArgumentError):
        SignedTupleAdapter(2, np.int32).validate((1.5, 2))


@pytest.mark.parametrize("dtype, expected_cls", [
    (np.float32, FloatTupleAdapter),
    (np.float64, FloatTupleAdapter),
    (np.uint8, UnsignedTupleAdapter),
    (np.uint64, UnsignedTupleAdapter),
    (np.int8, SignedTupleAdapter),
    (np.int64, SignedTupleAdapter),
])
def test_tuple_adapter_selects_class_from_dtype(dtype, expected_cls):
    adapter = tuple_adapter(3, dtype)
    assert isinstance(adapter, expected_cls)
    assert adapter.dims == 3
    assert adapter.dtype == np.dtype(dtype)


def test_tuple_adapter_rejects_unsupported_dtype():
    with pytest.raises(InvalidArgumentError):
        tuple_adapter(2, np.bool_)
    with pytest.raises(InvalidArgumentError):
        tuple_adapter(0, np.float64)


def test_adapters_compare_by_shape_and_dtype():
    assert tuple_adapter(2, np.uint8) == UnsignedTupleAdapter(2, np.uint8)
    assert tuple_adapter(2, np.uint8) != tuple_adapter(2, np.uint16)
    assert tuple_adapter(2, np.uint8) != tuple_adapter(3, np.uint8)


def test_infer_adapter_from_python_and_numpy_scalars(float_points, uint8_points):
    assert infer_adapter(float_points) == FloatTupleAdapter(2, np.float64)
    assert infer_adapter(uint8_points) == UnsignedTupleAdapter(2, np.uint8)
    assert isinstance(infer_adapter([(1, 2, 3), (4, 5, 6)]), SignedTupleAdapter)


def test_infer_adapter_rejects_ragged_or_scalar_points():
    with pytest.raises(InvalidArgumentError):
        infer_adapter([(1.0, 2.0), (1.0, 2.0, 3.0)])
    with pytest.raises(InvalidArgumentError):
        infer_adapter([1.0, 2.0, 3.0])
    with pytest.raises(InvalidArgumentError):
        infer_adapter([("a", "b")])


def test_numeric_tuple_adapter_is_abstract():
    with pytest.raises(TypeError):
        NumericTupleAdapter(2)

    class HalfDone(NumericTupleAdapter):
        kinds = "f"

        def _abs_diff(self, a, b):
            return abs(a - b)

    with pytest.raises(TypeError):
        HalfDone(2)


class _Plain(PointAdapter):
    def distance(self, a, b):
        return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))

    def mean(self, points):
        return np.mean(points, axis=0)


def test_default_equal_handles_arrays_and_tuples():
    adapter = _Plain()
    assert adapter.equal(np.array([1.0, 2.0]), np.array([1.0, 2.0]))
    assert not adapter.equal(np.array([1.0, 2.0]), np.array([1.0, 3.0]))
    assert not adapter.equal(np.array([1.0, 2.0]), np.array([1.0, 2.0, 3.0]))
    assert adapter.equal((1.0, 2.0), (1.0, 2.0))
    assert not adapter.equal((1.0, 2.0), (2.0, 1.0))
