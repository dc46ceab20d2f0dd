from __future__ import annotations

import numpy as np
import pytest

from embedsearch.core.vector import QuantizedVector, quantize
from embedsearch.errors import DimensionMismatch, InvalidArgument


def test_from_buffer_decodes_signed_bytes() -> None:
    buffer = bytes([1, 0xFF, 0x80, 127])

    vector = QuantizedVector.from_buffer(buffer, dimension=4)

    assert vector.dimension == 4
    assert vector.tolist() == [1, -1, -128, 127]
    assert vector.to_bytes() == buffer


def test_from_buffer_rejects_wrong_length() -> None:
    with pytest.raises(DimensionMismatch) as excinfo:
        QuantizedVector.from_buffer(b"\x01\x02\x03", dimension=4)

    assert excinfo.value.expected == 4
    assert excinfo.value.actual == 3


def test_from_buffer_rejects_empty_buffer() -> None:
    with pytest.raises(DimensionMismatch):
        QuantizedVector.from_buffer(b"")


def test_from_values_rejects_out_of_range() -> None:
    with pytest.raises(InvalidArgument):
        QuantizedVector.from_values([0, 128])

    with pytest.raises(InvalidArgument):
        QuantizedVector.from_values([-129, 0])


def test_from_values_rejects_non_integers() -> None:
    with pytest.raises(InvalidArgument):
        QuantizedVector.from_values([0.5, 1.0])


def test_vector_is_immutable() -> None:
    vector = QuantizedVector.from_values([1, 2, 3])

    with pytest.raises(AttributeError):
        vector._values = np.zeros(3, dtype=np.int8)  # type: ignore[misc]
    with pytest.raises(ValueError):
        vector.values[0] = 5

    assert vector.tolist() == [1, 2, 3]


def test_source_array_changes_do_not_leak_into_vector() -> None:
    source = np.array([1, 2, 3], dtype=np.int8)
    vector = QuantizedVector(source)

    source[0] = 99

    assert vector.tolist() == [1, 2, 3]


def test_equality_and_hash_follow_contents() -> None:
    a = QuantizedVector.from_values([1, -2, 3])
    b = QuantizedVector.from_buffer(a.to_bytes())
    c = QuantizedVector.from_values([1, -2, 4])

    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_unit_quantization_scales_to_norm_127() -> None:
    vector = quantize([3.0, 4.0], scheme="unit")

    # 127 * 3/5 = 76.2, 127 * 4/5 = 101.6
    assert vector.tolist() == [76, 102]


def test_max_abs_quantization_uses_full_range() -> None:
    vector = quantize([0.5, -1.0, 0.25], scheme="max_abs")

    # 63.5 rounds half-to-even, 31.75 rounds up
    assert vector.tolist() == [64, -127, 32]


def test_quantization_never_emits_minus_128() -> None:
    vector = quantize([-1.0, -1.0, -1.0, -1.0], scheme="max_abs")

    assert vector.tolist() == [-127, -127, -127, -127]


def test_zero_vector_quantizes_to_zeros() -> None:
    assert quantize([0.0, 0.0, 0.0]).tolist() == [0, 0, 0]
    assert quantize([0.0, 0.0], scheme="max_abs").tolist() == [0, 0]


def test_quantization_rejects_non_finite_values() -> None:
    with pytest.raises(InvalidArgument):
        quantize([1.0, float("nan")])
    with pytest.raises(InvalidArgument):
        quantize([float("inf"), 0.0])


def test_quantization_rejects_unknown_scheme() -> None:
    with pytest.raises(InvalidArgument):
        quantize([1.0, 0.0], scheme="log")  # type: ignore[arg-type]


def test_quantization_checks_expected_dimension() -> None:
    with pytest.raises(DimensionMismatch):
        QuantizedVector.from_floats([0.1, 0.2, 0.3], dimension=4)


def test_quantization_is_deterministic_and_bounded() -> None:
    rng = np.random.default_rng(7)
    floats = rng.normal(size=256)

    first = quantize(floats)
    second = quantize(floats.copy())

    assert first == second
    unit = floats / np.linalg.norm(floats)
    error = np.abs(first.values.astype(np.float64) / 127 - unit)
    assert float(error.max()) <= 0.5 / 127 + 1e-12
