"""Immutable signed 8-bit embedding vectors.

Quantization conventions:

- ``"unit"`` (default): L2-normalise, then scale by 127. Every non-zero
  vector ends up with a norm close to 127, so raw dot products approximate
  ``127**2 * cosine`` and stay comparable across vectors quantized at
  different times.
- ``"max_abs"``: scale by ``127 / max(|x|)``. Uses the full int8 range for
  each vector but scores are only comparable up to per-vector scale.

Both schemes round half-to-even and clamp to ``[-127, 127]``, so the error
per component is at most half a quantization step.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Literal

import numpy as np

from embedsearch.errors import DimensionMismatch, InvalidArgument

QuantizationScheme = Literal["unit", "max_abs"]

QUANT_LIMIT = 127
INT8_MIN = -128
INT8_MAX = 127


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def _check_dimension(actual: int, dimension: int | None) -> None:
    if actual <= 0:
        raise DimensionMismatch(
            "Vector buffer is empty; dimension must be positive",
            expected=dimension,
            actual=actual,
        )
    if dimension is not None and actual != dimension:
        raise DimensionMismatch(
            f"Vector has {actual} components; expected {dimension}",
            expected=dimension,
            actual=actual,
        )


class QuantizedVector:
    """Fixed-length int8 encoding of a real-valued embedding."""

    __slots__ = ("_values",)

    _values: np.ndarray

    def __init__(self, values: np.ndarray) -> None:
        array = np.asarray(values)
        if array.ndim != 1:
            raise InvalidArgument(f"Vector must be one-dimensional; got shape {array.shape}")
        _check_dimension(array.shape[0], None)
        if array.dtype != np.int8:
            raise InvalidArgument(f"Vector values must be int8; got {array.dtype}")
        object.__setattr__(self, "_values", _frozen(array.copy()))

    @classmethod
    def from_buffer(
        cls,
        buffer: bytes | bytearray | memoryview,
        dimension: int | None = None,
    ) -> QuantizedVector:
        """Decode a raw int8 buffer (one byte per component)."""
        data = bytes(buffer)
        _check_dimension(len(data), dimension)
        return cls(np.frombuffer(data, dtype=np.int8))

    @classmethod
    def from_values(
        cls,
        values: Iterable[int],
        dimension: int | None = None,
    ) -> QuantizedVector:
        """Build a vector from integers that already fit a signed byte."""
        array = np.asarray(list(values))
        _check_dimension(array.shape[0] if array.ndim == 1 else 0, dimension)
        if not np.issubdtype(array.dtype, np.integer):
            raise InvalidArgument(f"Vector values must be integers; got {array.dtype}")
        if array.min() < INT8_MIN or array.max() > INT8_MAX:
            raise InvalidArgument(
                f"Vector values must lie in [{INT8_MIN}, {INT8_MAX}]; "
                f"got range [{int(array.min())}, {int(array.max())}]"
            )
        return cls(array.astype(np.int8))

    @classmethod
    def from_floats(
        cls,
        values: Sequence[float] | np.ndarray,
        *,
        scheme: QuantizationScheme = "unit",
        dimension: int | None = None,
    ) -> QuantizedVector:
        """Quantize a float embedding. See module docstring for schemes."""
        return quantize(values, scheme=scheme, dimension=dimension)

    @property
    def dimension(self) -> int:
        return int(self._values.shape[0])

    @property
    def values(self) -> np.ndarray:
        """Read-only int8 view of the components."""
        return self._values

    def to_bytes(self) -> bytes:
        return self._values.tobytes()

    def tolist(self) -> list[int]:
        return [int(v) for v in self._values]

    def __len__(self) -> int:
        return self.dimension

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuantizedVector):
            return NotImplemented
        return self.dimension == other.dimension and self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash((self.dimension, self.to_bytes()))

    def __repr__(self) -> str:
        preview = ", ".join(str(v) for v in self.tolist()[:8])
        suffix = ", ..." if self.dimension > 8 else ""
        return f"QuantizedVector(dimension={self.dimension}, values=[{preview}{suffix}])"


def quantize(
    values: Sequence[float] | np.ndarray,
    *,
    scheme: QuantizationScheme = "unit",
    dimension: int | None = None,
) -> QuantizedVector:
    """Quantize ``values`` into a :class:`QuantizedVector`.

    Raises:
        DimensionMismatch: empty input or length differs from ``dimension``
        InvalidArgument: non-finite components or unknown ``scheme``
    """
    array = np.asarray(values, dtype=np.float64)
    if array.ndim != 1:
        raise InvalidArgument(f"Embedding must be one-dimensional; got shape {array.shape}")
    _check_dimension(array.shape[0], dimension)
    if not np.all(np.isfinite(array)):
        raise InvalidArgument("Embedding contains NaN or infinite components")

    if scheme == "unit":
        norm = float(np.linalg.norm(array))
        scale = QUANT_LIMIT / norm if norm > 0 else 0.0
    elif scheme == "max_abs":
        peak = float(np.max(np.abs(array)))
        scale = QUANT_LIMIT / peak if peak > 0 else 0.0
    else:
        raise InvalidArgument(f"Unknown quantization scheme: {scheme!r}")

    scaled = np.rint(array * scale)
    clamped = np.clip(scaled, -QUANT_LIMIT, QUANT_LIMIT)
    return QuantizedVector(clamped.astype(np.int8))
