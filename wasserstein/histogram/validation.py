"""Input coercion and validation for histogram pairs.

Histograms arrive as Python sequences, nested lists or numpy arrays. They are
converted to numpy arrays so shape checks work uniformly, and then checked in a
fixed order: shape, then overflow of the left total mass, then balance.
"""

from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from wasserstein.config import I32_MAX
from wasserstein.errors import (
    InvalidHistogramError,
    MassOverflowError,
    ShapeMismatchError,
    UnbalancedMassError,
)


def as_histogram(values: Any, ndim: int, name: str = "histogram") -> np.ndarray:
    """Convert ``values`` to a non-negative integer array of dimension ``ndim``.

    Args:
        values: Sequence (1D) or row-major matrix (2D) of integers.
        ndim: Expected number of dimensions.
        name: Label used in error messages.

    Entries beyond the int64 range are kept exactly, as an object array of
    Python ints; range checks on the total mass happen in `validate_pair`.

    Returns:
        An ``int64`` numpy array, or an object array of Python ints.

    Raises:
        InvalidHistogramError: If the input is ragged, has the wrong number of
            dimensions, contains booleans, non-integral or negative entries.
    """
    try:
        array = np.asarray(values)
    except ValueError as exc:
        raise InvalidHistogramError(f"{name} is not a rectangular array: {exc}") from exc

    if array.ndim != ndim:
        raise InvalidHistogramError(
            f"{name} must be {ndim}-dimensional, got shape {array.shape}"
        )
    if array.size == 0:
        # np.asarray([]) is float64
        return np.zeros(array.shape, dtype=np.int64)

    if array.dtype == object:
        # numpy falls back to object arrays for ints beyond 64 bits
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in array.flat):
            raise InvalidHistogramError(f"{name} must contain integers")
        if any(v < 0 for v in array.flat):
            raise InvalidHistogramError(f"{name} contains negative entries")
        return array
    if np.issubdtype(array.dtype, np.floating):
        if not np.all(np.mod(array, 1) == 0):
            raise InvalidHistogramError(
                f"{name} must contain integers, got dtype {array.dtype}"
            )
        if np.any(array < 0):
            raise InvalidHistogramError(f"{name} contains negative entries")
        if np.any(array >= 2.0**63):
            return _as_python_ints(array)
        return array.astype(np.int64)
    if not np.issubdtype(array.dtype, np.integer):
        raise InvalidHistogramError(f"{name} must contain integers, got dtype {array.dtype}")
    if np.any(array < 0):
        raise InvalidHistogramError(f"{name} contains negative entries")
    if np.issubdtype(array.dtype, np.unsignedinteger) and array.max() > np.iinfo(np.int64).max:
        return _as_python_ints(array)
    return array.astype(np.int64)


def _as_python_ints(array: np.ndarray) -> np.ndarray:
    """Return an object array holding the entries as exact Python ints."""
    converted = np.empty(array.shape, dtype=object)
    for index, value in np.ndenumerate(array):
        converted[index] = int(value)
    return converted


def validate_pair(left: Any, right: Any, ndim: int) -> Tuple[np.ndarray, np.ndarray, int]:
    """Validate a pair of histograms and return them with their common mass.

    Raises:
        InvalidHistogramError: On malformed input.
        ShapeMismatchError: If the shapes differ.
        MassOverflowError: If the total mass does not fit the solver range.
        UnbalancedMassError: If the totals differ.
    """
    left_arr = as_histogram(left, ndim, "left")
    right_arr = as_histogram(right, ndim, "right")

    if left_arr.shape != right_arr.shape:
        raise ShapeMismatchError(
            f"Histogram shapes differ: left {left_arr.shape} vs right {right_arr.shape}"
        )

    # Python ints so the sums cannot wrap
    total_supply = sum(int(v) for v in left_arr.flat)
    total_demand = sum(int(v) for v in right_arr.flat)

    if total_supply > I32_MAX:
        raise MassOverflowError(
            f"Total supply {total_supply} must fit in a signed 32-bit integer."
        )
    if total_supply != total_demand:
        raise UnbalancedMassError(
            f"Total supply {total_supply} does not match total demand {total_demand}; "
            "the distance is only defined for histograms of equal mass."
        )
    return left_arr, right_arr, total_supply
