"""
Batch Classification

Applies a Bucketizer across many values at once: plain iterables, numpy arrays
and pandas Series. Every helper agrees element-wise with `Bucketizer.classify`.
"""

from collections.abc import Iterable, Sequence
from typing import Optional, Union

import numpy as np
import pandas as pd

from .bucketizer import Bucketizer

__all__ = ["classify_array", "classify_many", "classify_series"]


def classify_many(bucketizer: Bucketizer, values: Iterable[float]) -> list[Optional[float]]:
    """Classifies each value in order; unmatched values map to None."""
    return [bucketizer.classify(v) for v in values]


def classify_array(
    bucketizer: Bucketizer, values: Union[np.ndarray, Sequence[float]]
) -> tuple[np.ndarray, np.ndarray]:
    """
    Vectorized classification over a numpy array.

    Buckets are applied in priority order; each one only claims positions that
    no earlier bucket has matched. Comparisons against NaN are False, so NaN
    inputs are only claimed by catch-all buckets.

    Args:
        values: Array-like of floats, any shape. Converted with
            `np.asarray(values, dtype=np.float64)`.

    Returns:
        (outputs, matched) arrays with the same shape as `values`. Where
        `matched` is False the output slot holds 0.0 and carries no meaning.
    """
    arr = np.asarray(values, dtype=np.float64)
    outputs = np.zeros(arr.shape, dtype=np.float64)
    matched = np.zeros(arr.shape, dtype=bool)

    with np.errstate(invalid="ignore"):
        for bucket in bucketizer.buckets:
            if bucket.is_catch_all:
                hit = np.ones(arr.shape, dtype=bool)
            elif bucket.upper is None:
                hit = arr >= bucket.lower
            elif bucket.lower is None:
                hit = arr < bucket.upper
            else:
                hit = (arr >= bucket.lower) & (arr < bucket.upper)

            claim = hit & ~matched
            outputs[claim] = bucket.output
            matched |= claim

            if matched.all():
                break

    return outputs, matched


def classify_series(bucketizer: Bucketizer, series: pd.Series) -> pd.Series:
    """Classifies a Series, keeping its index and name. Unmatched entries are None."""
    outputs, matched = classify_array(bucketizer, series.to_numpy(dtype=np.float64))
    data = [float(out) if hit else None for out, hit in zip(outputs, matched)]
    return pd.Series(data, index=series.index, name=series.name, dtype=object)
