"""
Bucketizer

Ordered, first-match classification of numeric values into user-defined ranges.

Buckets are min-inclusive and max-exclusive and are evaluated in the order they
were added. If a bucket from 9 to 100 is added before a bucket from 2 to 50,
nothing between 9 and 50 will ever land in the second one.

Example:
    >>> b = (
    ...     Bucketizer()
    ...     .add_bucket(10.0, 20.0, 15.0)
    ...     .add_bucket(5.0, 10.0, 7.5)
    ...     .add_bucket(None, 4.0, 0.0)
    ... )
    >>> b.classify(12.34)
    15.0
    >>> b.classify(999.99) is None
    True
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bucket:
    """A half-open range `[lower, upper)` paired with an output value."""

    lower: Optional[float]
    upper: Optional[float]
    output: float

    @property
    def is_catch_all(self) -> bool:
        return self.lower is None and self.upper is None

    @property
    def is_inert(self) -> bool:
        """True when both bounds are set and no value can satisfy them."""
        if self.lower is None or self.upper is None:
            return False
        return not self.lower < self.upper

    def matches(self, value: float) -> bool:
        if self.lower is None and self.upper is None:
            return True
        if self.upper is None:
            return value >= self.lower
        if self.lower is None:
            return value < self.upper
        return self.lower <= value < self.upper


@dataclass(frozen=True)
class Bucketizer:
    """
    Holds the buckets values are slotted into and performs the classification.

    Instances are immutable: `add_bucket` returns a new Bucketizer, so a fully
    built one can be shared freely across threads.
    """

    buckets: tuple[Bucket, ...] = ()

    @classmethod
    def from_buckets(
        cls, buckets: Iterable[tuple[Optional[float], Optional[float], float]]
    ) -> "Bucketizer":
        """Builds a Bucketizer from `(lower, upper, output)` triples, in order."""
        result = cls()
        for lower, upper, output in buckets:
            result = result.add_bucket(lower, upper, output)
        return result

    def add_bucket(
        self, lower_bound: Optional[float], upper_bound: Optional[float], output: float
    ) -> "Bucketizer":
        """Returns a Bucketizer with the given bucket appended after all existing ones."""
        bucket = Bucket(lower_bound, upper_bound, output)
        if bucket.is_inert:
            logger.debug(
                f"Bucket [{lower_bound}, {upper_bound}) can never match a value",
                extra={"lower": lower_bound, "upper": upper_bound, "output": output},
            )
        return Bucketizer(self.buckets + (bucket,))

    def classify(self, value: float) -> Optional[float]:
        """
        Returns the output of the first bucket matching `value`.

        Args:
            value: Any float, including NaN and infinities. NaN only matches
                catch-all buckets.

        Returns:
            The matched bucket's output, or None if no bucket matches.
        """
        for bucket in self.buckets:
            if bucket.matches(value):
                return bucket.output
        return None

    def __len__(self) -> int:
        return len(self.buckets)

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self.buckets)
