"""Airport size classification.

Buckets airports into small, medium and large from the numeric "size"
property. The boundaries are fixed and inclusive:

    small   size < 1000
    medium  1000 <= size <= 3499
    large   size >= 3500

Typical usage:
    from airfinder.airports.classifier import SizeBucket, classify_size

    bucket = classify_size(feature.properties.size)
    if bucket == SizeBucket.LARGE:
        ...
"""

from enum import Enum
from typing import Any

from airfinder.airports.feature import to_number

MEDIUM_MIN_SIZE = 1000
LARGE_MIN_SIZE = 3500


class SizeBucket(Enum):
    """Airport size bucket."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @classmethod
    def parse(cls, value: "str | SizeBucket") -> "SizeBucket | None":
        """Parse a bucket name (case-insensitive).

        Args:
            value: Bucket name such as "Large", or a SizeBucket

        Returns:
            Matching bucket, or None if the name is unknown

        Examples:
            >>> SizeBucket.parse(" Medium ")
            <SizeBucket.MEDIUM: 'medium'>
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def classify_size(size: Any) -> SizeBucket:
    """Classify a size value into a bucket.

    Missing or unparsable sizes count as 0 and land in SMALL.

    Args:
        size: Numeric size (number, numeric string, or None)

    Returns:
        Size bucket

    Examples:
        >>> classify_size(999)
        <SizeBucket.SMALL: 'small'>
        >>> classify_size(3500)
        <SizeBucket.LARGE: 'large'>
    """
    value = to_number(size)
    if value is None:
        value = 0.0

    if value < MEDIUM_MIN_SIZE:
        return SizeBucket.SMALL

    # Fractional sizes between 3499 and 3500 still count as medium.
    if value < LARGE_MIN_SIZE:
        return SizeBucket.MEDIUM

    return SizeBucket.LARGE
