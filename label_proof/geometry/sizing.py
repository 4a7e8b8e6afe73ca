"""
Size buckets for presentation constants.

An object's largest dimension (inches) selects one of seven buckets.
Thresholds are tested with strict ``<`` in ascending order, so a value
exactly on a threshold belongs to the higher bucket: 0.5" is
``FROM_0_5_TO_1``, not ``UNDER_0_5``.
"""

from enum import Enum


class SizeBucket(Enum):
    """Half-open ``[lo, hi)`` size ranges of the largest label dimension."""
    UNDER_0_5 = "under0_5"
    FROM_0_5_TO_1 = "0_5to1"
    FROM_1_TO_2 = "1to2"
    FROM_2_TO_4 = "2to4"
    FROM_4_TO_6 = "4to6"
    FROM_6_TO_10 = "6to10"
    OVER_10 = "over10"


# (upper bound, bucket) in ascending order; OVER_10 catches the rest.
SIZE_THRESHOLDS = (
    (0.5, SizeBucket.UNDER_0_5),
    (1.0, SizeBucket.FROM_0_5_TO_1),
    (2.0, SizeBucket.FROM_1_TO_2),
    (4.0, SizeBucket.FROM_2_TO_4),
    (6.0, SizeBucket.FROM_4_TO_6),
    (10.0, SizeBucket.FROM_6_TO_10),
)


def classify_size(width_in: float, height_in: float) -> SizeBucket:
    """Classify a ``width x height`` object (inches) into a size bucket.

    Args:
        width_in: object width in inches.
        height_in: object height in inches.

    Returns:
        The bucket whose range contains ``max(width_in, height_in)``.
    """
    max_dim = max(width_in, height_in)
    for upper, bucket in SIZE_THRESHOLDS:
        if max_dim < upper:
            return bucket
    return SizeBucket.OVER_10
