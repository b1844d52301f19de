"""
Confidence scoring for success/failure tallies.

Uses the lower bound of the Wilson score interval, which stays
conservative for small samples: 1 success out of 1 scores ~0.21,
10 out of 10 scores ~0.72.
"""

import math
from typing import Optional

from .config import config


def wilson_lower_bound(successes: int, failures: int, z: Optional[float] = None) -> float:
    """
    Lower bound of the Wilson score interval for the success proportion.

    Args:
        successes: Observed successes (>= 0)
        failures: Observed failures (>= 0)
        z: Normal quantile, defaults to ``config.wilson_z`` (1.96 = 95%)

    Returns:
        Value in [0, 1]; 0.0 when there are no samples
    """
    if successes < 0 or failures < 0:
        raise ValueError(f"Counts must be non-negative, got {successes}/{failures}")

    n = successes + failures
    if n == 0:
        return 0.0

    if z is None:
        z = config.wilson_z

    z2 = z * z
    p_hat = successes / n
    numerator = p_hat + z2 / (2 * n) - z * math.sqrt((p_hat * (1 - p_hat) + z2 / (4 * n)) / n)
    denominator = 1 + z2 / n

    return min(1.0, max(0.0, numerator / denominator))
