"""Bar-height scaling for dashboard time-series charts."""

from typing import List, Sequence

DEFAULT_MIN_HEIGHT_PERCENT = 5.0


def normalize_bar_heights(
    counts: Sequence[float], min_percent: float = DEFAULT_MIN_HEIGHT_PERCENT
) -> List[float]:
    """
    Scale counts to bar heights relative to the largest count.

    Each height is ``count / max(counts) * 100`` floored at ``min_percent`` so
    that empty days still render a visible bar. An all-zero series renders
    every bar at ``min_percent``.

    Args:
        counts: Series values in display order
        min_percent: Smallest height, in percent

    Returns:
        Heights in percent, rounded to two decimals, same order as ``counts``

    Examples:
        >>> normalize_bar_heights([10, 5, 0])
        [100.0, 50.0, 5.0]
        >>> normalize_bar_heights([])
        []
    """
    if not counts:
        return []

    peak = max(counts)
    if peak <= 0:
        return [float(min_percent) for _ in counts]

    return [round(max(count / peak * 100, min_percent), 2) for count in counts]
