"""
Numeric helpers shared by the aggregations.

All functions are total: empty input returns 0 (or an empty list),
never raises.
"""
from typing import Dict, Iterable, List, Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return 0
    return sum(values) / len(values)


def median(values: Iterable[float]) -> float:
    """
    True median (not the average).

    Odd length -> middle element; even length -> mean of the two middle
    elements; empty -> 0.
    """
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        return 0
    mid = n // 2
    if n % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def moving_average(values: Sequence[float], window: int) -> List[float]:
    """
    Trailing moving average.

    Point i averages values[max(0, i - window + 1) : i + 1], so the first
    points average over however many values exist so far.
    """
    out = []
    for i in range(len(values)):
        start = max(0, i - window + 1)
        chunk = values[start:i + 1]
        out.append(sum(chunk) / len(chunk))
    return out


def generate_bins(edges: Sequence[float]) -> List[Dict[str, float]]:
    """[0, 10, 50] -> [{'min': 0, 'max': 10}, {'min': 10, 'max': 50}]"""
    return [{'min': lo, 'max': hi} for lo, hi in zip(edges, edges[1:])]


def bin_counts(values: Iterable[float], bins: List[Dict[str, float]]) -> List[int]:
    """Count values per half-open [min, max) bin. Out-of-range values are dropped."""
    values = list(values)
    return [
        sum(1 for v in values if b['min'] <= v < b['max'])
        for b in bins
    ]
