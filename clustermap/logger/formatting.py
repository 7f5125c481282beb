"""Text formatting utilities for logging."""

import math
from typing import Any, Iterable, Optional, Sequence


def format_set(s: Iterable[Any]) -> str:
    """Format a collection as a sorted brace-enclosed set."""
    items = sorted(s)
    if not items:
        return "∅"
    return "{" + ", ".join(str(x) for x in items) + "}"


def format_distance(value: Optional[float], precision: int = 3) -> str:
    """Format a distance, rendering unknown values as '-'."""
    if value is None:
        return "-"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "-"
    if not math.isfinite(number):
        return "-"
    return f"{number:.{precision}f}"


def format_indices(indices: Iterable[int], labels: Optional[Sequence[str]] = None) -> str:
    """Format a group of entity indices, using their labels when available."""
    if labels is None:
        return "(" + ", ".join(str(i) for i in indices) + ")"
    return "(" + ", ".join(labels[i] for i in indices) + ")"
