from typing import Iterable, List
import numpy as np


class MathTools:
    """Provides the arithmetic shared by the statistics services."""

    EPLEY_DIVISOR: float = 30.0

    @classmethod
    def epley_1rm(cls, weight: float, reps: int) -> float:
        """Return an Epley-style one-rep max estimate.

        ``weight * (1 + reps / 30)`` is a rough approximation of lifting
        capacity from a submaximal set. It is not a verified formula and
        overestimates badly for high rep counts.
        """
        if reps < 0:
            raise ValueError("reps must be non-negative")
        return weight * (1 + reps / cls.EPLEY_DIVISOR)

    @staticmethod
    def ratio(numerator: float, denominator: float) -> float:
        """Return ``numerator / denominator`` or 0.0 for a zero denominator."""
        if denominator == 0:
            return 0.0
        return numerator / denominator

    @staticmethod
    def percent(part: int, total: int) -> int:
        """Return the integer percentage of ``part`` in ``total``."""
        if total <= 0:
            return 0
        return int(part * 100 / total)

    @staticmethod
    def relative_change(current: float, previous: float) -> float:
        """Compute the relative change between two totals."""
        if previous == 0:
            raise ValueError("previous must not be zero")
        return (current - previous) / previous

    @staticmethod
    def normalize(values: Iterable[float]) -> List[float]:
        """Scale ``values`` into 0..1 by their maximum."""
        arr = np.asarray(list(values), dtype=float)
        if arr.size == 0:
            return []
        peak = float(arr.max())
        if peak <= 0:
            return [0.0] * int(arr.size)
        return [float(v) for v in arr / peak]
