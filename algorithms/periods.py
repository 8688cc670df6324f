import datetime
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from models import Period, Workout

_OFFSET_UNITS = {
    Period.WEEK: "weeks",
    Period.MONTH: "months",
    Period.YEAR: "years",
}


class PeriodTools:
    """Calendar window helpers for period-bounded statistics."""

    @staticmethod
    def shift(
        now: datetime.datetime, period: Period, count: int = 1
    ) -> datetime.datetime:
        """Return ``now`` moved back ``count`` calendar periods.

        Months and years follow calendar rules, so March 31 minus one month
        lands on the last day of February.
        """
        unit = _OFFSET_UNITS.get(Period.parse(period))
        if unit is None:
            raise ValueError("period 'all' has no calendar length")
        shifted = pd.Timestamp(now) - pd.DateOffset(**{unit: count})
        return shifted.to_pydatetime()

    @classmethod
    def current_start(
        cls, period: Period, now: datetime.datetime
    ) -> Optional[datetime.datetime]:
        period = Period.parse(period)
        if period is Period.ALL:
            return None
        return cls.shift(now, period)

    @classmethod
    def previous_bounds(
        cls, period: Period, now: datetime.datetime
    ) -> Optional[Tuple[datetime.datetime, datetime.datetime]]:
        """Return ``(start, end)`` of the window preceding the current one."""
        period = Period.parse(period)
        if period is Period.ALL:
            return None
        return cls.shift(now, period, 2), cls.shift(now, period, 1)

    @staticmethod
    def between(
        workouts: Iterable[Workout],
        start: Optional[datetime.datetime],
        end: Optional[datetime.datetime] = None,
    ) -> List[Workout]:
        """Return dated workouts with ``start <= date < end``."""
        result = []
        for w in workouts:
            if w.date is None:
                continue
            if start is not None and w.date < start:
                continue
            if end is not None and w.date >= end:
                continue
            result.append(w)
        return result

    @classmethod
    def filter_workouts(
        cls, workouts: Iterable[Workout], period: Period, now: datetime.datetime
    ) -> List[Workout]:
        """Return the workouts falling in the current window of ``period``.

        Undated workouts only belong to the unbounded ``all`` period.
        """
        period = Period.parse(period)
        if period is Period.ALL:
            return list(workouts)
        return cls.between(workouts, cls.current_start(period, now))

    @staticmethod
    def trailing_days(now: datetime.datetime, count: int) -> List[datetime.date]:
        """Return ``count`` calendar days ending today, oldest first."""
        if count <= 0:
            return []
        today = now.date()
        return [today - datetime.timedelta(days=i) for i in range(count - 1, -1, -1)]
