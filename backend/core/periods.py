"""
Goal period boundaries.

Daily periods are single days, weekly periods run Monday to Sunday, and
monthly periods are calendar months. Bounds are inclusive dates.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from application.exceptions import InvalidParameterError
from domain.models import GoalPeriod, PeriodBounds

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def get_period_bounds(period: GoalPeriod, anchor: Optional[DateLike] = None) -> PeriodBounds:
    """
    The period of the given granularity that contains ``anchor``.

    Args:
        period: DAILY, WEEKLY or MONTHLY
        anchor: Any day inside the period (defaults to today)

    Returns:
        PeriodBounds with inclusive start and end
    """
    day = _as_date(anchor) if anchor is not None else date.today()

    if period == GoalPeriod.DAILY:
        return PeriodBounds(start=day, end=day)
    if period == GoalPeriod.WEEKLY:
        start = day - timedelta(days=day.weekday())
        return PeriodBounds(start=start, end=start + timedelta(days=6))
    if period == GoalPeriod.MONTHLY:
        last_day = calendar.monthrange(day.year, day.month)[1]
        return PeriodBounds(start=day.replace(day=1), end=day.replace(day=last_day))

    raise InvalidParameterError(f"Unknown goal period: {period!r}")


def list_previous_periods(
    period: GoalPeriod,
    count: int,
    anchor: Optional[DateLike] = None,
) -> List[PeriodBounds]:
    """
    The ``count`` consecutive periods ending with the one containing ``anchor``.

    Returned oldest first, so the current period is last.
    """
    if count < 0:
        raise InvalidParameterError(
            f"Period count must be non-negative, got {count}",
            details={"count": count},
        )

    day = _as_date(anchor) if anchor is not None else date.today()
    periods: List[PeriodBounds] = []
    for _ in range(count):
        bounds = get_period_bounds(period, day)
        periods.append(bounds)
        day = bounds.start - timedelta(days=1)

    periods.reverse()
    return periods


def is_current_period(
    period: GoalPeriod,
    day: DateLike,
    today: Optional[DateLike] = None,
) -> bool:
    """True when ``day`` falls in the same period as ``today``."""
    return get_period_bounds(period, day) == get_period_bounds(period, today)
