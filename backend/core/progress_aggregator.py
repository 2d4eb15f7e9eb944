"""
Progress aggregation over daily activity samples.

Pure helpers (windowed sums, streaks, goal percentages) plus ProgressService,
which fetches samples and goals through the repositories and applies them.
Progress and streaks are derived on request and never stored.
"""
import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Sequence, Union, TYPE_CHECKING

from application.exceptions import InvalidParameterError, NotFoundError
from backend.core.forecast import (
    DEFAULT_ALPHA,
    DEFAULT_BAND_K,
    DEFAULT_WINDOW,
    forecast_series,
)
from backend.core.periods import get_period_bounds, list_previous_periods
from domain.models import (
    ActivityAggregate,
    ActivitySample,
    ForecastMethod,
    ForecastSeries,
    Goal,
    GoalMetric,
    GoalProgress,
    PeriodBounds,
)

if TYPE_CHECKING:
    from application.ports import ActivityRepository, GoalRepository

logger = logging.getLogger(__name__)


# =============================================================================
# Pure helpers
# =============================================================================


def sum_activity(samples: Iterable[ActivitySample], bounds: PeriodBounds) -> ActivityAggregate:
    """Sum every sample whose date falls in ``bounds`` (inclusive at both ends)."""
    total = ActivityAggregate()
    for sample in samples:
        if bounds.contains(sample.date):
            total = total + ActivityAggregate(
                steps=sample.steps,
                distance_km=sample.distance_km,
                calories=sample.calories,
                workouts=sample.workouts,
            )
    return total


def percent_of_target(current: float, target: float) -> float:
    """Percentage of target reached; 0 when the target is 0."""
    if target <= 0:
        return 0.0
    return current / target * 100


def compute_streak(
    samples: Sequence[ActivitySample],
    metric: GoalMetric,
    target: float,
    periods: Sequence[PeriodBounds],
) -> int:
    """
    Count consecutive periods, most recent first, that meet ``target``.

    ``periods`` may be given in either order. Counting stops at the first
    period that falls short, so a missed current period gives 0. A zero
    target always gives 0.
    """
    streak = 0
    for bounds in sorted(periods, key=lambda b: b.start, reverse=True):
        actual = sum_activity(samples, bounds).value_for(metric)
        if percent_of_target(actual, target) >= 100:
            streak += 1
        else:
            break
    return streak


def compute_goal_progress(
    goal: Goal,
    samples: Sequence[ActivitySample],
    as_of: date,
    lookback_periods: int = 30,
) -> GoalProgress:
    """
    Progress of a goal in the period containing ``as_of``.

    The percentage is capped at 100 and rounded to one decimal. The streak
    walks ``lookback_periods`` periods, the current one included.
    """
    bounds = get_period_bounds(goal.period, as_of)
    current = sum_activity(samples, bounds).value_for(goal.metric)
    target = goal.target

    pct = min(percent_of_target(current, target), 100.0)
    periods = list_previous_periods(goal.period, lookback_periods, as_of)

    return GoalProgress(
        goal_id=goal.id,
        period=bounds,
        current_value=current,
        target_value=target,
        pct=round(pct, 1),
        streak_count=compute_streak(samples, goal.metric, target, periods),
        is_met_this_period=pct >= 100,
    )


def daily_metric_series(
    samples: Iterable[ActivitySample],
    metric: GoalMetric,
) -> "OrderedDict[date, float]":
    """One value per observed day, oldest first; same-day samples are summed."""
    by_day: "OrderedDict[date, float]" = OrderedDict()
    for sample in sorted(samples, key=lambda s: s.date):
        value = ActivityAggregate(
            steps=sample.steps,
            distance_km=sample.distance_km,
            calories=sample.calories,
            workouts=sample.workouts,
        ).value_for(metric)
        by_day[sample.date] = by_day.get(sample.date, 0.0) + value
    return by_day


# =============================================================================
# Service
# =============================================================================


class ProgressService:
    """
    Goal progress, streaks and metric forecasts for an owner.

    All tunables are passed in at construction; see backend/dependencies.py
    for how they are taken from Settings.
    """

    def __init__(
        self,
        activity_repository: "ActivityRepository",
        goal_repository: "GoalRepository",
        *,
        streak_lookback_periods: int = 30,
        forecast_window: int = DEFAULT_WINDOW,
        forecast_alpha: float = DEFAULT_ALPHA,
        forecast_band_k: float = DEFAULT_BAND_K,
        forecast_horizon_days: int = 14,
        forecast_lookback_days: int = 60,
        today: Callable[[], date] = date.today,
    ):
        self._activity = activity_repository
        self._goals = goal_repository
        self._streak_lookback = streak_lookback_periods
        self._window = forecast_window
        self._alpha = forecast_alpha
        self._band_k = forecast_band_k
        self._horizon = forecast_horizon_days
        self._lookback_days = forecast_lookback_days
        self._today = today

    def windowed_sum(self, owner_id: str, start: date, end: date) -> ActivityAggregate:
        """
        Sum an owner's activity over ``[start, end]``.

        Raises:
            InvalidParameterError: start is after end
        """
        if start > end:
            raise InvalidParameterError(
                f"Window start {start} is after end {end}",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        samples = self._activity.list_samples(owner_id, start, end)
        return sum_activity(samples, PeriodBounds(start=start, end=end))

    def goal_progress(
        self,
        owner_id: str,
        goal_id: str,
        as_of: Optional[date] = None,
    ) -> GoalProgress:
        """
        Progress and streak for one goal.

        Raises:
            NotFoundError: goal does not exist or belongs to another owner
        """
        goal = self._goals.get_goal(goal_id)
        if goal is None or goal.owner_id != owner_id:
            raise NotFoundError(f"Goal {goal_id} not found", details={"goal_id": goal_id})
        return self._progress_for(goal, as_of or self._today())

    def list_goal_progress(
        self,
        owner_id: str,
        as_of: Optional[date] = None,
        *,
        active_only: bool = True,
    ) -> List[GoalProgress]:
        """Progress for each of an owner's goals."""
        day = as_of or self._today()
        goals = self._goals.list_goals(owner_id, active_only=active_only)
        return [self._progress_for(goal, day) for goal in goals]

    def _progress_for(self, goal: Goal, as_of: date) -> GoalProgress:
        periods = list_previous_periods(goal.period, self._streak_lookback, as_of)
        start = periods[0].start if periods else get_period_bounds(goal.period, as_of).start
        end = get_period_bounds(goal.period, as_of).end
        samples = self._activity.list_samples(goal.owner_id, start, end)

        progress = compute_goal_progress(goal, samples, as_of, self._streak_lookback)
        logger.debug(
            f"Goal {goal.id}: {progress.pct}% of {progress.target_value:g}, "
            f"streak {progress.streak_count}"
        )
        return progress

    def forecast_metric(
        self,
        owner_id: str,
        metric: Union[GoalMetric, str],
        method: Union[ForecastMethod, str] = ForecastMethod.MOVING_AVERAGE,
        horizon: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> ForecastSeries:
        """
        Forecast a daily metric from the recent activity history.

        Uses the samples from the last ``forecast_lookback_days`` days up to
        ``as_of``. Days without a sample are not filled in.

        Raises:
            InvalidParameterError: unknown metric or method, or a bad horizon
        """
        try:
            metric = GoalMetric(str(getattr(metric, "value", metric)).upper())
            method = ForecastMethod(getattr(method, "value", method))
        except ValueError as e:
            raise InvalidParameterError(str(e)) from e

        end = as_of or self._today()
        start = end - timedelta(days=self._lookback_days - 1)
        samples = self._activity.list_samples(owner_id, start, end)
        series = daily_metric_series(samples, metric)

        return forecast_series(
            list(series.keys()),
            list(series.values()),
            self._horizon if horizon is None else horizon,
            method,
            window=self._window,
            alpha=self._alpha,
            band_k=self._band_k,
        )
