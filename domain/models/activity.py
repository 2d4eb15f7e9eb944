"""
Activity samples, their aggregates, and goals measured against them.

Goal progress and streaks are derived on request and never stored.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class GoalMetric(str, Enum):
    """Which aggregate a goal is measured on."""
    STEPS = "STEPS"
    CALORIES = "CALORIES"
    WORKOUTS = "WORKOUTS"
    DISTANCE = "DISTANCE"


class GoalPeriod(str, Enum):
    """Granularity of a goal period."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


# Metrics whose target is a whole number; the rest take a decimal target.
INTEGER_METRICS = frozenset({GoalMetric.STEPS, GoalMetric.WORKOUTS})


class ActivitySample(BaseModel):
    """One day of tracked activity for an owner."""

    id: Optional[str] = None
    owner_id: str
    date: date
    steps: int = Field(default=0, ge=0)
    distance_km: float = Field(default=0.0, ge=0)
    calories: float = Field(default=0.0, ge=0)
    heart_rate_avg: Optional[float] = Field(default=None, ge=0)
    workouts: int = Field(default=0, ge=0)


class ActivityAggregate(BaseModel):
    """Sums over a date window."""

    steps: int = 0
    distance_km: float = 0.0
    calories: float = 0.0
    workouts: int = 0

    def __add__(self, other: "ActivityAggregate") -> "ActivityAggregate":
        return ActivityAggregate(
            steps=self.steps + other.steps,
            distance_km=self.distance_km + other.distance_km,
            calories=self.calories + other.calories,
            workouts=self.workouts + other.workouts,
        )

    def value_for(self, metric: GoalMetric) -> float:
        """Pick the aggregate that a goal metric is measured on."""
        if metric == GoalMetric.STEPS:
            return self.steps
        if metric == GoalMetric.WORKOUTS:
            return self.workouts
        if metric == GoalMetric.DISTANCE:
            return self.distance_km
        if metric == GoalMetric.CALORIES:
            return self.calories
        return 0


class PeriodBounds(BaseModel):
    """A closed date interval, inclusive at both ends."""

    start: date
    end: date

    model_config = {"frozen": True}

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class Goal(BaseModel):
    """
    A recurring target for one metric.

    STEPS and WORKOUTS goals take ``target_int``; DISTANCE and CALORIES goals
    take ``target_dec``. Exactly one of the two is set.
    """

    id: str
    owner_id: str
    metric: GoalMetric
    period: GoalPeriod
    target_int: Optional[int] = Field(default=None, ge=0)
    target_dec: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    is_active: bool = True

    @model_validator(mode="after")
    def validate_target_shape(self) -> "Goal":
        if self.metric in INTEGER_METRICS:
            if self.target_int is None or self.target_dec is not None:
                raise ValueError(
                    f"{self.metric.value} goals require target_int and no target_dec"
                )
        elif self.target_dec is None or self.target_int is not None:
            raise ValueError(
                f"{self.metric.value} goals require target_dec and no target_int"
            )
        return self

    @property
    def target(self) -> float:
        if self.metric in INTEGER_METRICS:
            return float(self.target_int or 0)
        return float(self.target_dec or 0)


class GoalProgress(BaseModel):
    """Derived progress of a goal in its current period."""

    goal_id: str
    period: PeriodBounds
    current_value: float
    target_value: float
    pct: float
    streak_count: int = Field(default=0, ge=0)
    is_met_this_period: bool = False
