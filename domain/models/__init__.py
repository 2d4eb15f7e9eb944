"""
Domain models for the workout progress engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core business concepts:
- ExerciseRef: a catalog exercise or an owner's custom exercise
- WorkoutSession: the aggregate root containing items and sets
- WorkoutDraft: parser output, before exercise names are resolved
- PersonalBestRecord: the live best value per record lineage
- ActivitySample / Goal: inputs to goal progress and streaks
- ForecastSeries: fitted history plus a short flat forecast

Usage:
    >>> from domain.models import WorkoutSession, WorkoutItem, WorkoutSet, CatalogExercise

    >>> session = WorkoutSession(
    ...     id="s1",
    ...     owner_id="user-1",
    ...     date="2026-01-28T14:12:00",
    ...     items=[
    ...         WorkoutItem(
    ...             id="i1",
    ...             exercise=CatalogExercise(id="bench", name="Barbell Bench Press"),
    ...             sets=[WorkoutSet(id="set1", set_number=1, weight=100, reps=5)],
    ...         )
    ...     ],
    ... )

    >>> # Serialize to JSON
    >>> json_str = session.model_dump_json(indent=2)
"""

from domain.models.activity import (
    ActivityAggregate,
    ActivitySample,
    Goal,
    GoalMetric,
    GoalPeriod,
    GoalProgress,
    PeriodBounds,
)
from domain.models.exercise import CatalogExercise, CustomExercise, ExerciseRef, ref_key
from domain.models.forecast import ForecastMethod, ForecastPoint, ForecastSeries
from domain.models.personal_best import (
    PersonalBestCandidate,
    PersonalBestRecord,
    RecordKind,
    lineage_key,
)
from domain.models.workout import (
    DraftItem,
    DraftSet,
    ImportedSetRow,
    LoggedSet,
    PlannedItem,
    PlannedSet,
    PlannedWorkout,
    WorkoutDraft,
    WorkoutItem,
    WorkoutSession,
    WorkoutSet,
)

__all__ = [
    # Exercises
    "CatalogExercise",
    "CustomExercise",
    "ExerciseRef",
    "ref_key",
    # Workouts
    "ImportedSetRow",
    "DraftSet",
    "DraftItem",
    "WorkoutDraft",
    "WorkoutSet",
    "WorkoutItem",
    "WorkoutSession",
    "LoggedSet",
    "PlannedSet",
    "PlannedItem",
    "PlannedWorkout",
    # Personal bests
    "RecordKind",
    "PersonalBestCandidate",
    "PersonalBestRecord",
    "lineage_key",
    # Activity and goals
    "ActivitySample",
    "ActivityAggregate",
    "Goal",
    "GoalMetric",
    "GoalPeriod",
    "GoalProgress",
    "PeriodBounds",
    # Forecast
    "ForecastMethod",
    "ForecastPoint",
    "ForecastSeries",
]
