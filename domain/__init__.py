"""
Domain layer for the workout progress engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    CatalogExercise,
    CustomExercise,
    ExerciseRef,
    WorkoutSession,
    WorkoutItem,
    WorkoutSet,
    WorkoutDraft,
    PersonalBestRecord,
    RecordKind,
    ActivitySample,
    Goal,
    ForecastSeries,
)

__all__ = [
    "CatalogExercise",
    "CustomExercise",
    "ExerciseRef",
    "WorkoutSession",
    "WorkoutItem",
    "WorkoutSet",
    "WorkoutDraft",
    "PersonalBestRecord",
    "RecordKind",
    "ActivitySample",
    "Goal",
    "ForecastSeries",
]
