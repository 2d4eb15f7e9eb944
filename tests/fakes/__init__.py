"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutRepository, create_workout_repo

    # Direct instantiation
    repo = FakeWorkoutRepository()
    session = repo.create_session(planned_workout)

    # Factory function with pre-populated data
    repo = create_workout_repo(user_id="user1", num_sessions=5)
"""
from typing import Optional, List
from datetime import date, datetime, timedelta

from domain.models import (
    ActivitySample,
    CatalogExercise,
    PlannedItem,
    PlannedSet,
    PlannedWorkout,
)

# Import all fake implementations
from tests.fakes.workout_repository import FakeWorkoutRepository
from tests.fakes.exercises_repository import (
    FakeExerciseCatalogRepository,
    FakeCustomExerciseRepository,
)
from tests.fakes.personal_best_repository import FakePersonalBestRepository
from tests.fakes.activity_repository import FakeActivityRepository, FakeGoalRepository


BENCH_PRESS = CatalogExercise(id="barbell-bench-press", name="Barbell Bench Press", body_part="Chest")


# =============================================================================
# Factory Functions
# =============================================================================


def planned_workout(
    *,
    user_id: str = "test_user",
    day: datetime = datetime(2026, 1, 5, 9, 0),
    exercise: Optional[CatalogExercise] = None,
    sets: Optional[List[tuple]] = None,
    title: Optional[str] = "Test Workout",
) -> PlannedWorkout:
    """
    Build a single-exercise PlannedWorkout.

    Args:
        user_id: Owner of the workout
        day: Session date
        exercise: Exercise for the only item (defaults to bench press)
        sets: ``(weight, reps)`` tuples, numbered from 1

    Returns:
        PlannedWorkout ready for ``create_session``
    """
    sets = sets if sets is not None else [(60.0, 10), (80.0, 5)]
    return PlannedWorkout(
        owner_id=user_id,
        date=day,
        title=title,
        items=[
            PlannedItem(
                exercise=exercise or BENCH_PRESS,
                sets=[
                    PlannedSet(set_number=i + 1, weight=weight, reps=reps)
                    for i, (weight, reps) in enumerate(sets)
                ],
            )
        ],
    )


def create_workout_repo(
    *,
    user_id: str = "test_user",
    num_sessions: int = 0,
    start: datetime = datetime(2026, 1, 5, 9, 0),
) -> FakeWorkoutRepository:
    """
    Create a FakeWorkoutRepository with optional pre-populated sessions.

    Each generated session is one day apart and adds 2.5kg to the top set,
    so bench press progresses steadily.

    Args:
        user_id: User ID for generated sessions
        num_sessions: Number of sample sessions to create
        start: Date of the first session

    Returns:
        Pre-populated FakeWorkoutRepository
    """
    repo = FakeWorkoutRepository()
    for i in range(num_sessions):
        repo.create_session(planned_workout(
            user_id=user_id,
            day=start + timedelta(days=i),
            sets=[(60.0, 10), (80.0 + 2.5 * i, 5)],
            title=f"Test Workout {i + 1}",
        ))
    return repo


def create_activity_repo(
    *,
    user_id: str = "test_user",
    start: date = date(2026, 1, 1),
    steps: Optional[List[int]] = None,
) -> FakeActivityRepository:
    """
    Create a FakeActivityRepository with one sample per day.

    Args:
        user_id: Owner of the samples
        start: Date of the first sample
        steps: Step counts for consecutive days

    Returns:
        Pre-populated FakeActivityRepository
    """
    repo = FakeActivityRepository()
    for i, count in enumerate(steps or []):
        repo.save_sample(ActivitySample(
            owner_id=user_id,
            date=start + timedelta(days=i),
            steps=count,
        ))
    return repo


__all__ = [
    # Fake implementations
    "FakeWorkoutRepository",
    "FakeExerciseCatalogRepository",
    "FakeCustomExerciseRepository",
    "FakePersonalBestRepository",
    "FakeActivityRepository",
    "FakeGoalRepository",
    # Factory functions
    "BENCH_PRESS",
    "planned_workout",
    "create_workout_repo",
    "create_activity_repo",
]
