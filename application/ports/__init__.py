"""
Repository Interfaces (Ports) for the workout progress engine.

This package defines abstract interfaces that decouple the core services
from infrastructure (database, external services). Implementations are
provided in the infrastructure layer, and in-memory fakes in tests/fakes.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the core needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import WorkoutRepository, PersonalBestRepository

    class PersonalBestService:
        def __init__(self, workout_repo: WorkoutRepository, pb_repo: PersonalBestRepository):
            self._workout_repo = workout_repo
            self._pb_repo = pb_repo
"""

# Exercises
from application.ports.exercise_catalog_repository import ExerciseCatalogRepository
from application.ports.custom_exercise_repository import CustomExerciseRepository

# Workout persistence
from application.ports.workout_repository import WorkoutRepository

# Personal bests
from application.ports.personal_best_repository import PersonalBestRepository

# Activity and goals
from application.ports.activity_repository import ActivityRepository, GoalRepository

__all__ = [
    # Exercises
    "ExerciseCatalogRepository",
    "CustomExerciseRepository",
    # Workout
    "WorkoutRepository",
    # Personal bests
    "PersonalBestRepository",
    # Activity
    "ActivityRepository",
    "GoalRepository",
]
