"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository
interfaces defined in application.ports. These implementations are injected
into services and use cases by backend/dependencies.py.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseExerciseCatalogRepository,
        SupabaseCustomExerciseRepository,
        SupabaseWorkoutRepository,
        SupabasePersonalBestRepository,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    catalog_repo = SupabaseExerciseCatalogRepository(client)
    workout_repo = SupabaseWorkoutRepository(client)
"""

from infrastructure.db.exercises_repository import SupabaseExerciseCatalogRepository
from infrastructure.db.custom_exercise_repository import SupabaseCustomExerciseRepository
from infrastructure.db.workout_repository import SupabaseWorkoutRepository
from infrastructure.db.personal_best_repository import SupabasePersonalBestRepository
from infrastructure.db.activity_repository import (
    SupabaseActivityRepository,
    SupabaseGoalRepository,
)

__all__ = [
    # Exercises
    "SupabaseExerciseCatalogRepository",
    "SupabaseCustomExerciseRepository",

    # Workout persistence
    "SupabaseWorkoutRepository",

    # Personal bests
    "SupabasePersonalBestRepository",

    # Activity and goals
    "SupabaseActivityRepository",
    "SupabaseGoalRepository",
]
