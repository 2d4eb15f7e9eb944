"""
Infrastructure Layer for the workout progress engine.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    SupabaseExerciseCatalogRepository,
    SupabaseCustomExerciseRepository,
    SupabaseWorkoutRepository,
    SupabasePersonalBestRepository,
    SupabaseActivityRepository,
    SupabaseGoalRepository,
)

__all__ = [
    "SupabaseExerciseCatalogRepository",
    "SupabaseCustomExerciseRepository",
    "SupabaseWorkoutRepository",
    "SupabasePersonalBestRepository",
    "SupabaseActivityRepository",
    "SupabaseGoalRepository",
]
