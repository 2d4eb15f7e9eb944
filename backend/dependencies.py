"""
Dependency providers for the workout progress engine.

This module wires Settings, the Supabase client, repositories, services and
use cases together. Providers return interface types (Protocols) so callers
and tests can substitute in-memory implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository providers create new instances per call
- Service builders take their repositories explicitly and read tunables
  from Settings, so services themselves never touch the environment

Usage:
    from backend.dependencies import get_import_workouts_use_case

    use_case = get_import_workouts_use_case()
    result = use_case.execute(csv_text, owner_id="user-123")

Testing:
    from tests.fakes import FakeWorkoutRepository, FakePersonalBestRepository

    service = build_personal_best_service(
        FakeWorkoutRepository(), FakePersonalBestRepository(), settings=test_settings
    )
"""

from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import (
    ActivityRepository,
    CustomExerciseRepository,
    ExerciseCatalogRepository,
    GoalRepository,
    PersonalBestRepository,
    WorkoutRepository,
)

# Concrete implementations
from infrastructure import (
    SupabaseActivityRepository,
    SupabaseCustomExerciseRepository,
    SupabaseExerciseCatalogRepository,
    SupabaseGoalRepository,
    SupabasePersonalBestRepository,
    SupabaseWorkoutRepository,
)

from application.exceptions import RepositoryError
from application.use_cases import ImportWorkoutsUseCase, ReplaceWorkoutItemsUseCase
from backend.core.exercise_resolver import ExerciseResolver
from backend.core.personal_best_service import PersonalBestService
from backend.core.progress_aggregator import ProgressService
from backend.core.progression_service import ProgressionService
from backend.settings import Settings, get_settings


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client, raising if not configured.

    Raises:
        RepositoryError: Supabase credentials are missing
    """
    client = get_supabase_client()
    if client is None:
        raise RepositoryError(
            "Database not available. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_exercise_catalog_repo() -> ExerciseCatalogRepository:
    return SupabaseExerciseCatalogRepository(get_supabase_client_required())


def get_custom_exercise_repo() -> CustomExerciseRepository:
    return SupabaseCustomExerciseRepository(get_supabase_client_required())


def get_workout_repo() -> WorkoutRepository:
    return SupabaseWorkoutRepository(get_supabase_client_required())


def get_personal_best_repo() -> PersonalBestRepository:
    return SupabasePersonalBestRepository(get_supabase_client_required())


def get_activity_repo() -> ActivityRepository:
    return SupabaseActivityRepository(get_supabase_client_required())


def get_goal_repo() -> GoalRepository:
    return SupabaseGoalRepository(get_supabase_client_required())


# =============================================================================
# Service Builders
# =============================================================================


def build_exercise_resolver(
    catalog_repo: ExerciseCatalogRepository,
    custom_repo: CustomExerciseRepository,
    settings: Optional[Settings] = None,
) -> ExerciseResolver:
    settings = settings or get_settings()
    return ExerciseResolver(
        catalog_repo,
        custom_repo,
        unknown_exercise_name=settings.unknown_exercise_name,
    )


def build_personal_best_service(
    workout_repo: WorkoutRepository,
    personal_best_repo: PersonalBestRepository,
    settings: Optional[Settings] = None,
) -> PersonalBestService:
    settings = settings or get_settings()
    return PersonalBestService(
        workout_repo,
        personal_best_repo,
        weight_tolerance=settings.pb_weight_tolerance,
    )


def build_progress_service(
    activity_repo: ActivityRepository,
    goal_repo: GoalRepository,
    settings: Optional[Settings] = None,
) -> ProgressService:
    settings = settings or get_settings()
    return ProgressService(
        activity_repo,
        goal_repo,
        streak_lookback_periods=settings.streak_lookback_periods,
        forecast_window=settings.forecast_window,
        forecast_alpha=settings.forecast_alpha,
        forecast_band_k=settings.forecast_band_k,
        forecast_horizon_days=settings.forecast_horizon_days,
        forecast_lookback_days=settings.forecast_lookback_days,
    )


# =============================================================================
# Supabase-backed Providers
# =============================================================================


def get_personal_best_service() -> PersonalBestService:
    return build_personal_best_service(get_workout_repo(), get_personal_best_repo())


def get_progress_service() -> ProgressService:
    return build_progress_service(get_activity_repo(), get_goal_repo())


def get_progression_service() -> ProgressionService:
    catalog_repo = get_exercise_catalog_repo()
    custom_repo = get_custom_exercise_repo()
    return ProgressionService(
        workout_repo=get_workout_repo(),
        personal_best_repo=get_personal_best_repo(),
        catalog_repo=catalog_repo,
        custom_repo=custom_repo,
        resolver=build_exercise_resolver(catalog_repo, custom_repo),
    )


def get_import_workouts_use_case() -> ImportWorkoutsUseCase:
    settings = get_settings()
    workout_repo = get_workout_repo()
    return ImportWorkoutsUseCase(
        workout_repo=workout_repo,
        resolver=build_exercise_resolver(
            get_exercise_catalog_repo(), get_custom_exercise_repo(), settings
        ),
        personal_best_service=build_personal_best_service(
            workout_repo, get_personal_best_repo(), settings
        ),
        unknown_exercise_name=settings.unknown_exercise_name,
    )


def get_replace_workout_items_use_case() -> ReplaceWorkoutItemsUseCase:
    workout_repo = get_workout_repo()
    return ReplaceWorkoutItemsUseCase(
        workout_repo,
        build_personal_best_service(workout_repo, get_personal_best_repo()),
    )
