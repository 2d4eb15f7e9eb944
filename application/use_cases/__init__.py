"""
Application Use Cases for the workout progress engine.

This package contains application-level use cases that orchestrate core
services and coordinate between ports/adapters. Use cases are the entry
points for business operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models, not API responses

Usage:
    from application.use_cases import ImportWorkoutsUseCase, ReplaceWorkoutItemsUseCase

    import_use_case = ImportWorkoutsUseCase(
        workout_repo=workout_repo,
        resolver=resolver,
        personal_best_service=pb_service,
    )
    result = import_use_case.execute(csv_text, owner_id="user-123")

    edit_use_case = ReplaceWorkoutItemsUseCase(workout_repo, pb_service)
    result = edit_use_case.execute("s-1", "user-123", items=[...])
"""

from application.use_cases.import_workouts import (
    ImportedWorkoutSummary,
    ImportWorkoutsResult,
    ImportWorkoutsUseCase,
)
from application.use_cases.replace_workout_items import (
    ReplaceWorkoutItemsResult,
    ReplaceWorkoutItemsUseCase,
)

__all__ = [
    # ImportWorkouts
    "ImportWorkoutsUseCase",
    "ImportWorkoutsResult",
    "ImportedWorkoutSummary",
    # ReplaceWorkoutItems
    "ReplaceWorkoutItemsUseCase",
    "ReplaceWorkoutItemsResult",
]
