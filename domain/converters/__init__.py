"""
Domain converters between Supabase rows and domain models.

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import db_row_to_workout_session, db_row_to_goal

    >>> session = db_row_to_workout_session(row)
    >>> goal = db_row_to_goal(goal_row)
"""

from domain.converters.db_converters import (
    activity_sample_to_db_row,
    candidate_to_db_row,
    db_row_to_activity_sample,
    db_row_to_goal,
    db_row_to_logged_set,
    db_row_to_personal_best,
    db_row_to_workout_session,
    db_row_to_workout_set,
    exercise_ref_columns,
    exercise_ref_from_row,
    planned_set_to_db_row,
    planned_workout_to_db_row,
    row_to_catalog_exercise,
    row_to_custom_exercise,
)

__all__ = [
    # Exercises
    "row_to_catalog_exercise",
    "row_to_custom_exercise",
    "exercise_ref_from_row",
    "exercise_ref_columns",
    # Workouts
    "planned_workout_to_db_row",
    "planned_set_to_db_row",
    "db_row_to_workout_set",
    "db_row_to_workout_session",
    "db_row_to_logged_set",
    # Personal bests
    "candidate_to_db_row",
    "db_row_to_personal_best",
    # Activity and goals
    "db_row_to_activity_sample",
    "activity_sample_to_db_row",
    "db_row_to_goal",
]
