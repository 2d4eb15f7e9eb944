"""
Converters: Database row format <-> domain models.

Provides bidirectional conversion between Supabase rows and the domain
models used by the core services.

Database schema:
- exercises: id, name, body_part, is_active
- custom_exercises: id, user_id, name, name_key, body_part, is_active
  (unique on user_id, name_key; name_key is the lower-cased name)
- workout_sessions: id, user_id, date, title, notes
- workout_items: id, session_id, order_index, exercise_id, custom_id
  (exactly one of exercise_id / custom_id is set)
- workout_sets: id, item_id, set_number, weight_kg, reps, rpe, notes
- personal_bests: id, user_id, exercise_id, custom_id, type, weight_kg,
  reps, bucket, lineage, value, set_id, created_at
  (unique on user_id, lineage; see domain.models.lineage_key)
- activity_entries: id, user_id, date, steps, distance_km, calories,
  heart_rate_avg, workouts
- goals: id, user_id, type, period, target_int, target_dec, start_date,
  is_active
"""

from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from domain.models import (
    ActivitySample,
    CatalogExercise,
    CustomExercise,
    Goal,
    LoggedSet,
    PersonalBestCandidate,
    PersonalBestRecord,
    PlannedSet,
    PlannedWorkout,
    WorkoutItem,
    WorkoutSession,
    WorkoutSet,
    lineage_key,
)

AnyExerciseRef = Union[CatalogExercise, CustomExercise]


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse datetime from various formats."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _parse_date(value: Any) -> Optional[date]:
    """Parse a date column, accepting full timestamps too."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = _parse_datetime(value)
    if parsed is not None:
        return parsed.date()
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _to_float(value: Any) -> Optional[float]:
    """Numeric columns come back as strings, ints or floats."""
    if value is None or value == "":
        return None
    return float(value)


# =============================================================================
# Exercises
# =============================================================================


def row_to_catalog_exercise(row: Dict[str, Any]) -> CatalogExercise:
    return CatalogExercise(
        id=str(row["id"]),
        name=row["name"],
        body_part=row.get("body_part"),
    )


def row_to_custom_exercise(row: Dict[str, Any]) -> CustomExercise:
    return CustomExercise(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        name=row["name"],
        body_part=row.get("body_part"),
    )


def exercise_ref_from_row(row: Dict[str, Any]) -> AnyExerciseRef:
    """
    Build the exercise reference of a row that embeds its exercise.

    Works for workout_items and personal_bests rows selected with
    ``exercises(...)`` and ``custom_exercises(...)`` embeds.

    Raises:
        ValueError: neither or both references are set
    """
    catalog = row.get("exercises")
    custom = row.get("custom_exercises")
    if bool(row.get("exercise_id")) == bool(row.get("custom_id")):
        raise ValueError(
            f"Row {row.get('id')} must reference exactly one of exercise_id/custom_id"
        )
    if row.get("exercise_id"):
        if not catalog:
            raise ValueError(f"Row {row.get('id')} is missing its embedded exercise")
        return row_to_catalog_exercise(catalog)
    if not custom:
        raise ValueError(f"Row {row.get('id')} is missing its embedded custom exercise")
    return row_to_custom_exercise(custom)


def exercise_ref_columns(exercise: AnyExerciseRef) -> Dict[str, Optional[str]]:
    """The exercise_id / custom_id column pair for a reference."""
    if exercise.kind == "catalog":
        return {"exercise_id": exercise.id, "custom_id": None}
    return {"exercise_id": None, "custom_id": exercise.id}


# =============================================================================
# Workouts
# =============================================================================


def planned_workout_to_db_row(workout: PlannedWorkout) -> Dict[str, Any]:
    return {
        "user_id": workout.owner_id,
        "date": workout.date.isoformat(),
        "title": workout.title,
        "notes": workout.notes,
    }


def planned_set_to_db_row(planned: PlannedSet, item_id: str) -> Dict[str, Any]:
    return {
        "item_id": item_id,
        "set_number": planned.set_number,
        "weight_kg": planned.weight,
        "reps": planned.reps,
        "rpe": planned.rpe,
        "notes": planned.notes,
    }


def db_row_to_workout_set(row: Dict[str, Any]) -> WorkoutSet:
    return WorkoutSet(
        id=str(row["id"]),
        set_number=row["set_number"],
        weight=_to_float(row.get("weight_kg")),
        reps=row["reps"],
        rpe=_to_float(row.get("rpe")),
        notes=row.get("notes"),
    )


def db_row_to_workout_session(row: Dict[str, Any]) -> WorkoutSession:
    """
    Convert a workout_sessions row with embedded items and sets.

    Items are ordered by order_index and sets by set_number regardless of
    the order the database returned them in.
    """
    items = []
    for item_row in sorted(row.get("workout_items") or [], key=lambda r: r.get("order_index", 0)):
        set_rows = sorted(item_row.get("workout_sets") or [], key=lambda r: r["set_number"])
        items.append(WorkoutItem(
            id=str(item_row["id"]),
            order_index=item_row.get("order_index", 0),
            exercise=exercise_ref_from_row(item_row),
            sets=[db_row_to_workout_set(s) for s in set_rows],
        ))

    return WorkoutSession(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        date=_parse_datetime(row["date"]),
        title=row.get("title"),
        notes=row.get("notes"),
        items=items,
    )


def db_row_to_logged_set(row: Dict[str, Any]) -> LoggedSet:
    """
    Convert a workout_sets row embedding its item and session.

    Expects ``workout_items(session_id, exercise_id, custom_id, exercises(...),
    custom_exercises(...), workout_sessions(id, user_id, date, title))``.
    """
    item = row["workout_items"]
    session = item["workout_sessions"]
    return LoggedSet(
        set_id=str(row["id"]),
        session_id=str(session["id"]),
        session_date=_parse_datetime(session["date"]),
        session_title=session.get("title"),
        exercise=exercise_ref_from_row(item),
        set_number=row["set_number"],
        weight=_to_float(row.get("weight_kg")),
        reps=row["reps"],
        rpe=_to_float(row.get("rpe")),
    )


# =============================================================================
# Personal bests
# =============================================================================


def candidate_to_db_row(
    owner_id: str,
    exercise: AnyExerciseRef,
    candidate: PersonalBestCandidate,
) -> Dict[str, Any]:
    row = {
        "user_id": owner_id,
        "type": candidate.kind.value,
        "weight_kg": candidate.weight,
        "reps": candidate.reps,
        "bucket": candidate.bucket,
        "lineage": lineage_key(exercise, candidate.kind, candidate.bucket),
        "value": candidate.value,
        "set_id": candidate.set_id,
    }
    row.update(exercise_ref_columns(exercise))
    return row


def db_row_to_personal_best(row: Dict[str, Any]) -> PersonalBestRecord:
    return PersonalBestRecord(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        exercise=exercise_ref_from_row(row),
        kind=row["type"],
        weight=_to_float(row.get("weight_kg")),
        reps=row.get("reps"),
        bucket=row.get("bucket"),
        value=_to_float(row["value"]),
        set_id=str(row["set_id"]),
        recorded_at=_parse_datetime(row.get("created_at")) or datetime.now(),
    )


# =============================================================================
# Activity and goals
# =============================================================================


def db_row_to_activity_sample(row: Dict[str, Any]) -> ActivitySample:
    return ActivitySample(
        id=str(row["id"]) if row.get("id") is not None else None,
        owner_id=str(row["user_id"]),
        date=_parse_date(row["date"]),
        steps=row.get("steps") or 0,
        distance_km=_to_float(row.get("distance_km")) or 0.0,
        calories=_to_float(row.get("calories")) or 0.0,
        heart_rate_avg=_to_float(row.get("heart_rate_avg")),
        workouts=row.get("workouts") or 0,
    )


def activity_sample_to_db_row(sample: ActivitySample) -> Dict[str, Any]:
    row = {
        "user_id": sample.owner_id,
        "date": sample.date.isoformat(),
        "steps": sample.steps,
        "distance_km": sample.distance_km,
        "calories": sample.calories,
        "heart_rate_avg": sample.heart_rate_avg,
        "workouts": sample.workouts,
    }
    if sample.id:
        row["id"] = sample.id
    return row


def db_row_to_goal(row: Dict[str, Any]) -> Goal:
    return Goal(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        metric=row["type"],
        period=row["period"],
        target_int=row.get("target_int"),
        target_dec=_to_float(row.get("target_dec")),
        start_date=_parse_date(row.get("start_date")),
        is_active=row.get("is_active", True),
    )
