"""
Supabase implementation of WorkoutRepository.

A session is spread over three tables (workout_sessions, workout_items,
workout_sets). Items and sets are deleted by ON DELETE CASCADE when their
session is removed.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any, Sequence

from supabase import Client

from application.exceptions import RepositoryError
from domain.converters import (
    db_row_to_logged_set,
    db_row_to_workout_session,
    db_row_to_workout_set,
    exercise_ref_columns,
    planned_set_to_db_row,
    planned_workout_to_db_row,
)
from domain.models import (
    ExerciseRef,
    LoggedSet,
    PlannedItem,
    PlannedWorkout,
    WorkoutItem,
    WorkoutSession,
)

logger = logging.getLogger(__name__)

EXERCISE_EMBEDS = (
    "exercises(id, name, body_part), "
    "custom_exercises(id, user_id, name, body_part)"
)

SESSION_SELECT = f"*, workout_items(*, {EXERCISE_EMBEDS}, workout_sets(*))"

LOGGED_SET_SELECT = (
    "*, workout_items!inner(session_id, exercise_id, custom_id, "
    f"{EXERCISE_EMBEDS}, "
    "workout_sessions!inner(id, user_id, date, title))"
)


class SupabaseWorkoutRepository:
    """
    Supabase implementation of WorkoutRepository protocol.

    Writes are not wrapped in a transaction: a failure part-way through an
    insert leaves the rows written so far and raises RepositoryError.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    # =========================================================================
    # Writes
    # =========================================================================

    def _insert_items(self, session_id: str, items: Sequence[PlannedItem]) -> List[WorkoutItem]:
        stored: List[WorkoutItem] = []
        for idx, planned in enumerate(items):
            item_record: Dict[str, Any] = {"session_id": session_id, "order_index": idx}
            item_record.update(exercise_ref_columns(planned.exercise))

            item_result = self._client.table("workout_items").insert(item_record).execute()
            if not item_result.data:
                raise RepositoryError("Workout item insert returned empty result")
            item_id = str(item_result.data[0]["id"])

            set_rows = [planned_set_to_db_row(s, item_id) for s in planned.sets]
            set_result = self._client.table("workout_sets").insert(set_rows).execute()

            stored.append(WorkoutItem(
                id=item_id,
                order_index=idx,
                exercise=planned.exercise,
                sets=sorted(
                    (db_row_to_workout_set(row) for row in set_result.data or []),
                    key=lambda s: s.set_number,
                ),
            ))
        return stored

    def create_session(self, workout: PlannedWorkout) -> WorkoutSession:
        """Insert a session with its items and sets."""
        try:
            result = self._client.table("workout_sessions") \
                .insert(planned_workout_to_db_row(workout)) \
                .execute()
            if not result.data:
                logger.error("Failed to insert workout session: empty result")
                raise RepositoryError("Database insert returned empty result")

            row = result.data[0]
            items = self._insert_items(str(row["id"]), workout.items)
        except RepositoryError:
            raise
        except Exception as e:
            logger.exception(f"Error creating workout session for {workout.owner_id}")
            raise RepositoryError("Failed to create workout session") from e

        return WorkoutSession(
            id=str(row["id"]),
            owner_id=workout.owner_id,
            date=workout.date,
            title=workout.title,
            notes=workout.notes,
            items=items,
        )

    def replace_items(
        self,
        session_id: str,
        items: Sequence[PlannedItem],
        *,
        date: Optional[datetime] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[WorkoutSession]:
        """Delete every item of a session and insert ``items`` in their place."""
        if self.get_session(session_id) is None:
            return None

        header: Dict[str, Any] = {}
        if date is not None:
            header["date"] = date.isoformat()
        if title is not None:
            header["title"] = title
        if notes is not None:
            header["notes"] = notes

        try:
            if header:
                self._client.table("workout_sessions") \
                    .update(header) \
                    .eq("id", session_id) \
                    .execute()

            self._client.table("workout_items") \
                .delete() \
                .eq("session_id", session_id) \
                .execute()

            self._insert_items(session_id, items)
        except RepositoryError:
            raise
        except Exception as e:
            logger.exception(f"Error replacing items of workout {session_id}")
            raise RepositoryError(
                f"Failed to replace items of workout {session_id}",
                details={"session_id": session_id},
            ) from e

        return self.get_session(session_id)

    def delete_session(self, session_id: str) -> bool:
        try:
            result = self._client.table("workout_sessions") \
                .delete() \
                .eq("id", session_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error deleting workout {session_id}")
            raise RepositoryError(f"Failed to delete workout {session_id}") from e

        return bool(result.data)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        try:
            result = self._client.table("workout_sessions") \
                .select(SESSION_SELECT) \
                .eq("id", session_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching workout {session_id}")
            raise RepositoryError(f"Failed to fetch workout {session_id}") from e

        if not result.data:
            return None
        return db_row_to_workout_session(result.data[0])

    def list_sessions(
        self,
        owner_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutSession]:
        try:
            query = self._client.table("workout_sessions") \
                .select(SESSION_SELECT) \
                .eq("user_id", owner_id)
            if start is not None:
                query = query.gte("date", start.isoformat())
            if end is not None:
                query = query.lte("date", end.isoformat())
            result = query.order("date").execute()
        except Exception as e:
            logger.exception(f"Error listing workouts for {owner_id}")
            raise RepositoryError("Failed to list workouts") from e

        return [db_row_to_workout_session(row) for row in result.data or []]

    def list_sets_for_exercises(
        self,
        owner_id: str,
        exercises: Sequence[ExerciseRef],
        *,
        exclude_set_id: Optional[str] = None,
    ) -> List[LoggedSet]:
        """
        Every set the owner logged against any of ``exercises``.

        Catalog and custom references are filtered on different columns, so
        they are fetched with one query each.
        """
        columns = {
            "exercise_id": [e.id for e in exercises if e.kind == "catalog"],
            "custom_id": [e.id for e in exercises if e.kind == "custom"],
        }

        rows: List[Dict[str, Any]] = []
        for column, ids in columns.items():
            if not ids:
                continue
            try:
                query = self._client.table("workout_sets") \
                    .select(LOGGED_SET_SELECT) \
                    .eq("workout_items.workout_sessions.user_id", owner_id) \
                    .in_(f"workout_items.{column}", ids)
                if exclude_set_id is not None:
                    query = query.neq("id", exclude_set_id)
                result = query.execute()
            except Exception as e:
                logger.exception(f"Error fetching set history for {owner_id}")
                raise RepositoryError("Failed to fetch set history") from e
            rows.extend(result.data or [])

        logged = [db_row_to_logged_set(row) for row in rows]
        logged.sort(key=lambda s: (s.session_date, s.session_id, s.set_number))
        return logged
