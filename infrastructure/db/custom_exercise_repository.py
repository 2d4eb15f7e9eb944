"""
Supabase implementation of CustomExerciseRepository.

Custom exercises live in the custom_exercises table, scoped by user_id and
unique on (user_id, name_key) where name_key is the lower-cased name.
"""
import logging
from typing import Optional, List

from supabase import Client

from application.exceptions import RepositoryError
from domain.converters import row_to_custom_exercise
from domain.models import CustomExercise
from infrastructure.db.exercises_repository import escape_like

logger = logging.getLogger(__name__)

NAME_CONFLICT = "user_id,name_key"


class SupabaseCustomExerciseRepository:
    """Supabase implementation of CustomExerciseRepository protocol."""

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def get_by_id(self, exercise_id: str) -> Optional[CustomExercise]:
        try:
            result = self._client.table("custom_exercises") \
                .select("*") \
                .eq("id", exercise_id) \
                .eq("is_active", True) \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching custom exercise {exercise_id}")
            raise RepositoryError(f"Failed to fetch custom exercise {exercise_id}") from e

        if result.data:
            return row_to_custom_exercise(result.data[0])
        return None

    def find_by_name(self, owner_id: str, name: str) -> Optional[CustomExercise]:
        try:
            result = self._client.table("custom_exercises") \
                .select("*") \
                .eq("user_id", owner_id) \
                .eq("is_active", True) \
                .ilike("name", escape_like(name)) \
                .execute()
        except Exception as e:
            logger.exception(f"Error finding custom exercise '{name}' for {owner_id}")
            raise RepositoryError(f"Failed to find custom exercise '{name}'") from e

        for row in result.data or []:
            if row.get("name", "").lower() == name.lower():
                return row_to_custom_exercise(row)
        return None

    def create(
        self,
        owner_id: str,
        name: str,
        body_part: Optional[str] = None,
    ) -> CustomExercise:
        record = {
            "user_id": owner_id,
            "name": name,
            "name_key": name.lower(),
            "body_part": body_part,
            "is_active": True,
        }
        try:
            result = self._client.table("custom_exercises") \
                .upsert(record, on_conflict=NAME_CONFLICT, ignore_duplicates=True) \
                .execute()
        except Exception as e:
            logger.exception(f"Error creating custom exercise '{name}' for {owner_id}")
            raise RepositoryError(f"Failed to create custom exercise '{name}'") from e

        if result.data:
            return row_to_custom_exercise(result.data[0])

        # Conflict: another writer created the same name first.
        existing = self.find_by_name(owner_id, name)
        if existing is None:
            logger.error("Failed to insert custom exercise: empty result")
            raise RepositoryError("Database insert returned empty result")
        logger.debug(f"Custom exercise '{name}' already existed for {owner_id}")
        return existing

    def list_for_owner(self, owner_id: str) -> List[CustomExercise]:
        try:
            result = self._client.table("custom_exercises") \
                .select("*") \
                .eq("user_id", owner_id) \
                .eq("is_active", True) \
                .order("name") \
                .execute()
        except Exception as e:
            logger.exception(f"Error listing custom exercises for {owner_id}")
            raise RepositoryError("Failed to list custom exercises") from e

        return [row_to_custom_exercise(row) for row in result.data or []]
