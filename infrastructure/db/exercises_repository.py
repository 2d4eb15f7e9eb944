"""
Supabase implementation of ExerciseCatalogRepository.

This module provides the concrete Supabase implementation for querying the
shared exercises table. Only rows with ``is_active`` set are visible.
"""
import logging
import time
from typing import Optional, List, Dict, Any

from supabase import Client

from application.exceptions import RepositoryError
from domain.converters import row_to_catalog_exercise
from domain.models import CatalogExercise

logger = logging.getLogger(__name__)

# Cache TTL in seconds (5 minutes)
CACHE_TTL_SECONDS = 300


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SupabaseExerciseCatalogRepository:
    """
    Supabase implementation of ExerciseCatalogRepository protocol.

    The full catalog is cached for CACHE_TTL_SECONDS since cross-matching
    reads it on every analytics query.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client
        self._all_cache: Optional[List[CatalogExercise]] = None
        self._all_cache_limit = 0
        self._all_cache_loaded_at = 0.0

    def _active(self):
        return self._client.table("exercises").select("*").eq("is_active", True)

    def clear_cache(self) -> None:
        """Clear the catalog cache."""
        self._all_cache = None

    def get_all(self, limit: int = 500) -> List[CatalogExercise]:
        """
        Get active catalog exercises.

        Args:
            limit: Maximum number of exercises to return

        Returns:
            List of CatalogExercise
        """
        fresh = time.monotonic() - self._all_cache_loaded_at < CACHE_TTL_SECONDS
        if self._all_cache is not None and fresh and self._all_cache_limit >= limit:
            return self._all_cache[:limit]

        try:
            result = self._active().order("name").limit(limit).execute()
        except Exception as e:
            logger.exception("Error fetching all exercises")
            raise RepositoryError("Failed to fetch exercises") from e

        exercises = [row_to_catalog_exercise(row) for row in result.data or []]
        self._all_cache = exercises
        self._all_cache_limit = limit
        self._all_cache_loaded_at = time.monotonic()
        logger.info(f"Loaded {len(exercises)} exercises into cache")
        return exercises

    def get_by_id(self, exercise_id: str) -> Optional[CatalogExercise]:
        """
        Get a catalog exercise by ID.

        Args:
            exercise_id: Catalog exercise ID

        Returns:
            CatalogExercise or None if not found
        """
        try:
            result = self._active().eq("id", exercise_id).execute()
        except Exception as e:
            logger.exception(f"Error fetching exercise by id {exercise_id}")
            raise RepositoryError(
                f"Failed to fetch exercise {exercise_id}", details={"exercise_id": exercise_id}
            ) from e

        if result.data:
            return row_to_catalog_exercise(result.data[0])
        return None

    def find_by_exact_name(self, name: str) -> Optional[CatalogExercise]:
        """
        Find a catalog exercise by exact name match (case-insensitive).

        Args:
            name: The exercise name to search for

        Returns:
            CatalogExercise or None if not found
        """
        try:
            result = self._active().ilike("name", escape_like(name)).execute()
        except Exception as e:
            logger.exception(f"Error finding exercise by name {name}")
            raise RepositoryError(f"Failed to find exercise '{name}'") from e

        for row in result.data or []:
            if row.get("name", "").lower() == name.lower():
                return row_to_catalog_exercise(row)
        return None

    def search_by_name_fragment(self, fragment: str, limit: int = 10) -> List[CatalogExercise]:
        """
        Find catalog exercises whose name contains ``fragment`` (ILIKE).

        Args:
            fragment: Substring to look for
            limit: Maximum results to return

        Returns:
            List of matching exercises
        """
        pattern = f"%{escape_like(fragment)}%"
        try:
            result = self._active().ilike("name", pattern).limit(limit).execute()
        except Exception as e:
            logger.exception(f"Error searching exercises by fragment {fragment}")
            raise RepositoryError(f"Failed to search exercises for '{fragment}'") from e

        return [row_to_catalog_exercise(row) for row in result.data or []]
