"""
Exercise Catalog Repository Interface (Port).

This module defines the abstract interface for reading the shared exercise
catalog. Implementations may use Supabase or other backends.
"""
from typing import List, Optional, Protocol

from domain.models import CatalogExercise


class ExerciseCatalogRepository(Protocol):
    """
    Abstract interface for querying catalog exercises.

    Used by the ExerciseResolver for the first two resolution tiers. Only
    active catalog entries are ever returned.
    """

    def get_all(self, limit: int = 500) -> List[CatalogExercise]:
        """
        Get active catalog exercises.

        Args:
            limit: Maximum number of exercises to return

        Returns:
            List of CatalogExercise
        """
        ...

    def get_by_id(self, exercise_id: str) -> Optional[CatalogExercise]:
        """
        Get a catalog exercise by ID.

        Args:
            exercise_id: Catalog exercise ID

        Returns:
            CatalogExercise or None if not found
        """
        ...

    def find_by_exact_name(self, name: str) -> Optional[CatalogExercise]:
        """
        Find a catalog exercise by exact name match (case-insensitive).

        Args:
            name: The exercise name to search for

        Returns:
            CatalogExercise or None if not found
        """
        ...

    def search_by_name_fragment(
        self, fragment: str, limit: int = 10
    ) -> List[CatalogExercise]:
        """
        Find catalog exercises whose name contains ``fragment`` (case-insensitive).

        Args:
            fragment: Substring to look for
            limit: Maximum results to return

        Returns:
            Matching exercises, in no guaranteed order
        """
        ...
