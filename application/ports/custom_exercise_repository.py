"""
Custom Exercise Repository Interface (Port).

Custom exercises are owned by a single user and created on demand when an
imported name has no catalog match.
"""
from typing import List, Optional, Protocol

from domain.models import CustomExercise


class CustomExerciseRepository(Protocol):
    """
    Abstract interface for an owner's custom exercises.

    Names are unique per owner, compared case-insensitively.
    """

    def get_by_id(self, exercise_id: str) -> Optional[CustomExercise]:
        """
        Get a custom exercise by ID.

        Args:
            exercise_id: Custom exercise ID

        Returns:
            CustomExercise or None if not found
        """
        ...

    def find_by_name(self, owner_id: str, name: str) -> Optional[CustomExercise]:
        """
        Find an owner's custom exercise by exact name (case-insensitive).

        Args:
            owner_id: Owning user ID
            name: Exercise name

        Returns:
            CustomExercise or None if not found
        """
        ...

    def create(
        self,
        owner_id: str,
        name: str,
        body_part: Optional[str] = None,
    ) -> CustomExercise:
        """
        Create a custom exercise for an owner.

        Idempotent per (owner, case-insensitive name): if the name already
        exists, that exercise is returned and nothing is written.

        Args:
            owner_id: Owning user ID
            name: Exercise name, stored as given
            body_part: Optional body part category

        Returns:
            The created (or already existing) CustomExercise
        """
        ...

    def list_for_owner(self, owner_id: str) -> List[CustomExercise]:
        """
        List every custom exercise an owner has.

        Args:
            owner_id: Owning user ID

        Returns:
            List of CustomExercise ordered by name
        """
        ...
