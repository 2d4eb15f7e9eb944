"""
Workout Repository Interface (Port).

This module defines the abstract interface for workout session persistence.
Implementations may use Supabase, in-memory storage, or other backends.
"""
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from domain.models import (
    ExerciseRef,
    LoggedSet,
    PlannedItem,
    PlannedWorkout,
    WorkoutSession,
)


class WorkoutRepository(Protocol):
    """
    Abstract interface for workout session storage and retrieval.

    A session is written as a whole (session, items, sets). Edits replace
    the whole item list; deletes cascade to items and sets.
    """

    def create_session(self, workout: PlannedWorkout) -> WorkoutSession:
        """
        Persist a new session with all its items and sets.

        Args:
            workout: Validated session content

        Returns:
            The stored WorkoutSession with assigned ids
        """
        ...

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        """
        Get a session by ID.

        Args:
            session_id: Session ID

        Returns:
            WorkoutSession or None if not found
        """
        ...

    def list_sessions(
        self,
        owner_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutSession]:
        """
        List an owner's sessions, oldest first.

        Args:
            owner_id: Owning user ID
            start: Optional inclusive lower bound on session date
            end: Optional inclusive upper bound on session date

        Returns:
            List of WorkoutSession
        """
        ...

    def replace_items(
        self,
        session_id: str,
        items: Sequence[PlannedItem],
        *,
        date: Optional[datetime] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[WorkoutSession]:
        """
        Replace every item of a session, optionally updating its header.

        Args:
            session_id: Session ID
            items: New item list (replaces the old one entirely)
            date: New session date, if changing
            title: New title, if changing
            notes: New notes, if changing

        Returns:
            The updated WorkoutSession, or None if the session does not exist
        """
        ...

    def delete_session(self, session_id: str) -> bool:
        """
        Delete a session with its items and sets.

        Args:
            session_id: Session ID

        Returns:
            True if a session was deleted
        """
        ...

    def list_sets_for_exercises(
        self,
        owner_id: str,
        exercises: Sequence[ExerciseRef],
        *,
        exclude_set_id: Optional[str] = None,
    ) -> List[LoggedSet]:
        """
        Flattened history of every set logged against any of ``exercises``.

        Args:
            owner_id: Owning user ID
            exercises: Exercise references to include
            exclude_set_id: A set to leave out (the set being evaluated)

        Returns:
            List of LoggedSet ordered by session date, then set number
        """
        ...
