"""
Activity and Goal Repository Interfaces (Ports).

Daily activity samples and the goals measured against them.
"""
from datetime import date
from typing import List, Optional, Protocol

from domain.models import ActivitySample, Goal


class ActivityRepository(Protocol):
    """Abstract interface for daily activity samples."""

    def list_samples(
        self,
        owner_id: str,
        start: date,
        end: date,
    ) -> List[ActivitySample]:
        """
        List an owner's samples with ``start <= date <= end``, oldest first.

        Args:
            owner_id: Owning user ID
            start: Inclusive first day
            end: Inclusive last day

        Returns:
            List of ActivitySample
        """
        ...

    def save_sample(self, sample: ActivitySample) -> ActivitySample:
        """
        Insert or replace the sample for (owner, date).

        Args:
            sample: Sample to store

        Returns:
            The stored sample with its id
        """
        ...


class GoalRepository(Protocol):
    """Abstract interface for activity goals."""

    def list_goals(self, owner_id: str, *, active_only: bool = True) -> List[Goal]:
        """
        List an owner's goals.

        Args:
            owner_id: Owning user ID
            active_only: Skip goals with ``is_active`` false

        Returns:
            List of Goal
        """
        ...

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        """
        Get a goal by ID.

        Args:
            goal_id: Goal ID

        Returns:
            Goal or None if not found
        """
        ...
