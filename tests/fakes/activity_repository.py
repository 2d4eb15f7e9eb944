"""
Fake activity and goal repositories for testing.

This module provides in-memory implementations of ActivityRepository and
GoalRepository for unit testing without database access.
"""
from typing import Optional, List, Dict, Tuple
from datetime import date
import uuid

from domain.models import ActivitySample, Goal


class FakeActivityRepository:
    """In-memory fake implementation of ActivityRepository for testing."""

    def __init__(self):
        """Initialize with empty storage."""
        self._samples: Dict[Tuple[str, date], ActivitySample] = {}
        self.list_calls: List[Tuple[str, date, date]] = []

    def reset(self) -> None:
        """Clear all stored samples."""
        self._samples.clear()
        self.list_calls.clear()

    def seed(self, samples: List[ActivitySample]) -> None:
        for sample in samples:
            self.save_sample(sample)

    # =========================================================================
    # ActivityRepository Protocol Methods
    # =========================================================================

    def list_samples(self, owner_id: str, start: date, end: date) -> List[ActivitySample]:
        self.list_calls.append((owner_id, start, end))
        samples = [
            s for (owner, day), s in self._samples.items()
            if owner == owner_id and start <= day <= end
        ]
        return sorted(samples, key=lambda s: s.date)

    def save_sample(self, sample: ActivitySample) -> ActivitySample:
        stored = sample if sample.id else sample.model_copy(update={"id": str(uuid.uuid4())})
        self._samples[(sample.owner_id, sample.date)] = stored
        return stored


class FakeGoalRepository:
    """In-memory fake implementation of GoalRepository for testing."""

    def __init__(self):
        """Initialize with empty storage."""
        self._goals: Dict[str, Goal] = {}

    def reset(self) -> None:
        """Clear all stored goals."""
        self._goals.clear()

    def seed(self, goals: List[Goal]) -> None:
        for goal in goals:
            self._goals[goal.id] = goal

    # =========================================================================
    # GoalRepository Protocol Methods
    # =========================================================================

    def list_goals(self, owner_id: str, *, active_only: bool = True) -> List[Goal]:
        return [
            g for g in self._goals.values()
            if g.owner_id == owner_id and (g.is_active or not active_only)
        ]

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self._goals.get(goal_id)
