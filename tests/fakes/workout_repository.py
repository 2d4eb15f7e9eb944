"""
Fake Workout Repository for testing.

This module provides an in-memory implementation of WorkoutRepository
for fast, isolated testing without database dependencies.
"""
from typing import Optional, List, Dict, Sequence
from datetime import datetime
import uuid

from domain.models import (
    ExerciseRef,
    LoggedSet,
    PlannedItem,
    PlannedWorkout,
    WorkoutItem,
    WorkoutSession,
    WorkoutSet,
    ref_key,
)


def _store_items(items: Sequence[PlannedItem]) -> List[WorkoutItem]:
    return [
        WorkoutItem(
            id=str(uuid.uuid4()),
            order_index=idx,
            exercise=planned.exercise,
            sets=[
                WorkoutSet(id=str(uuid.uuid4()), **planned_set.model_dump())
                for planned_set in planned.sets
            ],
        )
        for idx, planned in enumerate(items)
    ]


class FakeWorkoutRepository:
    """
    In-memory fake implementation of WorkoutRepository for testing.

    Stores sessions in a dict keyed by session ID. Supports seeding with
    test data and resets between tests.

    Usage:
        repo = FakeWorkoutRepository()
        session = repo.create_session(PlannedWorkout(...))
        history = repo.list_sets_for_exercises("user1", [bench])
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._sessions: Dict[str, WorkoutSession] = {}

    def reset(self) -> None:
        """Clear all stored sessions."""
        self._sessions.clear()

    def seed(self, sessions: List[WorkoutSession]) -> None:
        for session in sessions:
            self._sessions[session.id] = session

    def get_all(self) -> List[WorkoutSession]:
        """Get all stored sessions (test helper)."""
        return list(self._sessions.values())

    # =========================================================================
    # WorkoutRepository Protocol Methods
    # =========================================================================

    def create_session(self, workout: PlannedWorkout) -> WorkoutSession:
        session = WorkoutSession(
            id=str(uuid.uuid4()),
            owner_id=workout.owner_id,
            date=workout.date,
            title=workout.title,
            notes=workout.notes,
            items=_store_items(workout.items),
        )
        self._sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        return self._sessions.get(session_id)

    def list_sessions(
        self,
        owner_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WorkoutSession]:
        sessions = [
            s for s in self._sessions.values()
            if s.owner_id == owner_id
            and (start is None or s.date >= start)
            and (end is None or s.date <= end)
        ]
        return sorted(sessions, key=lambda s: s.date)

    def replace_items(
        self,
        session_id: str,
        items: Sequence[PlannedItem],
        *,
        date: Optional[datetime] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[WorkoutSession]:
        existing = self._sessions.get(session_id)
        if existing is None:
            return None

        updated = WorkoutSession(
            id=existing.id,
            owner_id=existing.owner_id,
            date=date if date is not None else existing.date,
            title=title if title is not None else existing.title,
            notes=notes if notes is not None else existing.notes,
            items=_store_items(items),
        )
        self._sessions[session_id] = updated
        return updated

    def delete_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_sets_for_exercises(
        self,
        owner_id: str,
        exercises: Sequence[ExerciseRef],
        *,
        exclude_set_id: Optional[str] = None,
    ) -> List[LoggedSet]:
        wanted = {ref_key(e) for e in exercises}
        logged: List[LoggedSet] = []
        for session in self._sessions.values():
            if session.owner_id != owner_id:
                continue
            for item, workout_set in session.iter_sets():
                if ref_key(item.exercise) not in wanted or workout_set.id == exclude_set_id:
                    continue
                logged.append(LoggedSet(
                    set_id=workout_set.id,
                    session_id=session.id,
                    session_date=session.date,
                    session_title=session.title,
                    exercise=item.exercise,
                    set_number=workout_set.set_number,
                    weight=workout_set.weight,
                    reps=workout_set.reps,
                    rpe=workout_set.rpe,
                ))
        logged.sort(key=lambda s: (s.session_date, s.session_id, s.set_number))
        return logged
