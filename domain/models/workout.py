"""
Workout sessions, items and sets, plus the ephemeral import drafts.

Drafts (``ImportedSetRow``, ``DraftSet``, ``DraftItem``, ``WorkoutDraft``) are
what the CSV parser produces. They carry free-text exercise names and are
never persisted as-is. ``WorkoutSession`` and friends are the persisted shape,
with every item bound to an ``ExerciseRef``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from domain.models.exercise import ExerciseRef

TITLE_MAX_LENGTH = 80
SESSION_NOTES_MAX_LENGTH = 500
SET_NOTES_MAX_LENGTH = 200


# =============================================================================
# Import drafts
# =============================================================================


class ImportedSetRow(BaseModel):
    """One data line of an import file, after tokenizing and defaulting."""

    title: str = ""
    start_time: str = ""
    end_time: str = ""
    description: str = ""
    exercise_title: str = ""
    exercise_notes: str = ""
    set_index: int = 0
    set_type: str = "normal"
    weight: Optional[float] = None
    reps: Optional[int] = None
    rpe: Optional[float] = None


class DraftSet(BaseModel):
    """A parsed set with its 1-based position inside the exercise group."""

    set_number: int = Field(..., ge=1)
    weight: Optional[float] = None
    reps: int = Field(default=1, ge=1)
    rpe: Optional[float] = None
    set_type: str = "normal"
    notes: Optional[str] = None


class DraftItem(BaseModel):
    """All sets of one exercise name inside a draft session."""

    exercise_name: str
    sets: List[DraftSet] = Field(default_factory=list)


class WorkoutDraft(BaseModel):
    """A parsed session, before exercise names are resolved."""

    date: datetime
    ended_at: Optional[datetime] = None
    title: Optional[str] = None
    notes: Optional[str] = None
    raw_start_time: str = ""
    items: List[DraftItem] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(item.sets) for item in self.items)


# =============================================================================
# Persisted shape
# =============================================================================


def _check_contiguous(numbers: List[int]) -> None:
    if numbers != list(range(1, len(numbers) + 1)):
        raise ValueError(f"Set numbers must be contiguous from 1, got {numbers}")


class PlannedSet(BaseModel):
    """
    A set about to be written.

    Weight is optional (bodyweight work) but never negative. Reps are at
    least 1 because zero-rep sets are not representable.
    """

    set_number: int = Field(..., ge=1, description="1-based, contiguous within the item")
    weight: Optional[float] = Field(default=None, ge=0, description="Weight in kg")
    reps: int = Field(default=1, ge=1)
    rpe: Optional[float] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = Field(default=None, max_length=SET_NOTES_MAX_LENGTH)


class PlannedItem(BaseModel):
    """An exercise reference with the sets to record against it."""

    exercise: ExerciseRef
    sets: List[PlannedSet] = Field(..., min_length=1)

    @field_validator("sets")
    @classmethod
    def validate_contiguous_numbering(cls, v: List[PlannedSet]) -> List[PlannedSet]:
        _check_contiguous([s.set_number for s in v])
        return v


class PlannedWorkout(BaseModel):
    """A validated session ready to be persisted; ids are assigned on write."""

    owner_id: str = Field(..., min_length=1)
    date: datetime
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    notes: Optional[str] = Field(default=None, max_length=SESSION_NOTES_MAX_LENGTH)
    items: List[PlannedItem] = Field(..., min_length=1)


class WorkoutSet(PlannedSet):
    """A persisted set."""

    id: str = Field(..., min_length=1)


class WorkoutItem(BaseModel):
    """One exercise inside a session, with its ordered sets."""

    id: str = Field(..., min_length=1)
    order_index: int = Field(default=0, ge=0)
    exercise: ExerciseRef
    sets: List[WorkoutSet] = Field(..., min_length=1)

    @field_validator("sets")
    @classmethod
    def validate_contiguous_numbering(cls, v: List[WorkoutSet]) -> List[WorkoutSet]:
        """Set numbers must run 1..k in order."""
        _check_contiguous([s.set_number for s in v])
        return v


class WorkoutSession(BaseModel):
    """
    Aggregate root: one workout occasion.

    Edits replace the whole item list. Deleting a session cascades to its
    items and sets.
    """

    id: str = Field(..., min_length=1)
    owner_id: str = Field(..., min_length=1)
    date: datetime
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    notes: Optional[str] = Field(default=None, max_length=SESSION_NOTES_MAX_LENGTH)
    items: List[WorkoutItem] = Field(..., min_length=1)

    @property
    def total_sets(self) -> int:
        return sum(len(item.sets) for item in self.items)

    def iter_sets(self):
        """Yield ``(item, set)`` pairs in item order, then set order."""
        for item in self.items:
            for workout_set in item.sets:
                yield item, workout_set


class LoggedSet(BaseModel):
    """
    Flattened read model of a persisted set.

    Returned by history queries so analytics never need to walk the
    session/item tree.
    """

    set_id: str
    session_id: str
    session_date: datetime
    session_title: Optional[str] = None
    exercise: ExerciseRef
    set_number: int = 1
    weight: Optional[float] = None
    reps: int = 1
    rpe: Optional[float] = None
