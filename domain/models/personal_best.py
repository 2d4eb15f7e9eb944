"""
Personal-best records and the candidates that produce them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from domain.models.exercise import CatalogExercise, CustomExercise, ExerciseRef


class RecordKind(str, Enum):
    """The two independent record lineages per (owner, exercise)."""
    WEIGHT = "weight"
    REPS_AT_WEIGHT = "reps-at-weight"


def lineage_key(
    exercise: Union[CatalogExercise, CustomExercise],
    kind: RecordKind,
    bucket: Optional[int] = None,
) -> str:
    """
    Identity of a record lineage, unique per owner.

    ``weight`` records have one lineage per exercise; ``reps-at-weight``
    records have one per weight bucket.

    Examples:
        >>> lineage_key(CatalogExercise(id="bench", name="Bench"), RecordKind.WEIGHT)
        'catalog:bench:weight'
        >>> lineage_key(CatalogExercise(id="bench", name="Bench"), RecordKind.REPS_AT_WEIGHT, 10000)
        'catalog:bench:reps-at-weight:10000'
    """
    kind = RecordKind(kind)
    key = f"{exercise.kind}:{exercise.id}:{kind.value}"
    if kind == RecordKind.REPS_AT_WEIGHT:
        key += f":{bucket}"
    return key


class PersonalBestCandidate(BaseModel):
    """A set that beats every other logged set for one record kind."""

    set_id: str
    kind: RecordKind
    weight: Optional[float] = None
    reps: Optional[int] = None
    bucket: Optional[int] = Field(default=None, description="Weight bucket, reps-at-weight only")
    value: float
    description: str


class PersonalBestRecord(BaseModel):
    """
    The live record for one lineage.

    There is at most one live record per (owner, exercise, kind), and for
    ``reps-at-weight`` per weight bucket as well. Superseded values are
    overwritten in place.
    """

    id: str
    owner_id: str
    exercise: ExerciseRef
    kind: RecordKind
    weight: Optional[float] = Field(default=None, ge=0)
    reps: Optional[int] = None
    bucket: Optional[int] = None
    value: float
    set_id: str
    recorded_at: datetime

    @model_validator(mode="after")
    def validate_weight_for_reps_record(self) -> "PersonalBestRecord":
        if self.kind == RecordKind.REPS_AT_WEIGHT and self.weight is None:
            raise ValueError("reps-at-weight records require a weight")
        return self

    @property
    def lineage(self) -> str:
        return lineage_key(self.exercise, self.kind, self.bucket)
