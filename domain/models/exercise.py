"""
Exercise references: a catalog entry or a user-owned custom entry.

A workout item always points at exactly one of the two variants. The
``kind`` literal is the pydantic discriminator, so a reference can never be
both or neither.
"""

from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field


class CatalogExercise(BaseModel):
    """
    An exercise from the shared catalog.

    Examples:
        >>> ref = CatalogExercise(id="ex-1", name="Barbell Bench Press", body_part="Chest")
        >>> ref.kind
        'catalog'
    """

    kind: Literal["catalog"] = "catalog"
    id: str = Field(..., min_length=1, description="Catalog exercise ID")
    name: str = Field(..., min_length=1, description="Display name")
    body_part: Optional[str] = Field(default=None, description="Body part category")

    model_config = {"frozen": True}


class CustomExercise(BaseModel):
    """
    An exercise created by (and visible to) a single owner.

    Custom exercises are created on demand when an imported name has no
    catalog match.
    """

    kind: Literal["custom"] = "custom"
    id: str = Field(..., min_length=1, description="Custom exercise ID")
    owner_id: str = Field(..., min_length=1, description="Owning user ID")
    name: str = Field(..., min_length=1, description="Display name")
    body_part: Optional[str] = Field(default=None, description="Body part category")

    model_config = {"frozen": True}


ExerciseRef = Annotated[
    Union[CatalogExercise, CustomExercise],
    Field(discriminator="kind"),
]


def ref_key(ref: Union[CatalogExercise, CustomExercise]) -> Tuple[str, str]:
    """Identity of a reference as a hashable ``(kind, id)`` tuple."""
    return (ref.kind, ref.id)
