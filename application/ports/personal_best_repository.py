"""
Personal Best Repository Interface (Port).

Stores the live record per lineage: one per (owner, exercise, weight) and
one per (owner, exercise, reps-at-weight, weight bucket). A lineage is
identified by ``domain.models.lineage_key``.
"""
from typing import List, Optional, Protocol, Sequence, Set

from domain.models import (
    ExerciseRef,
    PersonalBestCandidate,
    PersonalBestRecord,
    RecordKind,
)


class PersonalBestRepository(Protocol):
    """
    Abstract interface for personal-best record persistence.

    ``insert`` never creates a second record for a lineage and
    ``update_if_greater`` is the only way an existing record changes, so a
    stored value can never go down.
    """

    def find_live(
        self,
        owner_id: str,
        exercise: ExerciseRef,
        kind: RecordKind,
        *,
        bucket: Optional[int] = None,
    ) -> Optional[PersonalBestRecord]:
        """
        Find the live record for a lineage.

        Args:
            owner_id: Owning user ID
            exercise: Exact exercise reference (not cross-matched)
            kind: Record kind
            bucket: Weight bucket, used for reps-at-weight only

        Returns:
            PersonalBestRecord or None if the lineage has no record yet
        """
        ...

    def insert(
        self,
        owner_id: str,
        exercise: ExerciseRef,
        candidate: PersonalBestCandidate,
    ) -> Optional[PersonalBestRecord]:
        """
        Create the first record of a lineage.

        Args:
            owner_id: Owning user ID
            exercise: Exercise reference
            candidate: The winning set

        Returns:
            The stored PersonalBestRecord, or None if the lineage already
            had a record (nothing is written)
        """
        ...

    def update_if_greater(
        self,
        record_id: str,
        candidate: PersonalBestCandidate,
    ) -> Optional[PersonalBestRecord]:
        """
        Overwrite a record only if its stored value is strictly lower.

        Args:
            record_id: Record to update
            candidate: The challenging set

        Returns:
            The updated record, or None if the stored value was not lower
        """
        ...

    def list_for_owner(
        self,
        owner_id: str,
        *,
        exercises: Optional[Sequence[ExerciseRef]] = None,
    ) -> List[PersonalBestRecord]:
        """
        List an owner's live records.

        Args:
            owner_id: Owning user ID
            exercises: Restrict to these exercise references

        Returns:
            List of PersonalBestRecord, most recent first
        """
        ...

    def set_ids_for_owner(self, owner_id: str) -> Set[str]:
        """
        Set ids that currently back one of the owner's live records.

        Args:
            owner_id: Owning user ID

        Returns:
            Set of workout set IDs
        """
        ...
