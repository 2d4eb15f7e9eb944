"""
ReplaceWorkoutItems Use Case.

Edits a session by replacing its whole item list (and optionally its date,
title or notes), then re-runs personal-best detection over the new sets.
Existing records are never lowered by an edit.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from application.exceptions import InvalidParameterError, NotFoundError
from application.ports import WorkoutRepository
from backend.core.personal_best_service import PersonalBestService
from domain.models import PersonalBestCandidate, PlannedItem, WorkoutSession

logger = logging.getLogger(__name__)


@dataclass
class ReplaceWorkoutItemsResult:
    """Result of the ReplaceWorkoutItems use case execution."""

    session: WorkoutSession
    personal_bests: List[PersonalBestCandidate] = field(default_factory=list)


class ReplaceWorkoutItemsUseCase:
    """
    Use case for the replace-all-items edit of a session.

    Usage:
        >>> use_case = ReplaceWorkoutItemsUseCase(workout_repo, pb_service)
        >>> result = use_case.execute("s-1", "user-123", items=[...], title="Push day")
    """

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        personal_best_service: PersonalBestService,
    ) -> None:
        self._workout_repo = workout_repo
        self._pb_service = personal_best_service

    def execute(
        self,
        session_id: str,
        owner_id: str,
        items: Sequence[PlannedItem],
        *,
        date: Optional[datetime] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ReplaceWorkoutItemsResult:
        """
        Execute the edit.

        Args:
            session_id: Session to edit
            owner_id: Caller; must own the session
            items: New item list, replacing the old one
            date: New session date, if changing
            title: New title, if changing
            notes: New notes, if changing

        Returns:
            ReplaceWorkoutItemsResult with the updated session and any new records

        Raises:
            NotFoundError: unknown session or owner mismatch
            InvalidParameterError: empty item list or over-long title/notes
        """
        existing = self._workout_repo.get_session(session_id)
        if existing is None or existing.owner_id != owner_id:
            raise NotFoundError(
                f"Workout {session_id} not found", details={"session_id": session_id}
            )
        if not items:
            raise InvalidParameterError("A workout needs at least one item")
        if title is not None and len(title) > 80:
            raise InvalidParameterError("Title must be at most 80 characters")
        if notes is not None and len(notes) > 500:
            raise InvalidParameterError("Notes must be at most 500 characters")

        updated = self._workout_repo.replace_items(
            session_id, items, date=date, title=title, notes=notes
        )
        if updated is None:
            raise NotFoundError(
                f"Workout {session_id} not found", details={"session_id": session_id}
            )

        personal_bests = self._pb_service.evaluate_session(updated)
        logger.info(
            f"Replaced items of workout {session_id}: {len(updated.items)} items, "
            f"{updated.total_sets} sets, {len(personal_bests)} personal bests"
        )
        return ReplaceWorkoutItemsResult(session=updated, personal_bests=personal_bests)
