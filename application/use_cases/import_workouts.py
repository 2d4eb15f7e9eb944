"""
ImportWorkouts Use Case.

Turns a workout export into stored sessions: parse, resolve exercise names,
persist each session, then evaluate every new set for personal bests.

Workouts are processed oldest first so that personal bests follow the order
the sets were actually performed. A workout that fails validation or
persistence is reported in ``errors``; the others still import. A stored
workout whose personal-best evaluation fails still counts as imported and
the failure is reported in ``errors``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from application.exceptions import EngineError
from backend.core.csv_import import DEFAULT_UNKNOWN_EXERCISE, parse_workout_csv
from backend.core.exercise_resolver import ExerciseResolver
from backend.core.personal_best_service import PersonalBestService
from application.ports import WorkoutRepository
from domain.models import (
    PersonalBestCandidate,
    PlannedItem,
    PlannedSet,
    PlannedWorkout,
    WorkoutDraft,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportedWorkoutSummary:
    """One stored session from an import."""

    session_id: str
    title: Optional[str]
    date: datetime
    item_count: int
    set_count: int
    personal_bests: List[PersonalBestCandidate] = field(default_factory=list)


@dataclass
class ImportWorkoutsResult:
    """Result of the ImportWorkouts use case execution."""

    success: bool
    imported: int = 0
    total: int = 0
    sessions: List[ImportedWorkoutSummary] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def personal_bests(self) -> List[PersonalBestCandidate]:
        return [pb for session in self.sessions for pb in session.personal_bests]


class ImportWorkoutsUseCase:
    """
    Use case for bulk-importing workouts from an export file.

    Orchestrates the following workflow:
    1. Parse the text into drafts (MalformedInputError propagates)
    2. Sort drafts chronologically
    3. Resolve each exercise name to a catalog or custom exercise
    4. Validate and persist the session
    5. Evaluate each stored set for personal bests, in file order

    Usage:
        >>> use_case = ImportWorkoutsUseCase(
        ...     workout_repo=workout_repo,
        ...     resolver=resolver,
        ...     personal_best_service=pb_service,
        ... )
        >>> result = use_case.execute(csv_text, owner_id="user-123")
        >>> print(f"Imported {result.imported} of {result.total}")
    """

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        resolver: ExerciseResolver,
        personal_best_service: PersonalBestService,
        *,
        unknown_exercise_name: str = DEFAULT_UNKNOWN_EXERCISE,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            workout_repo: Repository for persisting sessions
            resolver: Exercise name resolver
            personal_best_service: Detector/store run on every new set
            unknown_exercise_name: Name for rows with a blank exercise title
            now: Clock used for unparseable start times
        """
        self._workout_repo = workout_repo
        self._resolver = resolver
        self._pb_service = personal_best_service
        self._unknown_exercise_name = unknown_exercise_name
        self._now = now

    def execute(self, csv_text: str, owner_id: str) -> ImportWorkoutsResult:
        """
        Execute the import workflow.

        Args:
            csv_text: Raw export text
            owner_id: Owner of the imported sessions

        Returns:
            ImportWorkoutsResult with counts, summaries and per-workout errors

        Raises:
            MalformedInputError: the text has no header or no data rows
        """
        drafts = parse_workout_csv(
            csv_text,
            now=self._now,
            unknown_exercise_name=self._unknown_exercise_name,
        )
        return self.execute_drafts(drafts, owner_id)

    def execute_drafts(
        self,
        drafts: Sequence[WorkoutDraft],
        owner_id: str,
    ) -> ImportWorkoutsResult:
        """Import already-parsed drafts."""
        result = ImportWorkoutsResult(success=True, total=len(drafts))

        for draft in sorted(drafts, key=lambda d: d.date):
            label = draft.title or "Untitled"
            try:
                planned = self._plan(draft, owner_id)
                if planned is None:
                    logger.warning(f"Skipping workout '{label}': no valid exercises")
                    result.errors.append(f'Workout "{label}" has no valid exercises')
                    continue

                session = self._workout_repo.create_session(planned)

            except (ValidationError, EngineError) as e:
                logger.warning(f"Failed to import workout '{label}': {e}")
                result.errors.append(f'Failed to import workout "{label}": {e}')
                continue

            summary = ImportedWorkoutSummary(
                session_id=session.id,
                title=session.title,
                date=session.date,
                item_count=len(session.items),
                set_count=session.total_sets,
            )
            result.sessions.append(summary)

            try:
                summary.personal_bests = self._pb_service.evaluate_session(session)
            except EngineError as e:
                logger.warning(f"Personal-best evaluation failed for workout '{label}': {e}")
                result.errors.append(
                    f'Workout "{label}" was imported but its personal bests were not updated: {e}'
                )

        result.imported = len(result.sessions)
        logger.info(
            f"Imported {result.imported}/{result.total} workouts for {owner_id} "
            f"({len(result.personal_bests)} personal bests, {len(result.errors)} errors)"
        )
        return result

    def _plan(self, draft: WorkoutDraft, owner_id: str) -> Optional[PlannedWorkout]:
        """Resolve names and build a validated workout, or None if nothing is left."""
        items: List[PlannedItem] = []
        for draft_item in draft.items:
            name = draft_item.exercise_name.strip()
            if not name or not draft_item.sets:
                continue

            exercise = self._resolver.resolve(owner_id, name)
            items.append(PlannedItem(
                exercise=exercise,
                sets=[
                    PlannedSet(
                        set_number=s.set_number,
                        weight=s.weight,
                        reps=s.reps,
                        rpe=s.rpe,
                        notes=s.notes,
                    )
                    for s in draft_item.sets
                ],
            ))

        if not items:
            return None

        return PlannedWorkout(
            owner_id=owner_id,
            date=draft.date,
            title=draft.title,
            notes=draft.notes,
            items=items,
        )
