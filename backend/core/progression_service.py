"""
Progression Service for Exercise Tracking.

This module provides read-side analytics for one exercise:
- Progress timeline (best weight and best reps per calendar day)
- Exercise history grouped by session
- Personal records

Every query works on the exercise's cross-matched references, so sets
logged against a custom "Bench Press (Barbell)" and the catalog's
"Barbell Bench Press" count as one exercise.
"""
from typing import Optional, List, Union, TYPE_CHECKING
from dataclasses import dataclass, field
from datetime import date
from collections import OrderedDict
import logging

from application.exceptions import InvalidParameterError, NotFoundError
from backend.core.exercise_resolver import ExerciseResolver
from domain.models import CatalogExercise, CustomExercise, LoggedSet, PersonalBestRecord

if TYPE_CHECKING:
    from application.ports import (
        CustomExerciseRepository,
        ExerciseCatalogRepository,
        PersonalBestRepository,
        WorkoutRepository,
    )

logger = logging.getLogger(__name__)

AnyExerciseRef = Union[CatalogExercise, CustomExercise]

MAX_TIMELINE_SESSIONS = 500


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class TimelinePoint:
    """Best values logged on one calendar day."""
    date: date
    max_weight: Optional[float]
    max_reps: Optional[int]

    @property
    def label(self) -> str:
        return f"{self.date:%b} {self.date.day}"


@dataclass
class ExerciseTimeline:
    """Oldest-first progress points for an exercise."""
    exercise: AnyExerciseRef
    equivalent_refs: List[AnyExerciseRef]
    points: List[TimelinePoint] = field(default_factory=list)


@dataclass
class HistorySession:
    """The sets of one session for the requested exercise."""
    session_id: str
    session_date: str
    session_title: Optional[str]
    sets: List[LoggedSet] = field(default_factory=list)
    session_max_weight: Optional[float] = None
    session_max_reps: Optional[int] = None
    session_total_volume: Optional[float] = None


@dataclass
class ExerciseHistoryResponse:
    """Sessions containing an exercise, newest first."""
    exercise: AnyExerciseRef
    sessions: List[HistorySession]
    total_sessions: int
    all_time_max_weight: Optional[float] = None


@dataclass
class PersonalRecordResponse:
    """Live personal records, optionally for one exercise."""
    records: List[PersonalBestRecord]
    exercise: Optional[AnyExerciseRef] = None


def _max_or_none(values):
    present = [v for v in values if v is not None]
    return max(present) if present else None


# =============================================================================
# Progression Service
# =============================================================================


class ProgressionService:
    """
    Service for exercise progression analytics.

    Resolves cross-matched references once per query, then reads the
    flattened set history for all of them.
    """

    def __init__(
        self,
        workout_repo: "WorkoutRepository",
        personal_best_repo: "PersonalBestRepository",
        catalog_repo: "ExerciseCatalogRepository",
        custom_repo: "CustomExerciseRepository",
        resolver: Optional[ExerciseResolver] = None,
    ):
        """
        Initialize the progression service.

        Args:
            workout_repo: Repository for logged sets
            personal_best_repo: Repository for live records
            catalog_repo: Catalog lookups
            custom_repo: Custom exercise lookups
            resolver: Resolver used for cross-matching (built from the two
                exercise repositories when omitted)
        """
        self._workout_repo = workout_repo
        self._pb_repo = personal_best_repo
        self._catalog_repo = catalog_repo
        self._custom_repo = custom_repo
        self._resolver = resolver or ExerciseResolver(catalog_repo, custom_repo)

    def find_exercise(
        self,
        owner_id: str,
        *,
        exercise_id: Optional[str] = None,
        custom_id: Optional[str] = None,
    ) -> AnyExerciseRef:
        """
        Look up an exercise by catalog ID or by custom ID (exactly one).

        Raises:
            InvalidParameterError: neither or both IDs given
            NotFoundError: no such exercise, or the custom exercise belongs
                to another owner
        """
        if bool(exercise_id) == bool(custom_id):
            raise InvalidParameterError("Provide exactly one of exercise_id or custom_id")

        if exercise_id:
            exercise = self._catalog_repo.get_by_id(exercise_id)
            if exercise is None:
                raise NotFoundError(
                    f"Exercise {exercise_id} not found", details={"exercise_id": exercise_id}
                )
            return exercise

        custom = self._custom_repo.get_by_id(custom_id)
        if custom is None or custom.owner_id != owner_id:
            raise NotFoundError(
                f"Custom exercise {custom_id} not found", details={"custom_id": custom_id}
            )
        return custom

    def _history(self, owner_id: str, exercise: AnyExerciseRef):
        refs = self._resolver.equivalent_refs(exercise, owner_id)
        sets = self._workout_repo.list_sets_for_exercises(owner_id, refs)
        return refs, sets

    def get_exercise_timeline(
        self,
        owner_id: str,
        exercise: AnyExerciseRef,
        *,
        limit: int = MAX_TIMELINE_SESSIONS,
    ) -> ExerciseTimeline:
        """
        One point per calendar day with the best weight and reps logged.

        Args:
            owner_id: Owning user ID
            exercise: Any reference to the exercise
            limit: Maximum sessions considered (oldest first), capped at 500

        Returns:
            ExerciseTimeline ordered oldest first
        """
        limit = min(max(1, limit), MAX_TIMELINE_SESSIONS)
        refs, sets = self._history(owner_id, exercise)

        by_session: "OrderedDict[str, List[LoggedSet]]" = OrderedDict()
        for logged in sorted(sets, key=lambda s: (s.session_date, s.session_id, s.set_number)):
            if logged.session_id not in by_session and len(by_session) >= limit:
                continue
            by_session.setdefault(logged.session_id, []).append(logged)

        by_day: "OrderedDict[date, TimelinePoint]" = OrderedDict()
        for session_sets in by_session.values():
            day = session_sets[0].session_date.date()
            weight = _max_or_none(s.weight for s in session_sets)
            reps = _max_or_none(s.reps for s in session_sets)
            point = by_day.get(day)
            if point is None:
                by_day[day] = TimelinePoint(date=day, max_weight=weight, max_reps=reps)
            else:
                point.max_weight = _max_or_none([point.max_weight, weight])
                point.max_reps = _max_or_none([point.max_reps, reps])

        points = [by_day[day] for day in sorted(by_day)]
        logger.debug(f"Timeline for {exercise.name}: {len(points)} day(s) from {len(refs)} ref(s)")
        return ExerciseTimeline(exercise=exercise, equivalent_refs=refs, points=points)

    def get_exercise_history(
        self,
        owner_id: str,
        exercise: AnyExerciseRef,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> ExerciseHistoryResponse:
        """
        Sessions containing the exercise, newest first, with per-session bests.

        Args:
            owner_id: Owning user ID
            exercise: Any reference to the exercise
            limit: Maximum sessions to return
            offset: Pagination offset

        Returns:
            ExerciseHistoryResponse
        """
        _, sets = self._history(owner_id, exercise)

        grouped: "OrderedDict[str, List[LoggedSet]]" = OrderedDict()
        for logged in sorted(sets, key=lambda s: (s.session_date, s.set_number), reverse=True):
            grouped.setdefault(logged.session_id, []).append(logged)

        sessions: List[HistorySession] = []
        for session_id, session_sets in grouped.items():
            session_sets.sort(key=lambda s: s.set_number)
            volume = sum((s.weight or 0.0) * s.reps for s in session_sets)
            first = session_sets[0]
            sessions.append(HistorySession(
                session_id=session_id,
                session_date=first.session_date.date().isoformat(),
                session_title=first.session_title,
                sets=session_sets,
                session_max_weight=_max_or_none(s.weight for s in session_sets),
                session_max_reps=_max_or_none(s.reps for s in session_sets),
                session_total_volume=round(volume, 1) if volume > 0 else None,
            ))

        return ExerciseHistoryResponse(
            exercise=exercise,
            sessions=sessions[offset:offset + limit],
            total_sessions=len(sessions),
            all_time_max_weight=_max_or_none(s.weight for s in sets),
        )

    def get_personal_records(
        self,
        owner_id: str,
        *,
        exercise: Optional[AnyExerciseRef] = None,
        limit: int = 20,
    ) -> PersonalRecordResponse:
        """
        Live personal records, across cross-matched refs when an exercise is given.

        Args:
            owner_id: Owning user ID
            exercise: Restrict to this exercise and its equivalents
            limit: Maximum records to return

        Returns:
            PersonalRecordResponse, most recent first
        """
        refs = self._resolver.equivalent_refs(exercise, owner_id) if exercise else None
        records = self._pb_repo.list_for_owner(owner_id, exercises=refs)
        records = sorted(records, key=lambda r: r.recorded_at, reverse=True)
        return PersonalRecordResponse(records=records[:limit], exercise=exercise)
