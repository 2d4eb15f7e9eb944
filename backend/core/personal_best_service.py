"""
Personal-best detection and storage.

Each (owner, exercise) pair has two independent record lineages:
- weight: heaviest weight ever logged, regardless of reps
- reps-at-weight: most reps logged in one weight bucket, where buckets are
  the cells of a fixed ``weight_tolerance`` kg grid

A newly committed set is compared against every other set the owner logged
for the same exercise reference. Each candidate is then upserted: inserted
when the lineage has no record yet, otherwise written only when it strictly
beats the stored value. Stored values therefore never go down, and
re-evaluating a set that already holds a record changes nothing.

Detection uses the exact exercise reference. Cross-matched references are an
analytics concern (see ProgressionService).
"""
import logging
from typing import Iterable, List, Optional, Sequence, Set, Union, TYPE_CHECKING

from backend.core.locks import KeyedLocks
from domain.models import (
    CatalogExercise,
    CustomExercise,
    LoggedSet,
    PersonalBestCandidate,
    PersonalBestRecord,
    RecordKind,
    WorkoutSession,
    ref_key,
)

if TYPE_CHECKING:
    from application.ports import PersonalBestRepository, WorkoutRepository

logger = logging.getLogger(__name__)

AnyExerciseRef = Union[CatalogExercise, CustomExercise]

DEFAULT_WEIGHT_TOLERANCE = 0.01

# Shared by every PersonalBestService in the process, keyed by (owner, ref).
RECORD_LOCKS = KeyedLocks()


def _format_weight(weight: float) -> str:
    return f"{weight:g}"


def weight_bucket(weight: float, tolerance: float) -> int:
    """
    Grid cell of a weight: ``round(weight / tolerance)``.

    Two weights share a bucket exactly when they round to the same multiple
    of ``tolerance``, so bucket membership does not depend on which sets were
    seen first.

    Examples:
        >>> weight_bucket(100.0, 0.01), weight_bucket(100.004, 0.01)
        (10000, 10000)
        >>> weight_bucket(100.01, 0.01)
        10001
    """
    return int(round(weight / tolerance))


def detect_personal_bests(
    set_id: str,
    weight: Optional[float],
    reps: int,
    prior_sets: Iterable[LoggedSet],
    weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE,
) -> List[PersonalBestCandidate]:
    """
    Compare one set against the owner's other sets for the same exercise.

    A set without a weight produces no candidates. Prior sets without a
    weight count as 0 kg.

    Args:
        set_id: ID of the set being evaluated (excluded from the priors)
        weight: Weight of the set in kg, or None
        reps: Reps of the set
        prior_sets: Other logged sets for the same exercise
        weight_tolerance: Width of a weight bucket in kg

    Returns:
        Zero, one or two candidates (weight first)
    """
    if weight is None:
        return []

    priors = [s for s in prior_sets if s.set_id != set_id]
    candidates: List[PersonalBestCandidate] = []

    max_weight = max((s.weight or 0.0 for s in priors), default=0.0)
    if weight > max_weight:
        candidates.append(PersonalBestCandidate(
            set_id=set_id,
            kind=RecordKind.WEIGHT,
            weight=weight,
            reps=reps,
            value=weight,
            description=f"New personal best – heaviest weight ({_format_weight(weight)}kg)",
        ))

    bucket = weight_bucket(weight, weight_tolerance)
    max_reps = max(
        (s.reps for s in priors if weight_bucket(s.weight or 0.0, weight_tolerance) == bucket),
        default=0,
    )
    if reps > max_reps:
        candidates.append(PersonalBestCandidate(
            set_id=set_id,
            kind=RecordKind.REPS_AT_WEIGHT,
            weight=weight,
            reps=reps,
            bucket=bucket,
            value=float(reps),
            description=(
                f"New personal best – rep max at {_format_weight(weight)}kg ({reps} reps)"
            ),
        ))

    return candidates


class PersonalBestService:
    """
    Detects and stores personal bests for committed sets.

    Evaluations for the same (owner, exercise) are serialized through a lock
    registry shared by every instance in the process. Across processes the
    repository's conditional insert and update keep one live record per
    lineage.
    """

    def __init__(
        self,
        workout_repository: "WorkoutRepository",
        personal_best_repository: "PersonalBestRepository",
        weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE,
        locks: Optional[KeyedLocks] = None,
    ):
        """
        Initialize the service.

        Args:
            workout_repository: Source of the owner's set history
            personal_best_repository: Record store
            weight_tolerance: Width of a weight bucket in kg
            locks: Lock registry, defaults to the process-wide one
        """
        self._workouts = workout_repository
        self._records = personal_best_repository
        self._tolerance = weight_tolerance
        self._locks = locks if locks is not None else RECORD_LOCKS

    @property
    def weight_tolerance(self) -> float:
        return self._tolerance

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate_set(
        self,
        owner_id: str,
        exercise: AnyExerciseRef,
        set_id: str,
        weight: Optional[float],
        reps: int,
    ) -> List[PersonalBestCandidate]:
        """
        Detect and store personal bests for one committed set.

        Args:
            owner_id: Owning user ID
            exercise: Exercise reference the set was logged against
            set_id: ID of the committed set
            weight: Weight in kg, or None
            reps: Reps performed

        Returns:
            The candidates that were actually written (inserted or raised)
        """
        with self._locks.hold((owner_id,) + ref_key(exercise)):
            priors = self._workouts.list_sets_for_exercises(
                owner_id, [exercise], exclude_set_id=set_id
            )
            candidates = detect_personal_bests(
                set_id, weight, reps, priors, self._tolerance
            )

            applied = []
            for candidate in candidates:
                if self._upsert(owner_id, exercise, candidate) is not None:
                    applied.append(candidate)
            return applied

    def evaluate_session(self, session: WorkoutSession) -> List[PersonalBestCandidate]:
        """Evaluate every set of a session in item order, then set order."""
        applied: List[PersonalBestCandidate] = []
        for item, workout_set in session.iter_sets():
            applied.extend(self.evaluate_set(
                session.owner_id,
                item.exercise,
                workout_set.id,
                workout_set.weight,
                workout_set.reps,
            ))
        return applied

    def _upsert(
        self,
        owner_id: str,
        exercise: AnyExerciseRef,
        candidate: PersonalBestCandidate,
    ) -> Optional[PersonalBestRecord]:
        existing = self._records.find_live(
            owner_id, exercise, candidate.kind, bucket=candidate.bucket
        )

        if existing is None:
            record = self._records.insert(owner_id, exercise, candidate)
            if record is not None:
                logger.debug(
                    f"New {candidate.kind.value} record {candidate.value:g} for "
                    f"{exercise.name} (set {candidate.set_id})"
                )
                return record
            # Another writer created the lineage first; compete with its record.
            existing = self._records.find_live(
                owner_id, exercise, candidate.kind, bucket=candidate.bucket
            )
            if existing is None:
                return None

        if candidate.value <= existing.value:
            logger.debug(
                f"Ignored {candidate.kind.value} candidate {candidate.value:g} for "
                f"{exercise.name}: stored {existing.value:g}"
            )
            return None

        updated = self._records.update_if_greater(existing.id, candidate)
        if updated is None:
            logger.debug(f"Conditional update lost for record {existing.id}")
        return updated

    # =========================================================================
    # Queries
    # =========================================================================

    def get_personal_bests(
        self,
        owner_id: str,
        exercises: Optional[Sequence[AnyExerciseRef]] = None,
    ) -> List[PersonalBestRecord]:
        """Live records for an owner, optionally restricted to some exercises."""
        return self._records.list_for_owner(owner_id, exercises=exercises)

    def personal_best_set_ids(
        self,
        owner_id: str,
        session_ids: Optional[Sequence[str]] = None,
    ) -> Set[str]:
        """
        Set ids backing a live record, for flagging sets in a session view.

        Args:
            owner_id: Owning user ID
            session_ids: Only report sets belonging to these sessions

        Returns:
            Set of workout set IDs
        """
        record_set_ids = self._records.set_ids_for_owner(owner_id)
        if not session_ids:
            return record_set_ids

        in_sessions: Set[str] = set()
        for session_id in session_ids:
            session = self._workouts.get_session(session_id)
            if session is None or session.owner_id != owner_id:
                continue
            in_sessions.update(workout_set.id for _, workout_set in session.iter_sets())
        return record_set_ids & in_sessions
