"""
Exercise resolution: free-text names to exercise references.

Resolution tries, in order (first hit wins):
1. Exact name match against the catalog (case-insensitive)
2. Substring match against the catalog (case-insensitive)
3. The owner's custom exercise with that exact name, created if absent

Resolution never fails; the worst case is a new custom exercise.

Cross-matching is separate and used by analytics only: two references denote
the same exercise when their normalized names are equal, whichever variant
they are.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union, TYPE_CHECKING

from backend.core.locks import KeyedLocks
from backend.core.normalize import normalize
from domain.models import CatalogExercise, CustomExercise, ref_key

if TYPE_CHECKING:
    from application.ports import CustomExerciseRepository, ExerciseCatalogRepository

logger = logging.getLogger(__name__)

AnyExerciseRef = Union[CatalogExercise, CustomExercise]

# Shared by every ExerciseResolver in the process, keyed by (owner, lower-cased name).
CUSTOM_EXERCISE_LOCKS = KeyedLocks()


class ResolveMethod(str, Enum):
    """Which tier produced the reference."""
    CATALOG_EXACT = "catalog_exact"
    CATALOG_SUBSTRING = "catalog_substring"
    CUSTOM_EXISTING = "custom_existing"
    CUSTOM_CREATED = "custom_created"


@dataclass
class ExerciseResolution:
    """Result of resolving one name."""
    exercise: AnyExerciseRef
    method: ResolveMethod
    query: str

    @property
    def created(self) -> bool:
        return self.method == ResolveMethod.CUSTOM_CREATED


def same_exercise(a: AnyExerciseRef, b: AnyExerciseRef) -> bool:
    """
    True when two references denote the same exercise for analytics.

    Identical references always match; otherwise the normalized names decide,
    so a custom "Bench Press (Barbell)" matches catalog "Barbell Bench Press".
    """
    if ref_key(a) == ref_key(b):
        return True
    return normalize(a.name) == normalize(b.name)


class ExerciseResolver:
    """
    Maps exercise names from imports to catalog or custom references.

    Custom-exercise creation is serialized per (owner, name) through a lock
    registry shared by every resolver in the process. Across processes the
    repository's unique (owner, name) key makes creation idempotent.
    """

    SUBSTRING_LIMIT = 25

    def __init__(
        self,
        catalog_repository: "ExerciseCatalogRepository",
        custom_repository: "CustomExerciseRepository",
        unknown_exercise_name: str = "Unknown Exercise",
        locks: Optional[KeyedLocks] = None,
    ):
        """
        Initialize the resolver.

        Args:
            catalog_repository: Repository for the shared catalog
            custom_repository: Repository for owners' custom exercises
            unknown_exercise_name: Name used when asked to resolve a blank name
            locks: Lock registry, defaults to the process-wide one
        """
        self._catalog = catalog_repository
        self._custom = custom_repository
        self._unknown_exercise_name = unknown_exercise_name
        self._locks = locks if locks is not None else CUSTOM_EXERCISE_LOCKS

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, owner_id: str, name: str) -> AnyExerciseRef:
        """
        Resolve a name to an exercise reference.

        Args:
            owner_id: Owner used for the custom-exercise tier
            name: Free-text exercise name

        Returns:
            CatalogExercise or CustomExercise
        """
        return self.resolve_with_details(owner_id, name).exercise

    def resolve_with_details(self, owner_id: str, name: str) -> ExerciseResolution:
        """Resolve a name and report which tier matched."""
        query = (name or "").strip() or self._unknown_exercise_name

        exact = self._catalog.find_by_exact_name(query)
        if exact is not None:
            logger.debug(f"Resolved '{query}' to catalog '{exact.id}' (exact)")
            return ExerciseResolution(exact, ResolveMethod.CATALOG_EXACT, query)

        partial = self._best_substring_match(query)
        if partial is not None:
            logger.debug(f"Resolved '{query}' to catalog '{partial.id}' (substring)")
            return ExerciseResolution(partial, ResolveMethod.CATALOG_SUBSTRING, query)

        with self._locks.hold((owner_id, query.lower())):
            existing = self._custom.find_by_name(owner_id, query)
            if existing is not None:
                logger.debug(f"Resolved '{query}' to custom '{existing.id}'")
                return ExerciseResolution(existing, ResolveMethod.CUSTOM_EXISTING, query)

            created = self._custom.create(owner_id, query)

        logger.info(f"Created custom exercise '{query}' ({created.id}) for {owner_id}")
        return ExerciseResolution(created, ResolveMethod.CUSTOM_CREATED, query)

    def _best_substring_match(self, query: str) -> Optional[CatalogExercise]:
        """
        Pick one catalog entry containing ``query``.

        Shortest name wins (closest to the query), then alphabetical, so the
        choice does not depend on storage order.
        """
        candidates = self._catalog.search_by_name_fragment(query, limit=self.SUBSTRING_LIMIT)
        needle = query.lower()
        candidates = [c for c in candidates if needle in c.name.lower()]
        if not candidates:
            return None
        return min(candidates, key=lambda c: (len(c.name), c.name.lower()))

    # =========================================================================
    # Cross-matching
    # =========================================================================

    def equivalent_refs(
        self,
        exercise: AnyExerciseRef,
        owner_id: str,
    ) -> List[AnyExerciseRef]:
        """
        Every reference that denotes the same exercise as ``exercise``.

        Looks across the catalog and the owner's custom exercises. The given
        reference is always first in the result.

        Args:
            exercise: Reference to expand
            owner_id: Owner whose custom exercises are considered

        Returns:
            List of references with no duplicates
        """
        refs: List[AnyExerciseRef] = [exercise]
        seen = {ref_key(exercise)}
        key = normalize(exercise.name)

        pool: List[AnyExerciseRef] = []
        pool.extend(self._catalog.get_all())
        pool.extend(self._custom.list_for_owner(owner_id))

        for candidate in pool:
            if ref_key(candidate) in seen:
                continue
            if normalize(candidate.name) == key:
                refs.append(candidate)
                seen.add(ref_key(candidate))

        logger.debug(f"'{exercise.name}' cross-matches {len(refs)} reference(s)")
        return refs
