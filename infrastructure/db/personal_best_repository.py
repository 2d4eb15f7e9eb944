"""
Supabase implementation of PersonalBestRepository.

personal_bests is unique on (user_id, lineage). The first record of a
lineage is written with ``INSERT ... ON CONFLICT DO NOTHING`` and later
records change only through a single UPDATE filtered on ``value < candidate``,
so both writes hold across processes.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Sequence, Set, Tuple

from supabase import Client

from application.exceptions import RepositoryError
from domain.converters import candidate_to_db_row, db_row_to_personal_best
from domain.converters.db_converters import _parse_datetime
from domain.models import (
    ExerciseRef,
    PersonalBestCandidate,
    PersonalBestRecord,
    RecordKind,
    lineage_key,
)
from infrastructure.db.workout_repository import EXERCISE_EMBEDS

logger = logging.getLogger(__name__)

PB_SELECT = f"*, {EXERCISE_EMBEDS}"
LINEAGE_CONFLICT = "user_id,lineage"


class SupabasePersonalBestRepository:
    """Supabase implementation of PersonalBestRepository protocol."""

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def find_live(
        self,
        owner_id: str,
        exercise: ExerciseRef,
        kind: RecordKind,
        *,
        bucket: Optional[int] = None,
    ) -> Optional[PersonalBestRecord]:
        try:
            result = self._client.table("personal_bests") \
                .select(PB_SELECT) \
                .eq("user_id", owner_id) \
                .eq("lineage", lineage_key(exercise, kind, bucket)) \
                .limit(1) \
                .execute()
        except Exception as e:
            logger.exception(f"Error finding {kind.value} record for {owner_id}")
            raise RepositoryError("Failed to look up personal best") from e

        if not result.data:
            return None
        return db_row_to_personal_best(result.data[0])

    def insert(
        self,
        owner_id: str,
        exercise: ExerciseRef,
        candidate: PersonalBestCandidate,
    ) -> Optional[PersonalBestRecord]:
        try:
            result = self._client.table("personal_bests") \
                .upsert(
                    candidate_to_db_row(owner_id, exercise, candidate),
                    on_conflict=LINEAGE_CONFLICT,
                    ignore_duplicates=True,
                ) \
                .execute()
        except Exception as e:
            logger.exception(f"Error inserting {candidate.kind.value} record for {owner_id}")
            raise RepositoryError("Failed to store personal best") from e

        if not result.data:
            logger.debug(
                f"Lineage {lineage_key(exercise, candidate.kind, candidate.bucket)} "
                f"already has a record for {owner_id}"
            )
            return None

        row = result.data[0]
        return PersonalBestRecord(
            id=str(row["id"]),
            owner_id=owner_id,
            exercise=exercise,
            kind=candidate.kind,
            weight=candidate.weight,
            reps=candidate.reps,
            bucket=candidate.bucket,
            value=candidate.value,
            set_id=candidate.set_id,
            recorded_at=_parse_datetime(row.get("created_at")) or datetime.now(timezone.utc),
        )

    def update_if_greater(
        self,
        record_id: str,
        candidate: PersonalBestCandidate,
    ) -> Optional[PersonalBestRecord]:
        changes: Dict[str, Any] = {
            "set_id": candidate.set_id,
            "weight_kg": candidate.weight,
            "reps": candidate.reps,
            "value": candidate.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            result = self._client.table("personal_bests") \
                .update(changes) \
                .eq("id", record_id) \
                .lt("value", candidate.value) \
                .execute()
            if not result.data:
                return None

            refreshed = self._client.table("personal_bests") \
                .select(PB_SELECT) \
                .eq("id", record_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error updating personal best {record_id}")
            raise RepositoryError(f"Failed to update personal best {record_id}") from e

        if not refreshed.data:
            return None
        return db_row_to_personal_best(refreshed.data[0])

    def list_for_owner(
        self,
        owner_id: str,
        *,
        exercises: Optional[Sequence[ExerciseRef]] = None,
    ) -> List[PersonalBestRecord]:
        filters: List[Optional[Tuple[str, List[str]]]]
        if exercises is None:
            filters = [None]
        else:
            filters = [
                ("exercise_id", [e.id for e in exercises if e.kind == "catalog"]),
                ("custom_id", [e.id for e in exercises if e.kind == "custom"]),
            ]

        rows: List[Dict[str, Any]] = []
        for column_filter in filters:
            query = self._client.table("personal_bests") \
                .select(PB_SELECT) \
                .eq("user_id", owner_id)
            if column_filter is not None:
                column, ids = column_filter
                if not ids:
                    continue
                query = query.in_(column, ids)
            try:
                result = query.order("created_at", desc=True).execute()
            except Exception as e:
                logger.exception(f"Error listing personal bests for {owner_id}")
                raise RepositoryError("Failed to list personal bests") from e
            rows.extend(result.data or [])

        records = [db_row_to_personal_best(row) for row in rows]
        records.sort(key=lambda r: r.recorded_at, reverse=True)
        return records

    def set_ids_for_owner(self, owner_id: str) -> Set[str]:
        try:
            result = self._client.table("personal_bests") \
                .select("set_id") \
                .eq("user_id", owner_id) \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching personal best set ids for {owner_id}")
            raise RepositoryError("Failed to fetch personal best set ids") from e

        return {str(row["set_id"]) for row in result.data or []}
