"""
Supabase implementations of ActivityRepository and GoalRepository.

Activity samples live in activity_entries (one row per user and day);
goals live in goals.
"""
import logging
from datetime import date
from typing import Optional, List

from supabase import Client

from application.exceptions import RepositoryError
from domain.converters import (
    activity_sample_to_db_row,
    db_row_to_activity_sample,
    db_row_to_goal,
)
from domain.models import ActivitySample, Goal

logger = logging.getLogger(__name__)


class SupabaseActivityRepository:
    """Supabase implementation of ActivityRepository protocol."""

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def list_samples(self, owner_id: str, start: date, end: date) -> List[ActivitySample]:
        try:
            result = self._client.table("activity_entries") \
                .select("*") \
                .eq("user_id", owner_id) \
                .gte("date", start.isoformat()) \
                .lte("date", end.isoformat()) \
                .order("date") \
                .execute()
        except Exception as e:
            logger.exception(f"Error fetching activity for {owner_id}")
            raise RepositoryError(
                "Failed to fetch activity",
                details={"start": start.isoformat(), "end": end.isoformat()},
            ) from e

        return [db_row_to_activity_sample(row) for row in result.data or []]

    def save_sample(self, sample: ActivitySample) -> ActivitySample:
        try:
            result = self._client.table("activity_entries") \
                .upsert(activity_sample_to_db_row(sample), on_conflict="user_id,date") \
                .execute()
        except Exception as e:
            logger.exception(f"Error saving activity for {sample.owner_id} on {sample.date}")
            raise RepositoryError("Failed to save activity") from e

        if not result.data:
            raise RepositoryError("Database upsert returned empty result")
        return db_row_to_activity_sample(result.data[0])


class SupabaseGoalRepository:
    """Supabase implementation of GoalRepository protocol."""

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def list_goals(self, owner_id: str, *, active_only: bool = True) -> List[Goal]:
        try:
            query = self._client.table("goals").select("*").eq("user_id", owner_id)
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.exception(f"Error listing goals for {owner_id}")
            raise RepositoryError("Failed to list goals") from e

        return [db_row_to_goal(row) for row in result.data or []]

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        try:
            result = self._client.table("goals").select("*").eq("id", goal_id).execute()
        except Exception as e:
            logger.exception(f"Error fetching goal {goal_id}")
            raise RepositoryError(f"Failed to fetch goal {goal_id}") from e

        if not result.data:
            return None
        return db_row_to_goal(result.data[0])
