"""
Database operations for Apt Mastery Hub.
Handles Supabase reads for questions, mastery, profiles and the leaderboard,
and the append-only insert of attempt records.
"""
import logging
from typing import List, Dict, Optional

from supabase import Client

from engine import QUESTION_BATCH_LIMIT, LEADERBOARD_LIMIT
from src.errors import FetchFailed, PersistenceFailed
from src.models import AttemptRecord, Domain

logger = logging.getLogger(__name__)


class DatabaseClient:
    """Wrapper around Supabase client with quiz-specific operations."""

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            from db import get_supabase_uncached
            client = get_supabase_uncached()
        self.client: Client = client

    # ============= Questions =============

    def get_questions(self, domain: Optional[Domain] = None, limit: int = QUESTION_BATCH_LIMIT) -> List[Dict]:
        """
        Fetch a batch of question rows, optionally filtered by domain.

        Args:
            domain: Domain to filter on (None = any domain)
            limit: Max rows to fetch

        Returns:
            Raw `questions` rows in store order
        """
        try:
            query = self.client.table("questions").select("*")
            if domain is not None:
                query = query.eq("domain", domain.value)
            response = query.limit(limit).execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching questions (domain={domain}): {e}")
            raise FetchFailed("Failed to load questions") from e

    # ============= Progress =============

    def insert_attempt(self, record: AttemptRecord) -> None:
        """Append one row to user_progress."""
        try:
            self.client.table("user_progress").insert(record.to_row()).execute()
        except Exception as e:
            raise PersistenceFailed(f"Failed to save attempt for question {record.question_id}") from e

    def count_attempts(self, user_id: str) -> int:
        """Number of user_progress rows for the user."""
        try:
            response = (
                self.client.table("user_progress")
                .select("id", count="exact")
                .eq("user_id", user_id)
                .limit(0)
                .execute()
            )
            return response.count or 0
        except Exception as e:
            logger.error(f"Error counting attempts: {e}")
            raise FetchFailed("Failed to count answered questions") from e

    # ============= Aggregates =============

    def get_domain_mastery(self, user_id: str) -> List[Dict]:
        try:
            response = self.client.table("domain_mastery").select("*").eq("user_id", user_id).execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching domain mastery: {e}")
            raise FetchFailed("Failed to load progress") from e

    def get_profile(self, user_id: str) -> Dict:
        try:
            response = self.client.table("profiles").select("*").eq("id", user_id).single().execute()
        except Exception as e:
            logger.error(f"Error fetching profile: {e}")
            raise FetchFailed("Failed to load profile") from e
        if not response.data:
            raise FetchFailed("Failed to load profile")
        return response.data

    def get_leaderboard(self, limit: int = LEADERBOARD_LIMIT) -> List[Dict]:
        try:
            response = (
                self.client.table("profiles")
                .select("id, full_name, total_points")
                .order("total_points", desc=True)
                .limit(limit)
                .execute()
            )
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching leaderboard: {e}")
            raise FetchFailed("Failed to load leaderboard") from e
