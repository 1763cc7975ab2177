"""
Aggregation View: per-domain mastery, profile summary and the leaderboard.
The store maintains the aggregates; this module validates and orders them.
"""
import logging
from typing import List

from engine import CENTURY_ACHIEVEMENT, LEADERBOARD_LIMIT
from src.auth import SessionContext
from src.database import DatabaseClient
from src.models import DomainMastery, LeaderboardEntry, Profile

logger = logging.getLogger(__name__)


def load_mastery(db: DatabaseClient, ctx: SessionContext) -> List[DomainMastery]:
    """Mastery rows for the user. An empty list means no progress yet."""
    mastery = []
    for row in db.get_domain_mastery(ctx.user_id):
        try:
            mastery.append(DomainMastery.from_row(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed mastery row: {e}")
    return mastery


def load_leaderboard(db: DatabaseClient, limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
    """
    Top profiles by total points, highest first.

    The store already orders the rows; the stable re-sort only guarantees
    the ordering. Ties keep whatever order the store returned.
    """
    entries = []
    for row in db.get_leaderboard(limit=limit):
        try:
            entries.append(LeaderboardEntry.from_row(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed leaderboard row: {e}")
    entries.sort(key=lambda e: e.total_points, reverse=True)
    return entries[:limit]


def load_profile(db: DatabaseClient, ctx: SessionContext) -> Profile:
    return Profile.from_row(db.get_profile(ctx.user_id))


def count_attempts(db: DatabaseClient, ctx: SessionContext) -> int:
    return db.count_attempts(ctx.user_id)


def has_century_achievement(total_answered: int) -> bool:
    return total_answered >= CENTURY_ACHIEVEMENT
