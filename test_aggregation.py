"""Mastery, profile and leaderboard reads."""
import pytest

from src.aggregation import count_attempts, has_century_achievement, load_leaderboard, load_mastery, load_profile
from src.errors import FetchFailed
from src.models import Domain, DomainMastery, accuracy_percentage


def test_accuracy_with_no_attempts_is_zero():
    assert accuracy_percentage(0, 0) == 0.0


def test_accuracy_percentage():
    assert accuracy_percentage(4, 3) == 75.0


def test_mastery_row_without_attempts_has_zero_accuracy():
    m = DomainMastery.from_row({"user_id": "u", "domain": "verbal", "total_attempted": 0, "total_correct": 0, "accuracy_percentage": None})
    assert m.accuracy_percentage == 0.0


def test_load_mastery_for_user(db, fake_supabase, ctx):
    fake_supabase.tables["domain_mastery"] = [
        {"user_id": "user-1", "domain": "aptitude", "total_attempted": 8, "total_correct": 6, "accuracy_percentage": 75},
        {"user_id": "user-1", "domain": "technical", "total_attempted": 2, "total_correct": 1, "accuracy_percentage": None},
        {"user_id": "someone-else", "domain": "verbal", "total_attempted": 1, "total_correct": 1, "accuracy_percentage": 100},
    ]
    mastery = load_mastery(db, ctx)

    assert [m.domain for m in mastery] == [Domain.APTITUDE, Domain.TECHNICAL]
    assert mastery[0].accuracy_percentage == 75.0
    assert mastery[1].accuracy_percentage == 50.0


def test_no_progress_is_an_empty_list(db, ctx):
    assert load_mastery(db, ctx) == []


def test_leaderboard_is_sorted_descending(db, fake_supabase):
    fake_supabase.tables["profiles"] = [
        {"id": f"u{i}", "full_name": f"User {i}", "total_points": points}
        for i, points in enumerate([40, 120, 0, 120, 76, 2])
    ]
    board = load_leaderboard(db)

    points = [e.total_points for e in board]
    assert all(points[i] >= points[i + 1] for i in range(len(points) - 1))
    assert points[0] == 120


def test_leaderboard_limit(db, fake_supabase):
    fake_supabase.tables["profiles"] = [{"id": f"u{i}", "full_name": None, "total_points": i} for i in range(80)]
    board = load_leaderboard(db)
    assert len(board) == 50
    assert board[0].total_points == 79
    assert board[0].display_name == "Anonymous"


def test_profile_and_attempt_count(db, fake_supabase, ctx):
    fake_supabase.tables["profiles"] = [{"id": "user-1", "full_name": None, "current_streak": 3, "total_points": 58}]
    fake_supabase.tables["user_progress"] = [{"user_id": "user-1", "question_id": f"q{i}", "is_correct": True} for i in range(7)]

    profile = load_profile(db, ctx)
    assert profile.display_name == "Learner"
    assert profile.current_streak == 3
    assert profile.total_points == 58
    assert count_attempts(db, ctx) == 7


def test_missing_profile_is_fetch_failed(db, ctx):
    with pytest.raises(FetchFailed):
        load_profile(db, ctx)


@pytest.mark.parametrize("table, call", [
    ("domain_mastery", lambda db, ctx: load_mastery(db, ctx)),
    ("profiles", lambda db, ctx: load_leaderboard(db)),
    ("user_progress", lambda db, ctx: count_attempts(db, ctx)),
])
def test_read_errors_raise_fetch_failed(db, fake_supabase, ctx, table, call):
    fake_supabase.errors[table] = RuntimeError("boom")
    with pytest.raises(FetchFailed):
        call(db, ctx)


def test_century_achievement():
    assert not has_century_achievement(99)
    assert has_century_achievement(100)


def test_leaderboard_ties_keep_store_order(db, fake_supabase):
    fake_supabase.tables["profiles"] = [
        {"id": "first", "full_name": "A", "total_points": 30},
        {"id": "second", "full_name": "B", "total_points": 30},
        {"id": "third", "full_name": "C", "total_points": 30},
        {"id": "top", "full_name": "D", "total_points": 90},
    ]
    board = load_leaderboard(db)
    assert [e.id for e in board] == ["top", "first", "second", "third"]
