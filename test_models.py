"""Row validation at the store boundary."""
import pytest

from conftest import make_question_row
from src.models import AttemptRecord, Domain, Profile, Question


def test_question_from_row():
    q = Question.from_row(make_question_row(7, domain="general_knowledge", correct="C"))
    assert q.domain is Domain.GENERAL_KNOWLEDGE
    assert q.options == {"A": "one", "B": "two", "C": "three", "D": "four"}
    assert q.correct_answer == "C"
    assert Domain.GENERAL_KNOWLEDGE.label == "General Knowledge"


@pytest.mark.parametrize("key, value", [("id", None), ("question_text", ""), ("domain", "history")])
def test_question_from_bad_row(key, value):
    row = make_question_row(1)
    row[key] = value
    with pytest.raises(ValueError):
        Question.from_row(row)


def test_question_is_immutable():
    q = Question.from_row(make_question_row(1))
    with pytest.raises(AttributeError):
        q.correct_answer = "B"


def test_attempt_insert_payload():
    record = AttemptRecord(user_id="u1", question_id="q1", is_correct=False)
    assert record.to_row() == {"user_id": "u1", "question_id": "q1", "is_correct": False}
    assert record.created_at.tzinfo is not None


def test_profile_defaults():
    p = Profile.from_row({"id": "u1", "full_name": "Ada"})
    assert (p.display_name, p.current_streak, p.total_points) == ("Ada", 0, 0)
