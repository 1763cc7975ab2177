"""
Typed records for the quiz domain.
Rows coming back from Supabase are validated here, at the store boundary,
so the rest of the code never handles loose dicts.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


class Domain(str, Enum):
    APTITUDE = "aptitude"
    REASONING = "reasoning"
    VERBAL = "verbal"
    TECHNICAL = "technical"
    GENERAL_KNOWLEDGE = "general_knowledge"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


def accuracy_percentage(total_attempted: int, total_correct: int) -> float:
    """100 * correct / attempted, defined as 0 when nothing was attempted."""
    if total_attempted <= 0:
        return 0.0
    return total_correct * 100.0 / total_attempted


def _require(row: Dict, key: str):
    value = row.get(key)
    if value is None or value == "":
        raise ValueError(f"row is missing '{key}'")
    return value


@dataclass(frozen=True)
class Question:
    id: str
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str
    explanation: str
    domain: Domain
    sub_topic: str

    @classmethod
    def from_row(cls, row: Dict) -> "Question":
        """
        Build a Question from a `questions` row.

        Raises ValueError for a missing id/text or a domain outside the enum.
        correct_answer is kept verbatim: a label outside A-D never matches a
        selectable option, so the question always scores incorrect.
        """
        return cls(
            id=str(_require(row, "id")),
            question_text=_require(row, "question_text"),
            option_a=row.get("option_a") or "",
            option_b=row.get("option_b") or "",
            option_c=row.get("option_c") or "",
            option_d=row.get("option_d") or "",
            correct_answer=row.get("correct_answer") or "",
            explanation=row.get("explanation") or "",
            domain=Domain(_require(row, "domain")),
            sub_topic=row.get("sub_topic") or "",
        )

    @property
    def options(self) -> Dict[str, str]:
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }


@dataclass(frozen=True)
class AttemptRecord:
    user_id: str
    question_id: str
    is_correct: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> Dict:
        # created_at is filled by the column default on insert
        return {
            "user_id": self.user_id,
            "question_id": self.question_id,
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class DomainMastery:
    user_id: str
    domain: Domain
    total_attempted: int
    total_correct: int
    accuracy_percentage: float

    @classmethod
    def from_row(cls, row: Dict) -> "DomainMastery":
        attempted = int(row.get("total_attempted") or 0)
        correct = int(row.get("total_correct") or 0)
        accuracy = row.get("accuracy_percentage")
        if accuracy is None or attempted == 0:
            accuracy = accuracy_percentage(attempted, correct)
        return cls(
            user_id=str(_require(row, "user_id")),
            domain=Domain(_require(row, "domain")),
            total_attempted=attempted,
            total_correct=correct,
            accuracy_percentage=float(accuracy),
        )


@dataclass(frozen=True)
class Profile:
    id: str
    full_name: Optional[str]
    current_streak: int
    total_points: int

    @classmethod
    def from_row(cls, row: Dict) -> "Profile":
        return cls(
            id=str(_require(row, "id")),
            full_name=row.get("full_name"),
            current_streak=int(row.get("current_streak") or 0),
            total_points=int(row.get("total_points") or 0),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or "Learner"


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    full_name: Optional[str]
    total_points: int

    @classmethod
    def from_row(cls, row: Dict) -> "LeaderboardEntry":
        return cls(
            id=str(_require(row, "id")),
            full_name=row.get("full_name"),
            total_points=int(row.get("total_points") or 0),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or "Anonymous"
