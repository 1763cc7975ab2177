"""
Quiz Runner: in-memory state machine for one practice session.
Answering -> Feedback -> (Answering | Complete). Scoring is an exact label match.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from engine import POINTS_CORRECT, POINTS_INCORRECT
from src.auth import SessionContext
from src.errors import InvalidTransition, ValidationFailed
from src.models import Question

logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    ANSWERING = "answering"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Tally:
    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    points_awarded: int
    selected: str
    correct_answer: str
    explanation: str


class QuizSession:
    """Runs one pass over a fixed batch of questions for one user."""

    def __init__(self, ctx: SessionContext, questions: Sequence[Question], recorder):
        """
        Args:
            ctx: Signed-in user the attempts belong to
            questions: Batch from the session loader; copied, never re-fetched
            recorder: Anything with record_attempt(user_id, question_id, is_correct)
        """
        if not questions:
            raise ValueError("A quiz session needs at least one question")
        self.ctx = ctx
        self.questions = tuple(questions)
        self.recorder = recorder

        self.state = QuizState.ANSWERING
        self.index = 0
        self.selection: Optional[str] = None
        self.last_result: Optional[AnswerResult] = None
        self.tally = Tally()

    def __len__(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.state == QuizState.COMPLETE:
            return None
        return self.questions[self.index]

    @property
    def show_feedback(self) -> bool:
        return self.state == QuizState.FEEDBACK

    @property
    def is_last_question(self) -> bool:
        return self.index + 1 == len(self.questions)

    def _expect(self, state: QuizState, action: str) -> None:
        if self.state != state:
            raise InvalidTransition(f"Cannot {action} while {self.state.value}")

    def select_option(self, label: str) -> None:
        """Record a tentative choice. Does not change state."""
        self._expect(QuizState.ANSWERING, "select an option")
        self.selection = label

    def submit_answer(self) -> AnswerResult:
        """
        Score the current selection and move to Feedback.

        Exactly one attempt is handed to the recorder after the tally is
        updated; its completion is not awaited and a recorder error is only
        logged.

        Raises:
            ValidationFailed: nothing selected (no attempt recorded)
            InvalidTransition: not in Answering
        """
        self._expect(QuizState.ANSWERING, "submit an answer")
        if not self.selection:
            raise ValidationFailed("Please select an answer")

        question = self.questions[self.index]
        is_correct = self.selection == question.correct_answer
        self.tally = Tally(
            correct=self.tally.correct + (1 if is_correct else 0),
            total=self.tally.total + 1,
        )

        self.last_result = AnswerResult(
            is_correct=is_correct,
            points_awarded=POINTS_CORRECT if is_correct else POINTS_INCORRECT,
            selected=self.selection,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
        )
        self.state = QuizState.FEEDBACK

        try:
            self.recorder.record_attempt(self.ctx.user_id, question.id, is_correct)
        except Exception as e:
            logger.error(f"Could not queue attempt for question {question.id}: {e}")
        logger.debug(f"Answer recorded: Q={question.id}, Correct={is_correct}")
        return self.last_result

    def advance(self) -> Optional[Tally]:
        """
        Move past the feedback screen.

        Returns:
            None when another question follows, the final Tally once the
            last question is done (state becomes Complete).
        """
        self._expect(QuizState.FEEDBACK, "advance")
        if self.index + 1 < len(self.questions):
            self.index += 1
            self.selection = None
            self.last_result = None
            self.state = QuizState.ANSWERING
            return None

        self.state = QuizState.COMPLETE
        logger.info(f"Quiz complete for {self.ctx.user_id}: {self.tally.correct}/{self.tally.total}")
        return self.tally
