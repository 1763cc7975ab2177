"""Fetch a batch of practice questions, optionally for one domain."""
import logging
from typing import List, Optional, Union

from engine import QUESTION_BATCH_LIMIT
from src.database import DatabaseClient
from src.models import Domain, Question

logger = logging.getLogger(__name__)


def parse_domain(value: Union[str, Domain, None]) -> Optional[Domain]:
    """Map a raw filter to a Domain. Anything outside the enum means no filter."""
    if value is None or isinstance(value, Domain):
        return value
    try:
        return Domain(value)
    except ValueError:
        logger.info("Ignoring unknown domain filter %r", value)
        return None


def load_questions(
    db: DatabaseClient,
    domain_filter: Union[str, Domain, None] = None,
    limit: int = QUESTION_BATCH_LIMIT,
) -> List[Question]:
    """
    Load at most `limit` questions in store order.

    Raises FetchFailed if the read fails (no retry). Rows that do not
    validate are skipped. An empty list is a normal result.
    """
    domain = parse_domain(domain_filter)
    limit = max(0, min(limit, QUESTION_BATCH_LIMIT))
    rows = db.get_questions(domain=domain, limit=limit)

    questions = []
    for row in rows[:limit]:
        try:
            questions.append(Question.from_row(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed question {row.get('id')}: {e}")
    logger.info(f"Loaded {len(questions)} questions (domain={domain.value if domain else 'any'})")
    return questions
