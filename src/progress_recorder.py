"""
Progress Recorder: best-effort persistence of attempt records.

Inserts run on a single background worker so the quiz never waits on the
network. Failed inserts are retried a few times, then parked in `failed`
and logged; they are resubmitted with retry_failed() or reported by flush().
"""
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional

from engine import PERSIST_MAX_RETRIES, PERSIST_RETRY_BACKOFF_SECONDS
from src.errors import PersistenceFailed
from src.models import AttemptRecord

logger = logging.getLogger(__name__)


class ProgressRecorder:

    def __init__(
        self,
        db,
        max_retries: int = PERSIST_MAX_RETRIES,
        backoff_seconds: float = PERSIST_RETRY_BACKOFF_SECONDS,
    ):
        self.db = db
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="progress-recorder")
        self._lock = threading.Lock()
        self._in_flight: List[Future] = []
        self._failed: List[AttemptRecord] = []
        self._closed = False

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._in_flight)

    @property
    def failed(self) -> List[AttemptRecord]:
        with self._lock:
            return list(self._failed)

    def record_attempt(self, user_id: str, question_id: str, is_correct: bool) -> Future:
        """Queue one append-only attempt insert. Returns immediately."""
        return self._submit(AttemptRecord(user_id=user_id, question_id=question_id, is_correct=is_correct))

    def _submit(self, record: AttemptRecord) -> Future:
        with self._lock:
            if self._closed:
                raise RuntimeError("ProgressRecorder is closed")
            future = self._executor.submit(self._persist, record)
            self._in_flight.append(future)
        # runs at once if the insert already finished, so outside the lock
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            if future in self._in_flight:
                self._in_flight.remove(future)

    def _persist(self, record: AttemptRecord) -> bool:
        for attempt in range(1, self.max_retries + 1):
            try:
                self.db.insert_attempt(record)
                return True
            except PersistenceFailed as e:
                logger.warning(
                    "Saving attempt %s failed (try %d/%d): %s",
                    record.question_id, attempt, self.max_retries, e.__cause__ or e,
                )
                if attempt < self.max_retries:
                    time.sleep(self.backoff_seconds * attempt)

        logger.error(f"Giving up on attempt for question {record.question_id}; kept for retry")
        with self._lock:
            self._failed.append(record)
        return False

    def retry_failed(self) -> List[Future]:
        """Resubmit every parked record."""
        with self._lock:
            records, self._failed = self._failed, []
        return [self._submit(r) for r in records]

    def flush(self, timeout: Optional[float] = None) -> List[AttemptRecord]:
        """
        Wait for in-flight inserts.

        Returns:
            Records that could not be saved
        """
        with self._lock:
            futures = list(self._in_flight)
        done, not_done = wait(futures, timeout=timeout)
        with self._lock:
            self._in_flight = [f for f in self._in_flight if f not in done]
        if not_done:
            logger.warning(f"{len(not_done)} attempt inserts still in flight after flush timeout")
        return self.failed

    def close(self, timeout: Optional[float] = None) -> List[AttemptRecord]:
        unsaved = self.flush(timeout)
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=False)
        if unsaved:
            logger.error(f"{len(unsaved)} attempt records were never saved")
        return unsaved
