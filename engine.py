"""Quiz policy constants: awards, batch sizes, persistence retry. No UI."""
# Awards: correct +10, incorrect +2 (points for trying)
# Accuracy = 100 * correct / attempted, 0 when nothing attempted

POINTS_CORRECT = 10
POINTS_INCORRECT = 2
QUESTION_BATCH_LIMIT = 10
LEADERBOARD_LIMIT = 50
CENTURY_ACHIEVEMENT = 100
OPTION_LABELS = ("A", "B", "C", "D")

SUPABASE_TIMEOUT_SECONDS = 10
PERSIST_MAX_RETRIES = 3
PERSIST_RETRY_BACKOFF_SECONDS = 0.5
