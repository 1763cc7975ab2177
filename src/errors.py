"""Error taxonomy for the quiz core. None of these are fatal to the app."""


class QuizError(Exception):
    """Base class for quiz errors."""


class AuthRequired(QuizError):
    """No active Supabase session."""


class FetchFailed(QuizError):
    """A read from Supabase failed. Shown as a transient notice, never retried."""


class ValidationFailed(QuizError):
    """Input rejected locally, before any network call."""


class PersistenceFailed(QuizError):
    """Inserting an attempt record failed."""


class InvalidTransition(QuizError):
    """A quiz session operation was called from the wrong state."""
