"""
Session context for the signed-in user.
Pages receive a SessionContext as a parameter instead of asking Supabase
for the current user themselves.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from src.errors import AuthRequired, ValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: Optional[str] = None


def _context_from_session(session) -> Optional[SessionContext]:
    if session is None or getattr(session, "user", None) is None:
        return None
    user = session.user
    return SessionContext(user_id=str(user.id), email=getattr(user, "email", None))


def get_current_session(client: Client) -> Optional[SessionContext]:
    """Return the active session context, or None when nobody is signed in."""
    return _context_from_session(client.auth.get_session())


def require_session(client: Client) -> SessionContext:
    ctx = get_current_session(client)
    if ctx is None:
        raise AuthRequired("Sign in to continue")
    return ctx


def sign_in(client: Client, email: str, password: str) -> SessionContext:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationFailed("Email and password are required")
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.warning(f"Sign in failed for {email}: {e}")
        raise AuthRequired("Invalid email or password") from e
    ctx = _context_from_session(response.session)
    if ctx is None:
        raise AuthRequired("Invalid email or password")
    logger.info("Signed in user %s", ctx.user_id)
    return ctx


def sign_out(client: Client) -> None:
    client.auth.sign_out()
