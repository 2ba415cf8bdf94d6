"""Request dependencies shared by the routers."""

from fastapi import Request

from taskboard.config import settings
from taskboard.core.board_store import BoardStore, get_board_store
from taskboard.core.sessions import unsign


class NotAuthenticated(Exception):
    """Raised when a protected route is requested without a valid session."""


def get_store() -> BoardStore:
    return get_board_store()


def session_user(request: Request) -> str | None:
    """Return the username stored in the session cookie, if it verifies."""
    return unsign(
        request.cookies.get(settings.session_cookie_name),
        settings.session_secret,
        settings.session_max_age_seconds,
    )


def require_user(request: Request) -> str:
    """
    Guard for protected routes.

    Stores the username on ``request.state.user`` for the templates.

    Raises:
        NotAuthenticated: If the cookie is missing, tampered with or expired
    """
    user = session_user(request)
    if user is None:
        raise NotAuthenticated()
    request.state.user = user
    return user
