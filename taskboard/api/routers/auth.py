"""Login and logout."""

from fastapi import APIRouter, Form, Request, Response, status
import structlog

from taskboard.api.dependencies import session_user
from taskboard.api.rendering import redirect, render
from taskboard.config import settings
from taskboard.core.sessions import check_credentials, sign
from taskboard.core.validation import validate_login_form

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["auth"])

HOME_URL = "/boards"


def login_form(
    request: Request,
    values: dict[str, str] | None = None,
    errors: dict[str, str] | None = None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    # Never echo the password back into the form
    shown = {"username": (values or {}).get("username", "")}
    return render(
        request,
        "login.html",
        {"values": shown, "errors": errors or {}, "message": message},
        status_code=status_code,
    )


@router.get("/login")
async def login_page(request: Request) -> Response:
    if session_user(request) is not None:
        return redirect(request, HOME_URL)
    return login_form(request)


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
) -> Response:
    """Check credentials and start a session.

    Expected behavior:
    - Missing fields: 422 with the form and per-field messages
    - Wrong credentials: 401 with the form and a generic message
    - Success: signed session cookie and redirect to the boards
    """
    form = validate_login_form(username, password)
    if not form.is_valid:
        return login_form(
            request, form.values, form.errors, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    if not check_credentials(
        form.values["username"],
        form.values["password"],
        settings.admin_username,
        settings.admin_password,
    ):
        logger.warning("Login failed", username=form.values["username"])
        return login_form(
            request,
            form.values,
            message="Invalid username or password",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    logger.info("Login succeeded", username=form.values["username"])
    response = redirect(request, HOME_URL)
    response.set_cookie(
        value=sign(form.values["username"], settings.session_secret),
        **settings.get_cookie_config(),
    )
    return response


@router.post("/logout")
async def logout(request: Request) -> Response:
    response = redirect(request, "/login")
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    logger.info("Logged out", username=session_user(request))
    return response
