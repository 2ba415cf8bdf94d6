"""Exception handlers rendering HTML error responses."""

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from taskboard.api.dependencies import NotAuthenticated
from taskboard.api.rendering import VARY_HEADERS, is_htmx, render, render_page

logger = structlog.get_logger(__name__)

LOGIN_URL = "/login"


def render_error(request: Request, status_code: int, message: str) -> Response:
    context = {"status_code": status_code, "message": message}
    if is_htmx(request):
        return render(request, "partials/error.html", context, status_code=status_code)
    return render_page(
        request, "partials/error.html", context, title="Error", status_code=status_code
    )


async def not_authenticated_handler(request: Request, exc: NotAuthenticated) -> Response:
    """Send anonymous users to the login page."""
    logger.info("Unauthenticated request", path=request.url.path)
    if is_htmx(request):
        return Response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"HX-Redirect": LOGIN_URL, **VARY_HEADERS},
        )
    return RedirectResponse(
        LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER, headers=VARY_HEADERS
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = render_error(request, exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Unparseable path or query values are a client error, not a form error."""
    logger.info("Malformed request", path=request.url.path, errors=len(exc.errors()))
    return render_error(request, status.HTTP_400_BAD_REQUEST, "Bad request")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotAuthenticated, not_authenticated_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
