"""Board pages and fragments."""

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, Response, status
import structlog

from taskboard.api.dependencies import get_store, require_user
from taskboard.api.rendering import is_htmx, redirect, render, render_fragment_or_page
from taskboard.core.board_store import BoardStore
from taskboard.core.models import Board, TaskFilter
from taskboard.core.validation import FormResult, validate_board_form

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/boards", tags=["boards"], dependencies=[Depends(require_user)])


async def get_board_or_404(board_id: int, store: BoardStore) -> Board:
    """Get board by ID or raise 404."""
    board = await store.get_board(board_id)
    if board is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Board not found")
    return board


async def render_board_page(
    request: Request,
    store: BoardStore,
    board: Board,
    *,
    query: str = "",
    task_filter: TaskFilter = TaskFilter.ALL,
    task_form: FormResult | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Render the full board page with its task list and counter."""
    context = {
        "board": board,
        "board_id": board.id,
        "tasks": await store.list_tasks(board.id, query or None, task_filter),
        "counts": await store.count_tasks(board.id),
        "query": query,
        "task_filter": task_filter.value,
        "filters": [f.value for f in TaskFilter],
        "form": task_form or FormResult(),
    }
    return render(request, "board.html", context, status_code=status_code)


@router.get("")
async def list_boards(
    request: Request,
    q: str = Query("", max_length=100),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Board index.

    htmx requests (live search) receive only the matching rows.
    """
    boards = await store.list_boards(q or None)
    if is_htmx(request):
        return render(request, "partials/board_rows.html", {"boards": boards})

    return render(
        request,
        "boards.html",
        {
            "boards": boards,
            "query": q,
            "board_count": await store.board_count(),
            "form": FormResult(),
        },
    )


@router.get("/new")
async def new_board(request: Request) -> Response:
    return render_fragment_or_page(
        request, "partials/board_form.html", {"form": FormResult()}, title="New board"
    )


@router.post("")
async def create_board(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Create a board.

    Expected behavior:
    - Invalid input: 422 with the form re-rendered
    - htmx: blank form, new row and board count out of band
    - Plain form post: redirect to the new board
    """
    form = validate_board_form(name, description)
    if not form.is_valid:
        return render_fragment_or_page(
            request,
            "partials/board_form.html",
            {"form": form},
            title="New board",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    board = await store.create_board(form.values["name"], form.values["description"])
    logger.info("Board created", board_id=board.id, user=request.state.user)

    if not is_htmx(request):
        return redirect(request, f"/boards/{board.id}")

    return render(
        request,
        "partials/board_created.html",
        {"board": board, "form": FormResult(), "board_count": await store.board_count()},
    )


@router.get("/{board_id}")
async def show_board(
    request: Request,
    board_id: int,
    q: str = Query("", max_length=100),
    task_filter: TaskFilter = Query(TaskFilter.ALL, alias="filter"),
    store: BoardStore = Depends(get_store),
) -> Response:
    board = await get_board_or_404(board_id, store)
    return await render_board_page(request, store, board, query=q, task_filter=task_filter)


@router.get("/{board_id}/header")
async def board_header(
    request: Request, board_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    """Read-only board header, used to cancel an inline edit."""
    board = await get_board_or_404(board_id, store)
    return render(request, "partials/board_header.html", {"board": board})


@router.get("/{board_id}/edit")
async def edit_board(
    request: Request, board_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    board = await get_board_or_404(board_id, store)
    form = FormResult(values={"name": board.name, "description": board.description})
    return render_fragment_or_page(
        request,
        "partials/board_edit_form.html",
        {"board": board, "form": form},
        title=f"Edit {board.name}",
    )


@router.api_route("/{board_id}", methods=["PUT", "POST"])
async def update_board(
    request: Request,
    board_id: int,
    name: str = Form(""),
    description: str = Form(""),
    store: BoardStore = Depends(get_store),
) -> Response:
    board = await get_board_or_404(board_id, store)

    form = validate_board_form(name, description)
    if not form.is_valid:
        return render_fragment_or_page(
            request,
            "partials/board_edit_form.html",
            {"board": board, "form": form},
            title=f"Edit {board.name}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    updated = await store.update_board(board_id, form.values["name"], form.values["description"])
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Board not found")

    logger.info("Board updated", board_id=board_id, user=request.state.user)
    if is_htmx(request):
        return render(request, "partials/board_header.html", {"board": updated})
    return redirect(request, f"/boards/{board_id}")


@router.delete("/{board_id}")
async def delete_board(
    request: Request,
    board_id: int,
    q: str = Form(""),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Delete a board and its tasks.

    htmx callers swap the row out with the empty body. The board count is
    sent out of band, with the "no matching boards" placeholder when the
    searched list is now empty.
    """
    if not await store.delete_board(board_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Board not found")

    logger.info("Board deleted", board_id=board_id, user=request.state.user)
    if is_htmx(request):
        return render(
            request,
            "partials/board_deleted.html",
            {
                "board_count": await store.board_count(),
                "list_empty": not await store.list_boards(q or None),
            },
        )
    return redirect(request, "/boards")


@router.post("/{board_id}/delete")
async def delete_board_form(
    request: Request, board_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    """Form fallback for browsers without htmx."""
    return await delete_board(request, board_id, q="", store=store)
