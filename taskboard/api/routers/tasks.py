"""Task fragments nested under a board."""

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, Response, status
import structlog

from taskboard.api.dependencies import get_store, require_user
from taskboard.api.rendering import is_htmx, redirect, render, render_fragment_or_page
from taskboard.api.routers.boards import get_board_or_404, render_board_page
from taskboard.core.board_store import BoardStore
from taskboard.core.models import Task, TaskFilter
from taskboard.core.validation import FormResult, validate_task_form

logger = structlog.get_logger(__name__)
router = APIRouter(
    prefix="/boards/{board_id}/tasks",
    tags=["tasks"],
    dependencies=[Depends(require_user)],
)


async def get_task_or_404(board_id: int, task_id: int, store: BoardStore) -> Task:
    """Get task by ID or raise 404. Also 404s when the board is missing."""
    task = await store.get_task(board_id, task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def board_url(board_id: int, query: str = "", task_filter: TaskFilter = TaskFilter.ALL) -> str:
    params = {}
    if query:
        params["q"] = query
    if task_filter is not TaskFilter.ALL:
        params["filter"] = task_filter.value
    suffix = f"?{urlencode(params)}" if params else ""
    return f"/boards/{board_id}{suffix}"


@router.get("")
async def list_tasks(
    request: Request,
    board_id: int,
    q: str = Query("", max_length=100),
    task_filter: TaskFilter = Query(TaskFilter.ALL, alias="filter"),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Search and filter a board's tasks.

    Only htmx requests get the list fragment; a browser is sent to the
    board page with the same search applied.
    """
    board = await get_board_or_404(board_id, store)
    if not is_htmx(request):
        return redirect(request, board_url(board_id, q, task_filter))

    tasks = await store.list_tasks(board.id, q or None, task_filter)
    return render(
        request, "partials/task_items.html", {"board_id": board.id, "tasks": tasks}
    )


@router.post("")
async def create_task(
    request: Request,
    board_id: int,
    title: str = Form(""),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Add a task to a board.

    Expected behavior:
    - Invalid input: 422 with the form re-rendered
    - htmx: blank form, the new item appended and the counter, out of band
    - Plain form post: redirect back to the board
    """
    board = await get_board_or_404(board_id, store)

    form = validate_task_form(title)
    if not form.is_valid:
        if is_htmx(request):
            return render(
                request,
                "partials/task_form.html",
                {"board_id": board.id, "form": form},
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        return await render_board_page(
            request,
            store,
            board,
            task_form=form,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    task = await store.create_task(board.id, form.values["title"])
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Board not found")

    logger.info("Task created", board_id=board.id, task_id=task.id, user=request.state.user)
    if not is_htmx(request):
        return redirect(request, board_url(board.id))

    return render(
        request,
        "partials/task_created.html",
        {
            "board_id": board.id,
            "task": task,
            "form": FormResult(),
            "counts": await store.count_tasks(board.id),
        },
    )


@router.post("/clear-completed")
async def clear_completed(
    request: Request,
    board_id: int,
    q: str = Form(""),
    task_filter: TaskFilter = Form(TaskFilter.ALL, alias="filter"),
    store: BoardStore = Depends(get_store),
) -> Response:
    board = await get_board_or_404(board_id, store)
    removed = await store.clear_completed(board.id)
    logger.info("Cleared completed tasks", board_id=board.id, removed=removed)

    if not is_htmx(request):
        return redirect(request, board_url(board.id, q, task_filter))

    return render(
        request,
        "partials/task_list_update.html",
        {
            "board_id": board.id,
            "tasks": await store.list_tasks(board.id, q or None, task_filter),
            "counts": await store.count_tasks(board.id),
        },
    )


@router.get("/{task_id}")
async def show_task(
    request: Request, board_id: int, task_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    """Single task item, used to cancel an inline edit."""
    task = await get_task_or_404(board_id, task_id, store)
    if not is_htmx(request):
        return redirect(request, board_url(board_id))
    return render(request, "partials/task_item.html", {"board_id": board_id, "task": task})


@router.get("/{task_id}/edit")
async def edit_task(
    request: Request, board_id: int, task_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    task = await get_task_or_404(board_id, task_id, store)
    return render_fragment_or_page(
        request,
        "partials/task_edit_form.html",
        {
            "board_id": board_id,
            "task": task,
            "form": FormResult(values={"title": task.title}),
            "list_item": True,
        },
        title="Edit task",
    )


@router.api_route("/{task_id}", methods=["PUT", "POST"])
async def update_task(
    request: Request,
    board_id: int,
    task_id: int,
    title: str = Form(""),
    store: BoardStore = Depends(get_store),
) -> Response:
    task = await get_task_or_404(board_id, task_id, store)

    form = validate_task_form(title)
    if not form.is_valid:
        return render_fragment_or_page(
            request,
            "partials/task_edit_form.html",
            {"board_id": board_id, "task": task, "form": form, "list_item": True},
            title="Edit task",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    updated = await store.update_task(board_id, task_id, form.values["title"])
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    logger.info("Task updated", board_id=board_id, task_id=task_id)
    if not is_htmx(request):
        return redirect(request, board_url(board_id))
    return render(request, "partials/task_item.html", {"board_id": board_id, "task": updated})


@router.api_route("/{task_id}/toggle", methods=["PATCH", "POST"])
async def toggle_task(
    request: Request, board_id: int, task_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    task = await store.toggle_task(board_id, task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    logger.info("Task toggled", board_id=board_id, task_id=task_id, done=task.done)
    if not is_htmx(request):
        return redirect(request, board_url(board_id))
    return render(
        request,
        "partials/task_toggled.html",
        {"board_id": board_id, "task": task, "counts": await store.count_tasks(board_id)},
    )


@router.delete("/{task_id}")
async def delete_task(
    request: Request,
    board_id: int,
    task_id: int,
    q: str = Form(""),
    task_filter: TaskFilter = Form(TaskFilter.ALL, alias="filter"),
    store: BoardStore = Depends(get_store),
) -> Response:
    """Remove a task.

    htmx callers swap the item out with the empty body. The counter is sent
    out of band, with the "no matching tasks" placeholder when the
    searched list is now empty.
    """
    if not await store.delete_task(board_id, task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    logger.info("Task deleted", board_id=board_id, task_id=task_id)
    if not is_htmx(request):
        return redirect(request, board_url(board_id))
    return render(
        request,
        "partials/task_deleted.html",
        {
            "board_id": board_id,
            "counts": await store.count_tasks(board_id),
            "list_empty": not await store.list_tasks(board_id, q or None, task_filter),
        },
    )


@router.post("/{task_id}/delete")
async def delete_task_form(
    request: Request, board_id: int, task_id: int, store: BoardStore = Depends(get_store)
) -> Response:
    """Form fallback for browsers without htmx."""
    return await delete_task(
        request, board_id, task_id, q="", task_filter=TaskFilter.ALL, store=store
    )
