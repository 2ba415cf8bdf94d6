"""Validation of submitted HTML forms."""

from dataclasses import dataclass, field

BOARD_NAME_MAX = 50
BOARD_DESCRIPTION_MAX = 200
TASK_TITLE_MAX = 100


@dataclass
class FormResult:
    """
    Outcome of validating one form submission.

    Attributes:
        values: Submitted values with surrounding whitespace removed, kept
            even when invalid so the form can be re-rendered as typed
        errors: Message per field name; empty when the submission is valid
    """

    values: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _check_length(result: FormResult, name: str, label: str, limit: int) -> None:
    if len(result.values[name]) > limit:
        result.errors[name] = f"{label} must be at most {limit} characters"


def validate_board_form(name: str | None, description: str | None) -> FormResult:
    """Name is required; description is optional."""
    result = FormResult(values={"name": _clean(name), "description": _clean(description)})

    if not result.values["name"]:
        result.errors["name"] = "Name is required"
    else:
        _check_length(result, "name", "Name", BOARD_NAME_MAX)
    _check_length(result, "description", "Description", BOARD_DESCRIPTION_MAX)

    return result


def validate_task_form(title: str | None) -> FormResult:
    result = FormResult(values={"title": _clean(title)})

    if not result.values["title"]:
        result.errors["title"] = "Title is required"
    else:
        _check_length(result, "title", "Title", TASK_TITLE_MAX)

    return result


def validate_login_form(username: str | None, password: str | None) -> FormResult:
    # Passwords are compared as typed, only the username is stripped
    result = FormResult(values={"username": _clean(username), "password": password or ""})

    if not result.values["username"]:
        result.errors["username"] = "Username is required"
    if not result.values["password"]:
        result.errors["password"] = "Password is required"

    return result
