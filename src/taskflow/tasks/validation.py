# src/taskflow/tasks/validation.py

from __future__ import annotations

from ..core.errors import ValidationError

MAX_TITLE_LENGTH = 200


def validate_title(raw: str) -> str:
    """
    Normalize a task title and check it is acceptable.

    Returns the stripped title. Raises ValidationError(kind="empty" | "too_long").
    Every code path that sets a title goes through here.
    """
    normalized = (raw or "").strip()
    if not normalized:
        raise ValidationError(ValidationError.EMPTY, "Title must not be empty.")
    if len(normalized) > MAX_TITLE_LENGTH:
        raise ValidationError(
            ValidationError.TOO_LONG,
            f"Title is too long ({len(normalized)} > {MAX_TITLE_LENGTH} characters).",
        )
    return normalized
