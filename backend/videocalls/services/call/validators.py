"""
Call Validators

Input checks applied before any state is touched:
- Schedule fields (title, description, duration)
- Update payloads
- Status filters and pagination
"""
from datetime import datetime
from typing import Any, Dict, Optional

from videocalls.config.constants import (
    DEFAULT_CALL_TITLE,
    DEFAULT_CALL_DESCRIPTION,
    DEFAULT_CANCEL_REASON,
    MAX_CALL_DURATION_MIN,
    MIN_CALL_DURATION_MIN,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_CANCEL_REASON_LENGTH,
    MAX_PAGE_SIZE,
)
from videocalls.models.video_call import CallStatus
from .exceptions import CallValidationError


def clean_title(title: Optional[str], default: str = DEFAULT_CALL_TITLE) -> str:
    """Stripped title, falling back to ``default`` when empty."""
    title = (title or "").strip()
    if not title:
        return default
    if len(title) > MAX_TITLE_LENGTH:
        raise CallValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return title


def clean_description(description: Optional[str]) -> str:
    description = (description or DEFAULT_CALL_DESCRIPTION).strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise CallValidationError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    return description


def validate_duration(duration: int) -> int:
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise CallValidationError("Duration must be a whole number of minutes")
    if not MIN_CALL_DURATION_MIN <= duration <= MAX_CALL_DURATION_MIN:
        raise CallValidationError(
            f"Duration must be between {MIN_CALL_DURATION_MIN} and {MAX_CALL_DURATION_MIN} minutes"
        )
    return duration


def validate_scheduled_time(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise CallValidationError("scheduled_time must be a timestamp")
    return value


def clean_update(
    title: Optional[str] = None,
    description: Optional[str] = None,
    scheduled_time: Optional[datetime] = None,
    duration_minutes: Optional[int] = None
) -> Dict[str, Any]:
    """
    Build the change set for an update; omitted fields are left alone.

    Raises:
        CallValidationError if nothing would change or a value is invalid
    """
    changes: Dict[str, Any] = {}
    if title is not None and title.strip():
        changes["title"] = clean_title(title)
    if description is not None:
        changes["description"] = clean_description(description)
    if scheduled_time is not None:
        changes["scheduled_time"] = validate_scheduled_time(scheduled_time)
    if duration_minutes is not None:
        changes["duration_minutes"] = validate_duration(duration_minutes)

    if not changes:
        raise CallValidationError("Nothing to update")
    return changes


def clean_cancel_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip() or DEFAULT_CANCEL_REASON
    if len(reason) > MAX_CANCEL_REASON_LENGTH:
        raise CallValidationError(f"Cancel reason must be at most {MAX_CANCEL_REASON_LENGTH} characters")
    return reason


def clean_notes(notes: Optional[str]) -> str:
    notes = (notes or "").strip()
    if len(notes) > MAX_NOTES_LENGTH:
        raise CallValidationError(f"Notes must be at most {MAX_NOTES_LENGTH} characters")
    return notes


def parse_status_filter(status: Optional[str]) -> Optional[CallStatus]:
    """``None`` / ``"all"`` mean no filter."""
    if status is None or status == "all":
        return None
    try:
        return CallStatus(status)
    except ValueError:
        raise CallValidationError(f"Unknown call status: {status}")


def validate_pagination(page: int, page_size: int) -> None:
    if page < 1:
        raise CallValidationError("page must be 1 or greater")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise CallValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
