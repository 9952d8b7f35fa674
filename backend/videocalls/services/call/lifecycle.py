"""
Call Lifecycle Management - the transition engine.

Every status change goes through ``ensure_transition`` and the TRANSITIONS
table below; the ``apply_*`` functions mutate a record in memory only after
the check passed, so a refused operation leaves the record untouched.
Persistence, authorization and side effects live in service.py.

    scheduled --start--> in_progress --end--> completed
        |
        +--cancel--> cancelled

Instant calls are created directly in ``in_progress``. ``failed`` is a
terminal state no operation leads to or out of.
"""
import logging
import math
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, Optional

from videocalls.config.constants import (
    INSTANT_ROOM_TTL_SEC,
    ROOM_EXPIRY_GRACE_SEC,
    ROOM_MAX_PARTICIPANTS,
)
from videocalls.models.database import utcnow as _db_utcnow
from videocalls.models.video_call import VideoCall, CallStatus
from videocalls.models.call_participant import CallParticipant
from .exceptions import InvalidTransitionError, CallValidationError

logger = logging.getLogger(__name__)


class CallAction(str, Enum):
    UPDATE = "update"
    CANCEL = "cancel"
    START = "start"
    END = "end"
    JOIN = "join"
    LEAVE = "leave"


# action -> (allowed source states, resulting state)
TRANSITIONS: Dict[CallAction, tuple[frozenset[CallStatus], CallStatus]] = {
    CallAction.UPDATE: (frozenset({CallStatus.SCHEDULED}), CallStatus.SCHEDULED),
    CallAction.CANCEL: (frozenset({CallStatus.SCHEDULED}), CallStatus.CANCELLED),
    CallAction.START: (frozenset({CallStatus.SCHEDULED}), CallStatus.IN_PROGRESS),
    CallAction.END: (frozenset({CallStatus.IN_PROGRESS}), CallStatus.COMPLETED),
    CallAction.JOIN: (frozenset({CallStatus.IN_PROGRESS}), CallStatus.IN_PROGRESS),
    CallAction.LEAVE: (frozenset({CallStatus.IN_PROGRESS}), CallStatus.IN_PROGRESS),
}

UPDATABLE_FIELDS = ("title", "description", "scheduled_time", "duration_minutes")


# === Clock & time helpers ===

def utcnow() -> datetime:
    """Clock used by every transition (patched in tests)."""
    return _db_utcnow()


def to_utc_naive(value: datetime) -> datetime:
    """Normalize to the naive-UTC form stored in the database."""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def to_unix(value: datetime) -> int:
    """Unix seconds, reading naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return round(value.timestamp())


def compute_duration_minutes(started_at: datetime, ended_at: datetime) -> int:
    """Whole minutes between two instants, halves rounded up (32m40s -> 33)."""
    seconds = (ended_at - started_at).total_seconds()
    if seconds < 0:
        raise CallValidationError("End time precedes start time")
    return math.floor(seconds / 60 + 0.5)


def scheduled_room_expiry(scheduled_time: datetime, duration_minutes: int) -> int:
    """Room stays open until one hour after the planned end."""
    return to_unix(scheduled_time) + duration_minutes * 60 + ROOM_EXPIRY_GRACE_SEC


def instant_room_expiry(now: datetime) -> int:
    return to_unix(now) + INSTANT_ROOM_TTL_SEC


def build_room_config(expires_at: int) -> Dict[str, Any]:
    """Room configuration sent to the provider for every call."""
    return {
        "privacy": "private",
        "properties": {
            "enable_chat": True,
            "enable_screenshare": True,
            "start_audio_off": False,
            "start_video_off": False,
            "exp": expires_at,
            "max_participants": ROOM_MAX_PARTICIPANTS,
        },
    }


# === Transition checks ===

def ensure_transition(call: VideoCall, action: CallAction) -> CallStatus:
    """
    Validate ``action`` against the call's current status.

    Returns:
        The status the call will have after the action.

    Raises:
        InvalidTransitionError if the action is not allowed from the current status.
    """
    sources, target = TRANSITIONS[action]
    current = call.call_status
    if current not in sources:
        logger.info(f"[Lifecycle] Refused {action.value} on call {call.id} ({current.value})")
        raise InvalidTransitionError(action.value, current.value)
    return target


# === Mutations ===

def apply_update(call: VideoCall, changes: Dict[str, Any], now: Optional[datetime] = None) -> VideoCall:
    """Change schedule fields of a scheduled call. Unknown keys are rejected."""
    ensure_transition(call, CallAction.UPDATE)

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise CallValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        if field == "scheduled_time":
            value = to_utc_naive(value)
        setattr(call, field, value)

    call.updated_at = now or utcnow()
    return call


def apply_cancel(
    call: VideoCall,
    actor_id: str,
    reason: str,
    now: Optional[datetime] = None
) -> VideoCall:
    target = ensure_transition(call, CallAction.CANCEL)
    now = now or utcnow()

    call.status = target.value
    call.cancel_reason = reason
    call.cancelled_by = actor_id
    call.cancelled_at = now
    call.updated_at = now
    return call


def apply_start(call: VideoCall, now: Optional[datetime] = None) -> VideoCall:
    target = ensure_transition(call, CallAction.START)
    now = now or utcnow()

    call.status = target.value
    call.started_at = now
    call.updated_at = now
    return call


def apply_end(call: VideoCall, notes: str, now: Optional[datetime] = None) -> VideoCall:
    """
    Complete an in-progress call.

    The measured duration is derived from started_at/ended_at only; callers
    never supply it. Participants still present are marked as left at the
    same instant.
    """
    target = ensure_transition(call, CallAction.END)
    now = now or utcnow()

    started_at = call.started_at or now
    # ended_at never precedes started_at, even if the clock stepped back
    ended_at = max(now, started_at)

    call.status = target.value
    call.started_at = started_at
    call.ended_at = ended_at
    call.notes = notes
    call.actual_duration_minutes = compute_duration_minutes(started_at, ended_at)
    call.updated_at = now

    for participant in call.participants:
        if participant.is_present:
            _close_participant(participant, ended_at)

    return call


def mark_joined(call: VideoCall, participant: CallParticipant, now: Optional[datetime] = None) -> CallParticipant:
    """Record a participant entering the room (rejoining clears left_at)."""
    ensure_transition(call, CallAction.JOIN)
    now = now or utcnow()

    participant.joined_at = now
    participant.left_at = None
    participant.duration_minutes = None
    call.updated_at = now
    return participant


def mark_left(call: VideoCall, participant: CallParticipant, now: Optional[datetime] = None) -> CallParticipant:
    """Record a participant leaving the room."""
    ensure_transition(call, CallAction.LEAVE)
    if not participant.is_present:
        raise CallValidationError("Participant is not in the call")
    now = now or utcnow()

    _close_participant(participant, now)
    call.updated_at = now
    return participant


def _close_participant(participant: CallParticipant, left_at: datetime) -> None:
    left_at = max(left_at, participant.joined_at)
    participant.left_at = left_at
    participant.duration_minutes = compute_duration_minutes(participant.joined_at, left_at)
