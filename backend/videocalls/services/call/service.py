"""
Call Service - Core Call Management

Orchestrates each operation in a fixed order:
authorization -> (room provider) -> transition -> persist -> notify.

Provider failures while creating a call abort before anything is stored.
Room deletion and notifications are best effort and never change the
outcome of the operation that triggered them.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.config.constants import (
    DEFAULT_CALL_DURATION_MIN,
    INSTANT_CALL_TITLE,
    INSTANT_CALL_DESCRIPTION,
)
from videocalls.models.user import User
from videocalls.models.video_call import VideoCall, CallStatus
from videocalls.models.call_participant import CallParticipant
from videocalls.services.metrics import call_transitions
from videocalls.services.notifications import CallEvent, notify_counterparts
from videocalls.services.protocols import RoomProvider, Notifier

from . import lifecycle
from .access import CallOperation, load_call_for, require_workspace_member
from .exceptions import InternalError
from .participants import build_participants, require_participant
from .validators import (
    clean_title,
    clean_description,
    clean_update,
    clean_cancel_reason,
    clean_notes,
    validate_duration,
    validate_scheduled_time,
    parse_status_filter,
    validate_pagination,
)
from .history import (
    get_workspace_calls,
    get_user_calls,
    get_upcoming_calls,
    get_call_history,
    get_active_calls,
)
from .stats import get_call_stats

logger = logging.getLogger(__name__)


async def _commit(db: AsyncSession, action: str, call: VideoCall) -> None:
    """Commit the call's changes as one unit; roll back and wrap store errors."""
    # rollback expires the record, so read the id first
    call_id = call.id
    try:
        await db.flush()
        call_id = call.id
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[Calls] Failed to persist {action} for call {call_id}: {e}")
        raise InternalError("Server error saving video call") from e
    call_transitions.labels(action=action).inc()


class CallService:
    """Service for the workspace video call lifecycle."""

    # === Creation ===

    @classmethod
    async def schedule_call(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        notifier: Notifier,
        actor: User,
        workspace_id: str,
        scheduled_time: datetime,
        title: Optional[str] = None,
        description: Optional[str] = None,
        duration_minutes: int = DEFAULT_CALL_DURATION_MIN
    ) -> VideoCall:
        """
        Schedule a call between the workspace's client and freelancer.

        The provider room expires one hour after the planned end. If room
        creation fails nothing is stored.
        """
        members = await require_workspace_member(db, workspace_id, actor.id)

        title = clean_title(title)
        description = clean_description(description)
        duration_minutes = validate_duration(duration_minutes)
        scheduled_time = lifecycle.to_utc_naive(validate_scheduled_time(scheduled_time))

        expires_at = lifecycle.scheduled_room_expiry(scheduled_time, duration_minutes)
        room = await provider.create_room(lifecycle.build_room_config(expires_at))

        now = lifecycle.utcnow()
        call = VideoCall(
            workspace_id=workspace_id,
            scheduled_by=actor.id,
            title=title,
            description=description,
            scheduled_time=scheduled_time,
            duration_minutes=duration_minutes,
            status=CallStatus.SCHEDULED.value,
            is_instant=False,
            room_url=room["url"],
            room_name=room["name"],
            room_data=room,
            participants=build_participants(members),
            created_at=now,
            updated_at=now,
        )
        db.add(call)
        await _commit(db, "schedule", call)
        logger.info(f"[Calls] Call {call.id} scheduled in workspace {workspace_id} by {actor.id}")

        scheduler = members.member(actor.id)
        await notify_counterparts(
            notifier, call, actor.id, CallEvent.SCHEDULED,
            scheduled_by=scheduler.to_public_dict(),
        )
        return call

    @classmethod
    async def create_instant_call(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        notifier: Notifier,
        actor: User,
        workspace_id: str
    ) -> Tuple[VideoCall, str]:
        """
        Create a call that is live immediately.

        Returns:
            Tuple of (call, owner access token for the actor)
        """
        members = await require_workspace_member(db, workspace_id, actor.id)
        now = lifecycle.utcnow()

        room = await provider.create_room(
            lifecycle.build_room_config(lifecycle.instant_room_expiry(now))
        )
        token = await provider.create_token(room["name"], actor.id, members.member(actor.id).name, True)

        call = VideoCall(
            workspace_id=workspace_id,
            scheduled_by=actor.id,
            title=INSTANT_CALL_TITLE,
            description=INSTANT_CALL_DESCRIPTION,
            scheduled_time=now,
            duration_minutes=0,
            status=CallStatus.IN_PROGRESS.value,
            is_instant=True,
            started_at=now,
            room_url=room["url"],
            room_name=room["name"],
            room_data=room,
            participants=build_participants(members),
            created_at=now,
            updated_at=now,
        )
        db.add(call)
        await _commit(db, "instant", call)
        logger.info(f"[Calls] Instant call {call.id} created in workspace {workspace_id} by {actor.id}")

        await notify_counterparts(
            notifier, call, actor.id, CallEvent.INSTANT_CREATED, initiated_by=actor.id
        )
        return call, token

    # === Reads ===

    @classmethod
    async def get_call_details(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        actor: User,
        call_id: str
    ) -> Tuple[VideoCall, str]:
        """Call plus a fresh access token (owner if the actor scheduled it)."""
        call = await load_call_for(db, call_id, actor.id, CallOperation.VIEW)
        participant = require_participant(call, actor.id)

        token = await provider.create_token(
            call.room_name,
            actor.id,
            participant.name,
            actor.id == call.scheduled_by,
        )
        return call, token

    @classmethod
    async def list_workspace_calls(
        cls,
        db: AsyncSession,
        actor: User,
        workspace_id: str,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[VideoCall], Dict[str, int]]:
        await require_workspace_member(db, workspace_id, actor.id)
        status_filter = parse_status_filter(status)
        validate_pagination(page, page_size)
        return await get_workspace_calls(db, workspace_id, status_filter, page, page_size)

    @classmethod
    async def list_user_calls(
        cls,
        db: AsyncSession,
        actor: User,
        status: Optional[str] = None
    ) -> List[VideoCall]:
        return await get_user_calls(db, actor.id, parse_status_filter(status))

    @classmethod
    async def list_upcoming_calls(cls, db: AsyncSession, actor: User, workspace_id: str) -> List[VideoCall]:
        await require_workspace_member(db, workspace_id, actor.id)
        return await get_upcoming_calls(db, workspace_id, lifecycle.utcnow())

    @classmethod
    async def list_call_history(
        cls,
        db: AsyncSession,
        actor: User,
        workspace_id: str,
        limit: int = 10
    ) -> List[VideoCall]:
        await require_workspace_member(db, workspace_id, actor.id)
        validate_pagination(1, limit)
        return await get_call_history(db, workspace_id, limit)

    @classmethod
    async def list_active_calls(cls, db: AsyncSession, actor: User, workspace_id: str) -> List[VideoCall]:
        await require_workspace_member(db, workspace_id, actor.id)
        return await get_active_calls(db, workspace_id)

    @classmethod
    async def get_call_stats(cls, db: AsyncSession, actor: User, workspace_id: str) -> Dict[str, Any]:
        await require_workspace_member(db, workspace_id, actor.id)
        return await get_call_stats(db, workspace_id)

    @classmethod
    async def get_room_participants(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        actor: User,
        call_id: str
    ) -> List[Dict[str, Any]]:
        """Live presence reported by the provider for the call's room."""
        call = await load_call_for(db, call_id, actor.id, CallOperation.VIEW)
        return await provider.get_participants(call.room_name)

    # === Transitions ===

    @classmethod
    async def update_call(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        notifier: Notifier,
        actor: User,
        call_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        scheduled_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None
    ) -> VideoCall:
        """Reschedule or retitle a scheduled call (scheduler only)."""
        call = await load_call_for(db, call_id, actor.id, CallOperation.UPDATE)
        changes = clean_update(title, description, scheduled_time, duration_minutes)

        lifecycle.apply_update(call, changes)
        await _commit(db, "update", call)
        logger.info(f"[Calls] Call {call.id} updated by {actor.id}: {sorted(changes)}")

        if "scheduled_time" in changes or "duration_minutes" in changes:
            await cls._extend_room(provider, call)

        await notify_counterparts(notifier, call, actor.id, CallEvent.UPDATED, updated_by=actor.id)
        return call

    @classmethod
    async def cancel_call(
        cls,
        db: AsyncSession,
        provider: RoomProvider,
        notifier: Notifier,
        actor: User,
        call_id: str,
        reason: Optional[str] = None
    ) -> VideoCall:
        """Cancel a scheduled call and tear down its room (best effort)."""
        call = await load_call_for(db, call_id, actor.id, CallOperation.CANCEL)
        reason = clean_cancel_reason(reason)

        lifecycle.apply_cancel(call, actor.id, reason)
        await _commit(db, "cancel", call)
        logger.info(f"[Calls] Call {call.id} cancelled by {actor.id}")

        await notify_counterparts(notifier, call, actor.id, CallEvent.CANCELLED, cancelled_by=actor.id)

        try:
            await provider.delete_room(call.room_name)
        except Exception as e:
            logger.error(f"[Calls] Failed to delete room {call.room_name} for cancelled call {call.id}: {e}")

        return call

    @classmethod
    async def start_call(
        cls,
        db: AsyncSession,
        notifier: Notifier,
        actor: User,
        call_id: str
    ) -> VideoCall:
        call = await load_call_for(db, call_id, actor.id, CallOperation.START)

        lifecycle.apply_start(call)
        await _commit(db, "start", call)
        logger.info(f"[Calls] Call {call.id} started by {actor.id}")

        await notify_counterparts(notifier, call, actor.id, CallEvent.STARTED, started_by=actor.id)
        return call

    @classmethod
    async def end_call(
        cls,
        db: AsyncSession,
        actor: User,
        call_id: str,
        notes: Optional[str] = None
    ) -> VideoCall:
        """Complete an in-progress call; the duration is computed, never supplied."""
        call = await load_call_for(db, call_id, actor.id, CallOperation.END)
        notes = clean_notes(notes)

        lifecycle.apply_end(call, notes)
        await _commit(db, "end", call)
        logger.info(
            f"[Calls] Call {call.id} ended by {actor.id} after {call.actual_duration_minutes} min"
        )
        return call

    @classmethod
    async def join_call(cls, db: AsyncSession, actor: User, call_id: str) -> Tuple[VideoCall, CallParticipant]:
        call = await load_call_for(db, call_id, actor.id, CallOperation.JOIN)
        participant = require_participant(call, actor.id)

        lifecycle.mark_joined(call, participant)
        await _commit(db, "join", call)
        logger.info(f"[Calls] User {actor.id} joined call {call.id}")
        return call, participant

    @classmethod
    async def leave_call(cls, db: AsyncSession, actor: User, call_id: str) -> Tuple[VideoCall, CallParticipant]:
        call = await load_call_for(db, call_id, actor.id, CallOperation.LEAVE)
        participant = require_participant(call, actor.id)

        lifecycle.mark_left(call, participant)
        await _commit(db, "leave", call)
        logger.info(f"[Calls] User {actor.id} left call {call.id} after {participant.duration_minutes} min")
        return call, participant

    # === Helpers ===

    @staticmethod
    async def _extend_room(provider: RoomProvider, call: VideoCall) -> None:
        """Move the room expiry along with a rescheduled call (best effort)."""
        expires_at = lifecycle.scheduled_room_expiry(call.scheduled_time, call.duration_minutes)
        try:
            await provider.update_room(call.room_name, {"properties": {"exp": expires_at}})
        except Exception as e:
            logger.warning(f"[Calls] Could not move expiry of room {call.room_name}: {e}")
