"""
Calls API - Endpoints for workspace video calls

Implements:
- Scheduling and instant calls
- Call details with a per-request access token
- Listings and statistics per workspace
- Lifecycle transitions (update, cancel, start, end)
- Participant join/leave bookkeeping
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.api.deps import get_current_user, get_db, get_notifier, get_room_provider
from videocalls.config.constants import CALL_HISTORY_LIMIT, DEFAULT_PAGE_SIZE
from videocalls.models.user import User
from videocalls.models.video_call import VideoCall
from videocalls.services.protocols import Notifier, RoomProvider
from videocalls.services.call import (
    CallService,
    CallServiceError,
    CallNotFoundError,
    WorkspaceNotFoundError,
    InvalidTransitionError,
    CallValidationError,
    ProviderError,
)
from videocalls.schemas.call import (
    ScheduleCallRequest,
    UpdateCallRequest,
    CancelCallRequest,
    EndCallRequest,
    CallRecord,
    CallResponse,
    CallWithTokenResponse,
    CallListResponse,
    CallCollectionResponse,
    CallStatsResponse,
    ParticipantInfo,
    ParticipantUpdateResponse,
    RoomParticipantsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _record(call: VideoCall) -> CallRecord:
    return CallRecord(**call.to_dict())


def _http_error(e: CallServiceError, action: str) -> HTTPException:
    """Translate a service error; unexpected ones get a generic message."""
    if isinstance(e, (CallNotFoundError, WorkspaceNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, CallValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ProviderError):
        return HTTPException(status_code=502, detail="Video call provider unavailable")
    logger.error(f"[API] {action} failed: {e}")
    return HTTPException(status_code=500, detail=f"Server error {action}")


# === Workspace scoped ===

@router.post("/workspaces/{workspace_id}/calls/schedule", response_model=CallResponse, status_code=201)
async def schedule_call(
    workspace_id: str,
    req: ScheduleCallRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider),
    notifier: Notifier = Depends(get_notifier)
):
    """Schedule a call between the workspace's client and freelancer."""
    try:
        call = await CallService.schedule_call(
            db, provider, notifier, current_user, workspace_id,
            scheduled_time=req.scheduled_time,
            title=req.title,
            description=req.description,
            duration_minutes=req.duration,
        )
    except CallServiceError as e:
        raise _http_error(e, "scheduling video call")

    return CallResponse(message="Video call scheduled successfully", call=_record(call))


@router.post("/workspaces/{workspace_id}/calls/instant", response_model=CallWithTokenResponse, status_code=201)
async def create_instant_call(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider),
    notifier: Notifier = Depends(get_notifier)
):
    """Open a call right away; the response carries the caller's owner token."""
    try:
        call, token = await CallService.create_instant_call(
            db, provider, notifier, current_user, workspace_id
        )
    except CallServiceError as e:
        raise _http_error(e, "creating instant call")

    return CallWithTokenResponse(
        message="Instant call created successfully",
        call=_record(call),
        access_token=token,
    )


@router.get("/workspaces/{workspace_id}/calls", response_model=CallListResponse)
async def list_workspace_calls(
    workspace_id: str,
    status: Optional[str] = None,
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Calls of a workspace, newest scheduled time first, optionally by status."""
    try:
        calls, pagination = await CallService.list_workspace_calls(
            db, current_user, workspace_id, status=status, page=page, page_size=page_size
        )
    except CallServiceError as e:
        raise _http_error(e, "fetching calls")

    return CallListResponse(calls=[_record(c) for c in calls], **pagination)


@router.get("/workspaces/{workspace_id}/calls/upcoming", response_model=CallCollectionResponse)
async def list_upcoming_calls(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        calls = await CallService.list_upcoming_calls(db, current_user, workspace_id)
    except CallServiceError as e:
        raise _http_error(e, "fetching upcoming calls")
    return CallCollectionResponse(calls=[_record(c) for c in calls])


@router.get("/workspaces/{workspace_id}/calls/history", response_model=CallCollectionResponse)
async def list_call_history(
    workspace_id: str,
    limit: int = Query(CALL_HISTORY_LIMIT),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        calls = await CallService.list_call_history(db, current_user, workspace_id, limit)
    except CallServiceError as e:
        raise _http_error(e, "fetching call history")
    return CallCollectionResponse(calls=[_record(c) for c in calls])


@router.get("/workspaces/{workspace_id}/calls/active", response_model=CallCollectionResponse)
async def list_active_calls(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        calls = await CallService.list_active_calls(db, current_user, workspace_id)
    except CallServiceError as e:
        raise _http_error(e, "fetching active calls")
    return CallCollectionResponse(calls=[_record(c) for c in calls])


@router.get("/workspaces/{workspace_id}/call-stats", response_model=CallStatsResponse)
async def get_call_stats(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Status distribution, totals and the five most recent calls."""
    try:
        stats = await CallService.get_call_stats(db, current_user, workspace_id)
    except CallServiceError as e:
        raise _http_error(e, "fetching call statistics")
    return CallStatsResponse(**stats)


# === Call scoped ===

@router.get("/calls/mine", response_model=CallCollectionResponse)
async def list_my_calls(
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Every call the current user scheduled or takes part in."""
    try:
        calls = await CallService.list_user_calls(db, current_user, status)
    except CallServiceError as e:
        raise _http_error(e, "fetching calls")
    return CallCollectionResponse(calls=[_record(c) for c in calls])


@router.get("/calls/{call_id}", response_model=CallWithTokenResponse)
async def get_call(
    call_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider)
):
    """Call details plus a fresh room access token for the current user."""
    try:
        call, token = await CallService.get_call_details(db, provider, current_user, call_id)
    except CallServiceError as e:
        raise _http_error(e, "fetching call details")

    return CallWithTokenResponse(message="Call details", call=_record(call), access_token=token)


@router.put("/calls/{call_id}", response_model=CallResponse)
async def update_call(
    call_id: str,
    req: UpdateCallRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider),
    notifier: Notifier = Depends(get_notifier)
):
    """Change schedule fields. Only the scheduler, only while scheduled."""
    try:
        call = await CallService.update_call(
            db, provider, notifier, current_user, call_id,
            title=req.title,
            description=req.description,
            scheduled_time=req.scheduled_time,
            duration_minutes=req.duration,
        )
    except CallServiceError as e:
        raise _http_error(e, "updating call")

    return CallResponse(message="Call updated successfully", call=_record(call))


@router.put("/calls/{call_id}/cancel", response_model=CallResponse)
async def cancel_call(
    call_id: str,
    req: Optional[CancelCallRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider),
    notifier: Notifier = Depends(get_notifier)
):
    try:
        call = await CallService.cancel_call(
            db, provider, notifier, current_user, call_id,
            reason=req.cancel_reason if req else None,
        )
    except CallServiceError as e:
        raise _http_error(e, "cancelling call")

    return CallResponse(message="Call cancelled successfully", call=_record(call))


@router.put("/calls/{call_id}/start", response_model=CallResponse)
async def start_call(
    call_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier)
):
    try:
        call = await CallService.start_call(db, notifier, current_user, call_id)
    except CallServiceError as e:
        raise _http_error(e, "starting call")

    return CallResponse(message="Call started", call=_record(call))


@router.put("/calls/{call_id}/end", response_model=CallResponse)
async def end_call(
    call_id: str,
    req: Optional[EndCallRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        call = await CallService.end_call(
            db, current_user, call_id, notes=req.notes if req else None
        )
    except CallServiceError as e:
        raise _http_error(e, "ending call")

    return CallResponse(message="Call ended successfully", call=_record(call))


@router.post("/calls/{call_id}/join", response_model=ParticipantUpdateResponse)
async def join_call(
    call_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record that the current user entered the room."""
    try:
        call, participant = await CallService.join_call(db, current_user, call_id)
    except CallServiceError as e:
        raise _http_error(e, "joining call")

    return ParticipantUpdateResponse(
        message="Joined call successfully",
        call_id=call.id,
        participant=ParticipantInfo(**participant.to_dict()),
    )


@router.post("/calls/{call_id}/leave", response_model=ParticipantUpdateResponse)
async def leave_call(
    call_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record that the current user left the room."""
    try:
        call, participant = await CallService.leave_call(db, current_user, call_id)
    except CallServiceError as e:
        raise _http_error(e, "leaving call")

    return ParticipantUpdateResponse(
        message="Left call successfully",
        call_id=call.id,
        participant=ParticipantInfo(**participant.to_dict()),
    )


@router.get("/calls/{call_id}/room-participants", response_model=RoomParticipantsResponse)
async def get_room_participants(
    call_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    provider: RoomProvider = Depends(get_room_provider)
):
    """Who the provider currently sees in the call's room."""
    try:
        participants = await CallService.get_room_participants(db, provider, current_user, call_id)
    except CallServiceError as e:
        raise _http_error(e, "fetching room participants")

    return RoomParticipantsResponse(call_id=call_id, participants=participants)
