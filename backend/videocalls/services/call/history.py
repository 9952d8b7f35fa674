"""
Call History

Read-only listings of a workspace's calls and of a user's own calls.
Callers must have passed the workspace membership check first.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.config.constants import CALL_HISTORY_LIMIT
from videocalls.models.video_call import VideoCall, CallStatus
from videocalls.services.core.repositories import VideoCallRepository


async def get_workspace_calls(
    db: AsyncSession,
    workspace_id: str,
    status: Optional[CallStatus] = None,
    page: int = 1,
    page_size: int = 10
) -> Tuple[List[VideoCall], Dict[str, int]]:
    """
    One page of calls with pagination metadata.

    Returns:
        Tuple of (calls, {"total_calls", "total_pages", "current_page", "page_size"})
    """
    calls, total = await VideoCallRepository.list_for_workspace(
        db, workspace_id, status=status, page=page, page_size=page_size
    )
    pagination = {
        "total_calls": total,
        "total_pages": -(-total // page_size),
        "current_page": page,
        "page_size": page_size,
    }
    return calls, pagination


async def get_user_calls(
    db: AsyncSession,
    user_id: str,
    status: Optional[CallStatus] = None
) -> List[VideoCall]:
    return await VideoCallRepository.list_for_user(db, user_id, status)


async def get_upcoming_calls(db: AsyncSession, workspace_id: str, now: datetime) -> List[VideoCall]:
    """Scheduled calls that have not reached their start time, soonest first."""
    return await VideoCallRepository.list_upcoming(db, workspace_id, now)


async def get_call_history(
    db: AsyncSession,
    workspace_id: str,
    limit: int = CALL_HISTORY_LIMIT
) -> List[VideoCall]:
    """Completed and cancelled calls, most recent first."""
    return await VideoCallRepository.list_by_status(
        db, workspace_id, [CallStatus.COMPLETED, CallStatus.CANCELLED], limit=limit
    )


async def get_active_calls(db: AsyncSession, workspace_id: str) -> List[VideoCall]:
    return await VideoCallRepository.list_by_status(db, workspace_id, [CallStatus.IN_PROGRESS])
