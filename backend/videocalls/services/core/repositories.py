"""
Repository Layer - Centralized database queries.

Keeps the call services free of query construction. Every method takes the
request-scoped session; none of them commit.

Usage:
    from videocalls.services.core.repositories import VideoCallRepository

    calls, total = await VideoCallRepository.list_for_workspace(db, workspace_id, page=2, page_size=10)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, func, or_, and_, case
from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.models.user import User
from videocalls.models.workspace import Workspace
from videocalls.models.video_call import VideoCall, CallStatus
from videocalls.models.call_participant import CallParticipant

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceMembers:
    """A workspace with both member identities resolved."""
    workspace: Workspace
    client: User
    freelancer: User

    def member(self, user_id: str) -> Optional[User]:
        if user_id == self.client.id:
            return self.client
        if user_id == self.freelancer.id:
            return self.freelancer
        return None


class WorkspaceRepository:
    """Lookups against the workspace/identity store."""

    @staticmethod
    async def get_for_member(
        db: AsyncSession,
        workspace_id: str,
        user_id: str
    ) -> Optional[Workspace]:
        """Workspace if ``user_id`` is its client or freelancer, else None."""
        result = await db.execute(
            select(Workspace).where(
                and_(
                    Workspace.id == workspace_id,
                    or_(
                        Workspace.client_id == user_id,
                        Workspace.freelancer_id == user_id,
                    )
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_members(db: AsyncSession, workspace: Workspace) -> Optional[WorkspaceMembers]:
        """Resolve both member users; None if either identity is missing."""
        result = await db.execute(
            select(User).where(User.id.in_([workspace.client_id, workspace.freelancer_id]))
        )
        users = {user.id: user for user in result.scalars().all()}
        client = users.get(workspace.client_id)
        freelancer = users.get(workspace.freelancer_id)
        if client is None or freelancer is None:
            logger.warning(f"[Repo] Workspace {workspace.id} has an unknown member")
            return None
        return WorkspaceMembers(workspace=workspace, client=client, freelancer=freelancer)


class VideoCallRepository:
    """Queries over Call Records. Participants are loaded with each call."""

    @staticmethod
    async def get(db: AsyncSession, call_id: str) -> Optional[VideoCall]:
        result = await db.execute(select(VideoCall).where(VideoCall.id == call_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_workspace(
        db: AsyncSession,
        workspace_id: str,
        status: Optional[CallStatus] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[VideoCall], int]:
        """
        One page of a workspace's calls, newest scheduled_time first.

        Returns:
            Tuple of (calls on the page, total matching calls)
        """
        conditions = [VideoCall.workspace_id == workspace_id]
        if status is not None:
            conditions.append(VideoCall.status == status.value)

        total = await db.scalar(
            select(func.count()).select_from(VideoCall).where(and_(*conditions))
        )

        result = await db.execute(
            select(VideoCall)
            .where(and_(*conditions))
            .order_by(VideoCall.scheduled_time.desc(), VideoCall.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), int(total or 0)

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: str,
        status: Optional[CallStatus] = None
    ) -> List[VideoCall]:
        """Calls the user scheduled or takes part in."""
        participant_calls = select(CallParticipant.call_id).where(CallParticipant.user_id == user_id)
        stmt = select(VideoCall).where(
            or_(
                VideoCall.scheduled_by == user_id,
                VideoCall.id.in_(participant_calls),
            )
        )
        if status is not None:
            stmt = stmt.where(VideoCall.status == status.value)

        result = await db.execute(stmt.order_by(VideoCall.scheduled_time.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def list_upcoming(db: AsyncSession, workspace_id: str, now: datetime) -> List[VideoCall]:
        result = await db.execute(
            select(VideoCall)
            .where(
                and_(
                    VideoCall.workspace_id == workspace_id,
                    VideoCall.status == CallStatus.SCHEDULED.value,
                    VideoCall.scheduled_time >= now,
                )
            )
            .order_by(VideoCall.scheduled_time.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_by_status(
        db: AsyncSession,
        workspace_id: str,
        statuses: Sequence[CallStatus],
        limit: Optional[int] = None
    ) -> List[VideoCall]:
        stmt = (
            select(VideoCall)
            .where(
                and_(
                    VideoCall.workspace_id == workspace_id,
                    VideoCall.status.in_([s.value for s in statuses]),
                )
            )
            .order_by(VideoCall.scheduled_time.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def status_distribution(db: AsyncSession, workspace_id: str) -> List[Dict[str, Any]]:
        """Per-status call count and summed measured duration."""
        result = await db.execute(
            select(
                VideoCall.status,
                func.count(VideoCall.id),
                func.coalesce(func.sum(VideoCall.actual_duration_minutes), 0),
            )
            .where(VideoCall.workspace_id == workspace_id)
            .group_by(VideoCall.status)
            .order_by(VideoCall.status)
        )
        return [
            {"status": status, "count": int(count), "total_duration": int(total)}
            for status, count, total in result.all()
        ]

    @staticmethod
    async def overview(db: AsyncSession, workspace_id: str) -> Dict[str, Any]:
        """Totals across all of a workspace's calls."""
        result = await db.execute(
            select(
                func.count(VideoCall.id),
                func.coalesce(
                    func.sum(case((VideoCall.status == CallStatus.COMPLETED.value, 1), else_=0)), 0
                ),
                func.coalesce(func.sum(VideoCall.actual_duration_minutes), 0),
                func.avg(VideoCall.actual_duration_minutes),
            ).where(VideoCall.workspace_id == workspace_id)
        )
        total_calls, completed_calls, total_duration, avg_duration = result.one()
        return {
            "total_calls": int(total_calls or 0),
            "completed_calls": int(completed_calls or 0),
            "total_duration": int(total_duration or 0),
            "avg_duration": round(float(avg_duration), 2) if avg_duration is not None else 0.0,
        }
