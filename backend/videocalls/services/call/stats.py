"""
Call Statistics

Derived, read-only aggregate over a workspace's calls. Durations are the
measured ``actual_duration_minutes``; calls that never completed count as 0
in sums and are skipped by the average.
"""
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.config.constants import RECENT_CALLS_LIMIT
from videocalls.services.core.repositories import VideoCallRepository


async def get_call_stats(db: AsyncSession, workspace_id: str) -> Dict[str, Any]:
    distribution = await VideoCallRepository.status_distribution(db, workspace_id)
    overview = await VideoCallRepository.overview(db, workspace_id)
    recent, _ = await VideoCallRepository.list_for_workspace(
        db, workspace_id, page=1, page_size=RECENT_CALLS_LIMIT
    )

    return {
        "stats": {
            "status_distribution": distribution,
            "overview": overview,
        },
        "recent_calls": [
            {
                "id": call.id,
                "title": call.title,
                "status": call.call_status.value,
                "scheduled_time": call.scheduled_time.isoformat(),
                "duration_minutes": call.duration_minutes,
                "actual_duration_minutes": call.actual_duration_minutes,
            }
            for call in recent
        ],
    }
