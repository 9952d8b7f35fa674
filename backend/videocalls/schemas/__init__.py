"""
Schemas Package

Pydantic models for the call REST API.
"""

from videocalls.schemas.call import (
    ScheduleCallRequest,
    UpdateCallRequest,
    CancelCallRequest,
    EndCallRequest,
    CallRecord,
    CallResponse,
    CallWithTokenResponse,
    CallListResponse,
    CallStatsResponse,
)

__all__ = [
    "ScheduleCallRequest",
    "UpdateCallRequest",
    "CancelCallRequest",
    "EndCallRequest",
    "CallRecord",
    "CallResponse",
    "CallWithTokenResponse",
    "CallListResponse",
    "CallStatsResponse",
]
