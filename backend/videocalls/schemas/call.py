from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from videocalls.config.constants import (
    DEFAULT_CALL_DURATION_MIN,
    MIN_CALL_DURATION_MIN,
    MAX_CALL_DURATION_MIN,
    MAX_TITLE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_CANCEL_REASON_LENGTH,
)


# === Requests ===

class ScheduleCallRequest(BaseModel):
    scheduled_time: datetime
    title: Optional[str] = Field(None, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    duration: int = Field(DEFAULT_CALL_DURATION_MIN, ge=MIN_CALL_DURATION_MIN, le=MAX_CALL_DURATION_MIN)


class UpdateCallRequest(BaseModel):
    scheduled_time: Optional[datetime] = None
    title: Optional[str] = Field(None, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    duration: Optional[int] = Field(None, ge=MIN_CALL_DURATION_MIN, le=MAX_CALL_DURATION_MIN)


class CancelCallRequest(BaseModel):
    cancel_reason: Optional[str] = Field(None, max_length=MAX_CANCEL_REASON_LENGTH)


class EndCallRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


# === Responses ===

class ParticipantInfo(BaseModel):
    user_id: str
    role: str
    name: str
    email: str
    joined_at: Optional[str]
    left_at: Optional[str]
    duration_minutes: Optional[int]


class CallRecord(BaseModel):
    id: str
    workspace_id: str
    scheduled_by: Optional[str]
    title: str
    description: str
    scheduled_time: str
    duration_minutes: int
    actual_duration_minutes: Optional[int]
    status: str
    is_instant: bool
    room_url: str
    room_name: str
    participants: List[ParticipantInfo]
    started_at: Optional[str]
    ended_at: Optional[str]
    notes: Optional[str]
    cancel_reason: Optional[str]
    cancelled_by: Optional[str]
    cancelled_at: Optional[str]
    is_upcoming: bool
    is_ongoing: bool
    is_past: bool
    created_at: Optional[str]
    updated_at: Optional[str]


class CallResponse(BaseModel):
    message: str
    call: CallRecord


class CallWithTokenResponse(BaseModel):
    message: str
    call: CallRecord
    access_token: str


class CallListResponse(BaseModel):
    calls: List[CallRecord]
    total_calls: int
    total_pages: int
    current_page: int
    page_size: int


class CallCollectionResponse(BaseModel):
    calls: List[CallRecord]


class StatusBucket(BaseModel):
    status: str
    count: int
    total_duration: int


class CallOverview(BaseModel):
    total_calls: int
    completed_calls: int
    total_duration: int
    avg_duration: float


class CallStatsBody(BaseModel):
    status_distribution: List[StatusBucket]
    overview: CallOverview


class RecentCall(BaseModel):
    id: str
    title: str
    status: str
    scheduled_time: str
    duration_minutes: int
    actual_duration_minutes: Optional[int]


class CallStatsResponse(BaseModel):
    stats: CallStatsBody
    recent_calls: List[RecentCall]


class ParticipantUpdateResponse(BaseModel):
    message: str
    call_id: str
    participant: ParticipantInfo


class RoomParticipantsResponse(BaseModel):
    call_id: str
    participants: List[Dict[str, Any]]
