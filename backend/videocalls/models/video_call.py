"""
VideoCall Model - Call Record

One row per scheduled or instant call between the two members of a workspace.
Status only moves along the transitions in services/call/lifecycle.py; rows
are never deleted so finished calls remain available for history and stats.
"""
from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid

from .database import Base, utcnow
from .call_participant import CallParticipant


class CallStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({CallStatus.COMPLETED, CallStatus.CANCELLED, CallStatus.FAILED})


class VideoCall(Base):
    """Call Record"""
    __tablename__ = "video_calls"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    workspace_id = Column(String(36), ForeignKey('workspaces.id', ondelete='CASCADE'), nullable=False)

    # Creator of the call, immutable
    scheduled_by = Column(String(36), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    scheduled_time = Column(DateTime, nullable=False)

    # Planned vs measured length (minutes)
    duration_minutes = Column(Integer, nullable=False, default=60)
    actual_duration_minutes = Column(Integer, nullable=True)

    status = Column(String(20), nullable=False, default=CallStatus.SCHEDULED.value)
    is_instant = Column(Boolean, nullable=False, default=False)

    # Provider handles
    room_url = Column(String(500), nullable=False)
    room_name = Column(String(255), nullable=False)

    # Raw provider room payload, internal only
    room_data = Column(JSON, nullable=True)

    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    cancel_reason = Column(String(500), nullable=True)
    cancelled_by = Column(String(36), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    participants = relationship(
        CallParticipant,
        order_by=CallParticipant.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index('ix_video_calls_workspace_scheduled', 'workspace_id', 'scheduled_time'),
        Index('ix_video_calls_scheduled_by', 'scheduled_by'),
        Index('ix_video_calls_status', 'status'),
    )

    @property
    def call_status(self) -> CallStatus:
        return CallStatus(self.status)

    @property
    def is_upcoming(self) -> bool:
        return self.call_status == CallStatus.SCHEDULED and self.scheduled_time > utcnow()

    @property
    def is_ongoing(self) -> bool:
        return self.call_status == CallStatus.IN_PROGRESS

    @property
    def is_past(self) -> bool:
        return self.call_status in TERMINAL_STATUSES

    def participant_ids(self) -> list[str]:
        return [p.user_id for p in self.participants]

    def get_participant(self, user_id: str) -> CallParticipant | None:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None

    def to_dict(self):
        """Client-facing representation (no provider payload, no tokens)."""
        return {
            "id": self.id,
            "workspace_id": self.workspace_id,
            "scheduled_by": self.scheduled_by,
            "title": self.title,
            "description": self.description,
            "scheduled_time": self.scheduled_time.isoformat() if self.scheduled_time else None,
            "duration_minutes": self.duration_minutes,
            "actual_duration_minutes": self.actual_duration_minutes,
            "status": self.call_status.value,
            "is_instant": self.is_instant,
            "room_url": self.room_url,
            "room_name": self.room_name,
            "participants": [p.to_dict() for p in self.participants],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "notes": self.notes,
            "cancel_reason": self.cancel_reason,
            "cancelled_by": self.cancelled_by,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "is_upcoming": self.is_upcoming,
            "is_ongoing": self.is_ongoing,
            "is_past": self.is_past,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
