"""
CallParticipant Model - Per-participant call metadata

Identity (user, role, name, email) is copied from the workspace when the call
is created and never changes afterwards. Join/leave timestamps are the only
fields updated during the call.
"""
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, UniqueConstraint
import uuid

from .database import Base


class ParticipantRole:
    CLIENT = "client"
    FREELANCER = "freelancer"


class CallParticipant(Base):
    """One of the two people in a call"""
    __tablename__ = "video_call_participants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    call_id = Column(String(36), ForeignKey('video_calls.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # 0 = client, 1 = freelancer
    position = Column(Integer, nullable=False, default=0)

    role = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)

    # Bookkeeping
    joined_at = Column(DateTime, nullable=True)
    left_at = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint('call_id', 'user_id', name='uq_call_participant_user'),
        UniqueConstraint('call_id', 'role', name='uq_call_participant_role'),
    )

    @property
    def is_present(self) -> bool:
        return self.joined_at is not None and self.left_at is None

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "role": self.role,
            "name": self.name,
            "email": self.email,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
            "left_at": self.left_at.isoformat() if self.left_at else None,
            "duration_minutes": self.duration_minutes,
        }
