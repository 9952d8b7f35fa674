"""
Database Models Package

This module exports all SQLAlchemy models for the workspace video call system.

Tables:
1. users - Workspace members (client / freelancer identities)
2. workspaces - Client/freelancer pairings, the access boundary for calls
3. video_calls - Call Records and their lifecycle state
4. video_call_participants - The two participants of each call
"""

from .database import (
    engine,
    AsyncSessionLocal,
    Base,
    init_db,
    get_db,
    utcnow,
)

from .user import User
from .workspace import Workspace
from .video_call import VideoCall, CallStatus, TERMINAL_STATUSES
from .call_participant import CallParticipant, ParticipantRole

__all__ = [
    # Database utilities
    "engine",
    "AsyncSessionLocal",
    "Base",
    "init_db",
    "get_db",
    "utcnow",

    # Models
    "User",
    "Workspace",
    "VideoCall",
    "CallStatus",
    "TERMINAL_STATUSES",
    "CallParticipant",
    "ParticipantRole",
]
