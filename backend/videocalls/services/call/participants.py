"""
Call Participant Management

Participants are fixed when the call is created: the workspace's client at
position 0 and its freelancer at position 1. Afterwards only their join/leave
bookkeeping changes (see lifecycle.mark_joined / mark_left).
"""
from typing import List

from videocalls.models.call_participant import CallParticipant, ParticipantRole
from videocalls.models.video_call import VideoCall
from videocalls.services.core.repositories import WorkspaceMembers
from .access import CALL_NOT_FOUND
from .exceptions import CallNotFoundError


def build_participants(members: WorkspaceMembers) -> List[CallParticipant]:
    """Participant rows for a new call, in client/freelancer order."""
    return [
        CallParticipant(
            user_id=members.client.id,
            position=0,
            role=ParticipantRole.CLIENT,
            name=members.client.name,
            email=members.client.email,
        ),
        CallParticipant(
            user_id=members.freelancer.id,
            position=1,
            role=ParticipantRole.FREELANCER,
            name=members.freelancer.name,
            email=members.freelancer.email,
        ),
    ]


def require_participant(call: VideoCall, user_id: str) -> CallParticipant:
    participant = call.get_participant(user_id)
    if participant is None:
        raise CallNotFoundError(CALL_NOT_FOUND)
    return participant
