"""
Call Access Rules - the authorization guard.

Resolves how the acting user relates to a call (scheduler and/or
participant) and checks it against ACCESS_RULES. Every refusal is raised as
CallNotFoundError / WorkspaceNotFoundError so callers cannot probe for the
existence of calls outside their workspaces.
"""
import logging
from enum import Enum
from typing import FrozenSet

from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.models.video_call import VideoCall
from videocalls.services.core.repositories import (
    WorkspaceRepository,
    VideoCallRepository,
    WorkspaceMembers,
)
from .exceptions import CallNotFoundError, WorkspaceNotFoundError

logger = logging.getLogger(__name__)

CALL_NOT_FOUND = "Call not found or access denied"
WORKSPACE_NOT_FOUND = "Workspace not found or access denied"


class Relation(str, Enum):
    SCHEDULER = "scheduler"
    PARTICIPANT = "participant"


class CallOperation(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    CANCEL = "cancel"
    START = "start"
    END = "end"
    JOIN = "join"
    LEAVE = "leave"


# operation -> relations that may perform it (any one suffices)
ACCESS_RULES: dict[CallOperation, FrozenSet[Relation]] = {
    CallOperation.VIEW: frozenset({Relation.PARTICIPANT}),
    CallOperation.UPDATE: frozenset({Relation.SCHEDULER}),
    CallOperation.CANCEL: frozenset({Relation.SCHEDULER, Relation.PARTICIPANT}),
    CallOperation.START: frozenset({Relation.PARTICIPANT}),
    CallOperation.END: frozenset({Relation.PARTICIPANT}),
    CallOperation.JOIN: frozenset({Relation.PARTICIPANT}),
    CallOperation.LEAVE: frozenset({Relation.PARTICIPANT}),
}


def relations_to(call: VideoCall, user_id: str) -> FrozenSet[Relation]:
    relations = set()
    if call.scheduled_by == user_id:
        relations.add(Relation.SCHEDULER)
    if user_id in call.participant_ids():
        relations.add(Relation.PARTICIPANT)
    return frozenset(relations)


def authorize_call(call: VideoCall | None, user_id: str, operation: CallOperation) -> VideoCall:
    """
    Check that ``user_id`` may perform ``operation`` on ``call``.

    Raises:
        CallNotFoundError if the call is missing or the user lacks access
    """
    if call is None:
        raise CallNotFoundError(CALL_NOT_FOUND)

    if not relations_to(call, user_id) & ACCESS_RULES[operation]:
        logger.info(f"[Access] User {user_id} denied {operation.value} on call {call.id}")
        raise CallNotFoundError(CALL_NOT_FOUND)

    return call


async def load_call_for(
    db: AsyncSession,
    call_id: str,
    user_id: str,
    operation: CallOperation
) -> VideoCall:
    """Fetch a call and authorize the operation in one step."""
    call = await VideoCallRepository.get(db, call_id)
    return authorize_call(call, user_id, operation)


async def require_workspace_member(
    db: AsyncSession,
    workspace_id: str,
    user_id: str
) -> WorkspaceMembers:
    """
    Resolve a workspace the user belongs to, with both member identities.

    Raises:
        WorkspaceNotFoundError if the workspace is missing, the user is not a
        member, or a member identity cannot be resolved
    """
    workspace = await WorkspaceRepository.get_for_member(db, workspace_id, user_id)
    if workspace is None:
        raise WorkspaceNotFoundError(WORKSPACE_NOT_FOUND)

    members = await WorkspaceRepository.get_members(db, workspace)
    if members is None:
        raise WorkspaceNotFoundError(WORKSPACE_NOT_FOUND)

    return members
