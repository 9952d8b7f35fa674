"""
Core Services Package

Shared data-access helpers used by the call services.
"""
from .repositories import (
    WorkspaceRepository,
    VideoCallRepository,
    WorkspaceMembers,
)

__all__ = [
    "WorkspaceRepository",
    "VideoCallRepository",
    "WorkspaceMembers",
]
