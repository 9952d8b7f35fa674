"""
Call Service Module

Re-exports CallService, the lifecycle helpers and exceptions.
"""
from .service import CallService
from .lifecycle import CallAction, TRANSITIONS
from .exceptions import (
    CallServiceError,
    CallNotFoundError,
    WorkspaceNotFoundError,
    InvalidTransitionError,
    CallValidationError,
    ProviderError,
    InternalError,
)

__all__ = [
    "CallService",
    "CallAction",
    "TRANSITIONS",
    "CallServiceError",
    "CallNotFoundError",
    "WorkspaceNotFoundError",
    "InvalidTransitionError",
    "CallValidationError",
    "ProviderError",
    "InternalError",
]
