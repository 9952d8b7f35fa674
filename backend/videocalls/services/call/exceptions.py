"""
Call Service Exceptions

Custom exceptions for call-related errors.

Access violations are reported as "not found" on purpose: a user outside a
workspace cannot tell a missing call from one they may not see.
"""


class CallServiceError(Exception):
    """Base exception for call service errors"""
    pass


class CallNotFoundError(CallServiceError):
    """Raised when a call is absent or the actor has no access to it"""
    pass


class WorkspaceNotFoundError(CallServiceError):
    """Raised when a workspace is absent or the actor is not a member"""
    pass


class InvalidTransitionError(CallServiceError):
    """Raised when an operation is not legal in the call's current status"""

    def __init__(self, action: str, status: str):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} a call that is {status}")


class CallValidationError(CallServiceError):
    """Raised when request data is malformed"""
    pass


class ProviderError(CallServiceError):
    """Raised when the room provider rejects or fails a request"""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class InternalError(CallServiceError):
    """Raised on unexpected storage failures"""
    pass
