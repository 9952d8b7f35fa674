"""
Application-wide constants for call scheduling and room provisioning.

Note: Environment-dependent settings (DB, Redis, API keys) belong in settings.py.
This file is for operational parameters that rarely change between environments.
"""

# ==============================================================================
# CALL DEFAULTS
# ==============================================================================

# Planned duration when the scheduler does not provide one (minutes)
DEFAULT_CALL_DURATION_MIN: int = 60

# Bounds for the planned duration (minutes)
MIN_CALL_DURATION_MIN: int = 1
MAX_CALL_DURATION_MIN: int = 1440

DEFAULT_CALL_TITLE: str = "Project Discussion"
DEFAULT_CALL_DESCRIPTION: str = ""

INSTANT_CALL_TITLE: str = "Instant Call"
INSTANT_CALL_DESCRIPTION: str = "Instant video call session"

DEFAULT_CANCEL_REASON: str = "Cancelled by participant"

MAX_TITLE_LENGTH: int = 200
MAX_DESCRIPTION_LENGTH: int = 2000
MAX_NOTES_LENGTH: int = 5000
MAX_CANCEL_REASON_LENGTH: int = 500

# ==============================================================================
# ROOM PROVISIONING
# ==============================================================================

# Scheduled rooms stay open this long after the planned end (seconds)
ROOM_EXPIRY_GRACE_SEC: int = 3600

# Lifetime of a room created for an instant call (seconds)
INSTANT_ROOM_TTL_SEC: int = 2 * 60 * 60

# Provider-side default lifetime when no expiry is given (seconds)
DEFAULT_ROOM_TTL_SEC: int = 24 * 60 * 60

# Upper bound on concurrent room members (two participants plus headroom)
ROOM_MAX_PARTICIPANTS: int = 4

# ==============================================================================
# LISTING & STATISTICS
# ==============================================================================

DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100

# Number of calls returned alongside the workspace statistics
RECENT_CALLS_LIMIT: int = 5

# Default number of calls returned by the workspace history view
CALL_HISTORY_LIMIT: int = 10

# ==============================================================================
# NOTIFICATIONS
# ==============================================================================

# Redis pub/sub channel a user's clients subscribe to
USER_CHANNEL_TEMPLATE: str = "channel:user:{user_id}"

# ==============================================================================
# DATABASE CONNECTION POOL
# ==============================================================================

# SQLAlchemy connection pool size
DB_POOL_SIZE: int = 10

# SQLAlchemy max overflow connections
DB_POOL_MAX_OVERFLOW: int = 20
