"""
Call Notifications

Publishes lifecycle events to the other participant's Redis channel
(``channel:user:{user_id}``); connected clients relay them to the browser.
Delivery is fire-and-forget: a failed publish is logged and counted but
never fails the operation that triggered it.
"""
import json
import logging
from typing import Any, Dict, List

from redis.asyncio import Redis

from videocalls.config.constants import USER_CHANNEL_TEMPLATE
from videocalls.models.database import utcnow
from videocalls.models.video_call import VideoCall
from videocalls.services.metrics import notification_failures
from videocalls.services.protocols import Notifier

logger = logging.getLogger(__name__)


class CallEvent:
    SCHEDULED = "call_scheduled"
    UPDATED = "call_updated"
    CANCELLED = "call_cancelled"
    STARTED = "call_started"
    INSTANT_CREATED = "instant_call_created"


def user_channel(user_id: str) -> str:
    return USER_CHANNEL_TEMPLATE.format(user_id=user_id)


class RedisNotifier:
    """Notifier publishing JSON messages over Redis pub/sub."""

    def __init__(self, redis: Redis):
        self.redis = redis

    async def publish(self, user_id: str, event: str, payload: Dict[str, Any]) -> None:
        message = {"type": event, **payload}
        receivers = await self.redis.publish(user_channel(user_id), json.dumps(message, default=str))
        logger.debug(f"[Notify] {event} -> user {user_id} ({receivers} subscribers)")


async def notify_counterparts(
    notifier: Notifier,
    call: VideoCall,
    actor_id: str,
    event: str,
    **extra: Any
) -> List[str]:
    """
    Send ``event`` to every participant except the actor.

    Returns:
        User IDs the event was published to
    """
    payload = {
        "call": call.to_dict(),
        "actor_id": actor_id,
        "timestamp": utcnow().isoformat(),
        **extra,
    }

    delivered = []
    for user_id in call.participant_ids():
        if user_id == actor_id:
            continue
        try:
            await notifier.publish(user_id, event, payload)
            delivered.append(user_id)
        except Exception as e:
            notification_failures.labels(event=event).inc()
            logger.error(f"[Notify] Failed to send {event} for call {call.id} to user {user_id}: {e}")

    return delivered
