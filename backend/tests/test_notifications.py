import json
from datetime import datetime

import pytest
from fakeredis import aioredis as fakeredis_aioredis

from videocalls.models import VideoCall, CallParticipant
from videocalls.services.notifications import (
    CallEvent,
    RedisNotifier,
    notify_counterparts,
    user_channel,
)
from tests.helpers import RecordingNotifier


def make_call() -> VideoCall:
    return VideoCall(
        id="call-1",
        workspace_id="ws-1",
        scheduled_by="client-1",
        title="Kickoff",
        description="",
        scheduled_time=datetime(2026, 3, 1, 10, 0),
        duration_minutes=60,
        status="scheduled",
        room_url="https://example.daily.co/room-1",
        room_name="room-1",
        room_data={"name": "room-1", "secret": "x"},
        participants=[
            CallParticipant(user_id="client-1", position=0, role="client", name="Dana", email="d@example.com"),
            CallParticipant(user_id="freelancer-1", position=1, role="freelancer", name="Lee", email="l@example.com"),
        ],
    )


def test_user_channel():
    assert user_channel("u-42") == "channel:user:u-42"


async def test_redis_notifier_publishes_json():
    redis = fakeredis_aioredis.FakeRedis(decode_responses=True)
    pubsub = redis.pubsub()
    await pubsub.subscribe(user_channel("freelancer-1"))
    # consume the subscribe confirmation
    await pubsub.get_message(timeout=1)

    await RedisNotifier(redis).publish("freelancer-1", CallEvent.STARTED, {"started_by": "client-1"})

    message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1)
    assert message is not None
    assert json.loads(message["data"]) == {"type": "call_started", "started_by": "client-1"}

    await pubsub.aclose()
    await redis.aclose()


async def test_notify_counterparts_skips_actor():
    notifier = RecordingNotifier()
    delivered = await notify_counterparts(notifier, make_call(), "client-1", CallEvent.UPDATED, updated_by="client-1")

    assert delivered == ["freelancer-1"]
    payload = notifier.events[0]["payload"]
    assert payload["updated_by"] == "client-1"
    assert payload["actor_id"] == "client-1"
    assert payload["call"]["id"] == "call-1"
    assert "room_data" not in payload["call"]
    assert "timestamp" in payload


async def test_notify_counterparts_swallows_failures():
    notifier = RecordingNotifier(fail=True)
    delivered = await notify_counterparts(notifier, make_call(), "freelancer-1", CallEvent.CANCELLED)
    assert delivered == []
