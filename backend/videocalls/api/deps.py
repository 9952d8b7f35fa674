"""
Request dependencies: database session, authenticated actor and the
external collaborators (room provider, notifier).

Collaborators are plain dependencies so tests and alternative deployments
can swap them with ``app.dependency_overrides``.
"""
from typing import Optional
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from videocalls.config.redis import get_redis
from videocalls.models.database import get_db
from videocalls.models.user import User
from videocalls.services.auth_service import decode_token
from videocalls.services.notifications import RedisNotifier
from videocalls.services.protocols import Notifier, RoomProvider
from videocalls.services.room_provider import DailyRoomProvider

logger = logging.getLogger(__name__)

_room_provider: Optional[DailyRoomProvider] = None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Authorization header")
    payload = decode_token(token)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_room_provider() -> RoomProvider:
    global _room_provider
    if _room_provider is None:
        _room_provider = DailyRoomProvider()
    return _room_provider


async def get_notifier() -> Notifier:
    return RedisNotifier(await get_redis())
