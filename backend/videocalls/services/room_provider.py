"""
Daily.co Room Provider

Thin async client for the Daily REST API:
- Room creation, update and deletion
- Meeting tokens for private rooms
- Live room presence

Every failure (transport error, non-2xx answer or unreadable body) is raised as
"""
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from videocalls.config.settings import settings
from videocalls.config.constants import ROOM_MAX_PARTICIPANTS, DEFAULT_ROOM_TTL_SEC
from videocalls.services.call.exceptions import ProviderError
from videocalls.services.metrics import provider_requests, provider_latency

logger = logging.getLogger(__name__)


def default_room_config() -> Dict[str, Any]:
    return {
        "privacy": "private",
        "properties": {
            "enable_chat": True,
            "enable_screenshare": True,
            "start_audio_off": False,
            "start_video_off": False,
            "exp": round(time.time()) + DEFAULT_ROOM_TTL_SEC,
            "max_participants": ROOM_MAX_PARTICIPANTS,
        },
    }


def merge_room_config(room_config: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay caller config on the defaults; ``properties`` merge key by key."""
    defaults = default_room_config()
    merged = {**defaults, **room_config}
    merged["properties"] = {**defaults["properties"], **room_config.get("properties", {})}
    return merged


class DailyRoomProvider:
    """RoomProvider implementation backed by api.daily.co"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.DAILY_API_KEY
        self.base_url = (base_url or settings.DAILY_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.DAILY_TIMEOUT_SEC
        self._transport = transport

        if not self.api_key:
            logger.warning("[Daily] DAILY_API_KEY is not configured; provider calls will be rejected")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            return str(body.get("info") or body.get("error") or body)
        return str(body)

    async def _request(
        self,
        operation: str,
        failure: str,
        method: str,
        path: str,
        **kwargs
    ) -> Any:
        started = time.perf_counter()
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            provider_requests.labels(operation=operation, outcome="error").inc()
            logger.error(f"[Daily] {operation} transport error: {e}")
            raise ProviderError(f"{failure}: {e}") from e
        finally:
            provider_latency.labels(operation=operation).observe(time.perf_counter() - started)

        if response.is_error:
            detail = self._error_text(response)
            provider_requests.labels(operation=operation, outcome="error").inc()
            logger.error(f"[Daily] {operation} failed ({response.status_code}): {detail}")
            raise ProviderError(f"{failure}: {detail}", status_code=response.status_code)

        if not response.content:
            provider_requests.labels(operation=operation, outcome="success").inc()
            return {}
        try:
            body = response.json()
        except ValueError as e:
            provider_requests.labels(operation=operation, outcome="error").inc()
            logger.error(f"[Daily] {operation} returned a non-JSON body: {response.text[:200]}")
            raise ProviderError(f"{failure}: invalid provider response", status_code=response.status_code) from e

        provider_requests.labels(operation=operation, outcome="success").inc()
        return body

    async def create_room(self, room_config: Dict[str, Any]) -> Dict[str, Any]:
        config = merge_room_config(room_config)
        logger.info(f"[Daily] Creating room (exp={config['properties'].get('exp')})")

        room = await self._request(
            "create_room", "Failed to create video call room", "POST", "/rooms", json=config
        )
        if not isinstance(room, dict) or not room.get("name") or not room.get("url"):
            raise ProviderError("Failed to create video call room: incomplete provider response")

        logger.info(f"[Daily] Room created: {room['name']}")
        return room

    async def update_room(self, room_name: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "update_room", "Failed to update room", "POST", f"/rooms/{room_name}", json=update_data
        )

    async def delete_room(self, room_name: str) -> bool:
        await self._request(
            "delete_room", "Failed to delete room", "DELETE", f"/rooms/{room_name}"
        )
        logger.info(f"[Daily] Room deleted: {room_name}")
        return True

    async def create_token(
        self,
        room_name: str,
        user_id: str,
        user_name: str,
        is_owner: bool = False
    ) -> str:
        token_data = {
            "properties": {
                "room_name": room_name,
                "user_id": user_id,
                "user_name": user_name,
                "is_owner": is_owner,
                "enable_screenshare": True,
                "enable_chat": True,
            }
        }
        body = await self._request(
            "create_token", "Failed to create meeting token", "POST", "/meeting-tokens", json=token_data
        )
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise ProviderError("Failed to create meeting token: no token in provider response")

        logger.info(f"[Daily] Meeting token created for user {user_id}")
        return token

    async def get_participants(self, room_name: str) -> List[Dict[str, Any]]:
        body = await self._request(
            "get_participants", "Failed to get room participants", "GET", f"/rooms/{room_name}/participants"
        )
        if isinstance(body, dict):
            return list(body.get("data", []))
        return list(body)
