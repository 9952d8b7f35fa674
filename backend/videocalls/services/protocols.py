"""
Protocol definitions for the call service's external collaborators.

This module defines interfaces (Python Protocols) that allow:
- Swapping the room provider (Daily.co today) without touching call logic
- Testing without real API credentials or a Redis server
- Passing collaborators explicitly into each operation

Usage:
    from videocalls.services.protocols import RoomProvider, Notifier

    async def schedule(provider: RoomProvider, notifier: Notifier, ...):
        room = await provider.create_room(config)
        await notifier.publish(user_id, "call_scheduled", payload)
"""

from typing import Any, Dict, List, Protocol


class RoomProvider(Protocol):
    """
    Interface for the remote media-room service.

    Implementations raise ProviderError on any failure.
    """

    async def create_room(self, room_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a room.

        Returns:
            Provider payload containing at least ``name`` and ``url``
        """
        ...

    async def update_room(self, room_name: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def delete_room(self, room_name: str) -> bool:
        ...

    async def create_token(
        self,
        room_name: str,
        user_id: str,
        user_name: str,
        is_owner: bool = False
    ) -> str:
        """Issue an access token admitting one user to one room."""
        ...

    async def get_participants(self, room_name: str) -> List[Dict[str, Any]]:
        """Users currently present in the room."""
        ...


class Notifier(Protocol):
    """
    Interface for per-user real-time notifications.

    Delivery is best effort; implementations may raise and callers must
    treat failures as non-fatal.
    """

    async def publish(self, user_id: str, event: str, payload: Dict[str, Any]) -> None:
        ...
