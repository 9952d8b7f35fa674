import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from videocalls.models import User, Workspace
from videocalls.services.auth_service import create_access_token
from videocalls.services.call.exceptions import ProviderError


def unique_email(prefix: str = 'user') -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@dataclass
class SeededWorkspace:
    workspace: Workspace
    client: User
    freelancer: User
    outsider: User


async def seed_workspace(db, title: str = 'Logo redesign') -> SeededWorkspace:
    client = User(name='Dana Client', email=unique_email('client'), role='client')
    freelancer = User(name='Lee Freelancer', email=unique_email('freelancer'), role='freelancer')
    outsider = User(name='Sam Outsider', email=unique_email('outsider'), role='client')
    db.add_all([client, freelancer, outsider])
    await db.flush()

    workspace = Workspace(title=title, client_id=client.id, freelancer_id=freelancer.id)
    db.add(workspace)
    await db.commit()
    return SeededWorkspace(workspace=workspace, client=client, freelancer=freelancer, outsider=outsider)


@dataclass
class FakeRoomProvider:
    """In-memory RoomProvider recording every request."""
    fail_create: bool = False
    fail_delete: bool = False
    fail_update: bool = False
    rooms: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    deleted: List[str] = field(default_factory=list)
    updates: List[tuple] = field(default_factory=list)
    tokens: List[Dict[str, Any]] = field(default_factory=list)
    presence: List[Dict[str, Any]] = field(default_factory=list)

    async def create_room(self, room_config: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_create:
            raise ProviderError("Failed to create video call room: quota exceeded", status_code=400)
        name = f"room-{len(self.rooms) + 1}"
        room = {"name": name, "url": f"https://example.daily.co/{name}", "config": room_config}
        self.rooms[name] = room
        return room

    async def update_room(self, room_name: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_update:
            raise ProviderError("Failed to update room: gone", status_code=404)
        self.updates.append((room_name, update_data))
        return self.rooms.get(room_name, {})

    async def delete_room(self, room_name: str) -> bool:
        if self.fail_delete:
            raise ProviderError("Failed to delete room: gone", status_code=404)
        self.deleted.append(room_name)
        return True

    async def create_token(
        self,
        room_name: str,
        user_id: str,
        user_name: str,
        is_owner: bool = False
    ) -> str:
        self.tokens.append(
            {"room_name": room_name, "user_id": user_id, "user_name": user_name, "is_owner": is_owner}
        )
        return f"token-{len(self.tokens)}"

    async def get_participants(self, room_name: str) -> List[Dict[str, Any]]:
        return list(self.presence)


@dataclass
class RecordingNotifier:
    """Notifier keeping published events in memory."""
    fail: bool = False
    events: List[Dict[str, Any]] = field(default_factory=list)

    async def publish(self, user_id: str, event: str, payload: Dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("redis down")
        self.events.append({"user_id": user_id, "event": event, "payload": payload})

    def of_type(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["event"] == event]

