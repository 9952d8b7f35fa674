"""
Create a client, a freelancer and a workspace pairing them, then print a
bearer token for each user so the API can be exercised locally.

Usage (from backend/):
    python -m scripts.seed_workspace
"""
import asyncio

from sqlalchemy import select

from videocalls.models import AsyncSessionLocal, init_db, User, Workspace
from videocalls.services.auth_service import create_access_token


async def _get_or_create_user(db, name: str, email: str, role: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user
    user = User(name=name, email=email, role=role)
    db.add(user)
    await db.flush()
    return user


async def seed():
    await init_db()

    async with AsyncSessionLocal() as db:
        client = await _get_or_create_user(db, "Dana Client", "client@example.com", "client")
        freelancer = await _get_or_create_user(db, "Lee Freelancer", "freelancer@example.com", "freelancer")

        workspace = Workspace(title="Demo Project", client_id=client.id, freelancer_id=freelancer.id)
        db.add(workspace)
        await db.commit()

        print(f"✅ Workspace {workspace.id} ({workspace.title})")
        for user in (client, freelancer):
            print(f"\n{user.role}: {user.name} <{user.email}>")
            print(f"  Authorization: Bearer {create_access_token(user.id)}")


if __name__ == "__main__":
    asyncio.run(seed())
