import asyncio
from videocalls.models import init_db, User, Workspace, VideoCall, CallParticipant  # noqa: F401


async def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    print("Tables to create:")
    for table in (User, Workspace, VideoCall, CallParticipant):
        print(f"  - {table.__tablename__}")

    await init_db()

    print("✅ All tables created successfully!")
    print("\nDatabase schema ready for Workspace Video Calls")


if __name__ == "__main__":
    asyncio.run(create_tables())
