"""Create the application database on a local PostgreSQL server if missing."""
import asyncio
import sys

import asyncpg

from videocalls.config.settings import settings


async def setup_db():
    print(f"🔌 Connecting to PostgreSQL at {settings.DB_HOST} as {settings.DB_USER}...")

    try:
        # Connect to the default 'postgres' database to create the new one
        sys_conn = await asyncpg.connect(
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            database='postgres',
            host=settings.DB_HOST,
            port=settings.DB_PORT
        )
    except (OSError, asyncpg.PostgresError) as e:
        print(f"❌ Connection failed: {e}")
        print("\nPlease ensure PostgreSQL is running and DB_* values in .env are correct")
        sys.exit(1)

    try:
        exists = await sys_conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", settings.DB_NAME)

        if not exists:
            print(f"📦 Creating database '{settings.DB_NAME}'...")
            await sys_conn.execute(f'CREATE DATABASE "{settings.DB_NAME}"')
            print("✅ Database created!")
        else:
            print(f"✅ Database '{settings.DB_NAME}' already exists.")
    finally:
        await sys_conn.close()


if __name__ == "__main__":
    asyncio.run(setup_db())
