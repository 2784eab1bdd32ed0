"""Initialize database tables"""
import asyncio
from breakfast4u.database import init_models


async def init():
    await init_models()
    print("Database tables created successfully.")


if __name__ == "__main__":
    asyncio.run(init())
