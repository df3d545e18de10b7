"""
Initialize the database: create all tables.
Run with: python -m scripts.init_db
"""

import asyncio
from clinic_scheduler.database import engine, Base
from clinic_scheduler.models import Appointment, Doctor, Nurse, Patient, User  # noqa: F401


async def init():
    print(f"Creating database tables on {engine.url.render_as_string(hide_password=True)}...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
