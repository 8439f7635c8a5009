"""Seed script — populates the database with the demo clients."""

import asyncio

from bank_clients.database.engine import async_session_factory, init_db
from bank_clients.database.seed import seed_if_empty


async def seed() -> None:
    """Create tables and insert the demo clients if the table is empty."""
    await init_db()
    async with async_session_factory() as session:
        added = await seed_if_empty(session)
    if added:
        print(f"✅ Seeded {added} clients into the database.")
    else:
        print("Clients table is not empty, nothing seeded.")


if __name__ == "__main__":
    asyncio.run(seed())
