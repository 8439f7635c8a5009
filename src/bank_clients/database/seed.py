"""Demo data inserted on first run."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bank_clients.models.client import Client
from bank_clients.services.client_directory import ClientDirectory, parse_create

logger = logging.getLogger(__name__)

# Ids are left to the store; on an empty table they come out as 1 and 2.
DEMO_CLIENTS = [
    {
        "first_name": "Juan",
        "last_name": "Pérez",
        "email": "juan.perez@email.com",
        "phone_number": "0999123456",
        "address": "Av. Amazonas y Naciones Unidas, Quito",
        "account_type": "Ahorros",
        "balance": "5000.00",
    },
    {
        "first_name": "María",
        "last_name": "González",
        "email": "maria.gonzalez@email.com",
        "phone_number": "0998765432",
        "address": "Calle 10 de Agosto, Quito",
        "account_type": "Corriente",
        "balance": "12500.50",
    },
]


async def seed_if_empty(session: AsyncSession) -> int:
    """Create the demo clients through the directory unless the table has rows.

    Returns the number of clients added.
    """
    existing = (await session.execute(select(Client.id).limit(1))).first()
    if existing:
        return 0

    directory = ClientDirectory(session)
    for row in DEMO_CLIENTS:
        await directory.create(parse_create(row))
    logger.info("Seeded %d demo clients", len(DEMO_CLIENTS))
    return len(DEMO_CLIENTS)
