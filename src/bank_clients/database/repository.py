"""Client repository — data access layer for the clients table."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bank_clients.models.client import Client


class ClientRepository:
    """Encapsulates all database queries related to clients.

    Results are always ordered by ``id``, which matches insertion order.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active(self) -> list[Client]:
        stmt = select(Client).where(Client.is_active.is_(True)).order_by(Client.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, client_id: int) -> Client | None:
        """Fetch a client by id, active or not."""
        return await self._session.get(Client, client_id)

    async def exists(self, client_id: int) -> bool:
        """Check the table directly, bypassing the session's identity map."""
        stmt = select(Client.id).where(Client.id == client_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Whether any client, including inactive ones, already uses *email*."""
        stmt = select(Client.id).where(Client.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Client.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.first() is not None

    async def search_active(self, term: str) -> list[Client]:
        """Active clients whose first name, last name or email contains *term*.

        Matching is case-insensitive; ``%`` and ``_`` in *term* are literal.
        """
        stmt = (
            select(Client)
            .where(
                Client.is_active.is_(True),
                or_(
                    Client.first_name.icontains(term, autoescape=True),
                    Client.last_name.icontains(term, autoescape=True),
                    Client.email.icontains(term, autoescape=True),
                ),
            )
            .order_by(Client.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    def add(self, client: Client) -> None:
        self._session.add(client)
