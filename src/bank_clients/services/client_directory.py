"""Client directory — lifecycle rules for bank client records.

The directory owns the invariants of the ``clients`` table:

* an email is unique across *all* rows, active or soft-deleted;
* a partial update touches only the fields the caller sent;
* deleting a client only clears ``is_active``; the row and its email stay.

Database failures that are not one of those rules are logged with their
traceback and re-raised as :class:`StoreFaultError`.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from bank_clients.database.repository import ClientRepository
from bank_clients.models.client import Client, utcnow
from bank_clients.schemas.client import ClientCreate, ClientUpdate
from bank_clients.services.errors import (
    ClientNotFoundError,
    ClientValidationError,
    DuplicateEmailError,
    StoreFaultError,
    fields_from_errors,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DUPLICATE_EMAIL_MESSAGE = "Email is already registered"


def parse_create(data: Mapping[str, Any]) -> ClientCreate:
    """Validate raw input for a new client, reporting every bad field at once."""
    try:
        return ClientCreate.model_validate(data)
    except ValidationError as exc:
        raise ClientValidationError(
            "Invalid client data", fields=fields_from_errors(exc.errors())
        ) from exc


def parse_update(data: Mapping[str, Any]) -> ClientUpdate:
    """Validate raw input for a partial update; absent keys stay unset."""
    try:
        return ClientUpdate.model_validate(data)
    except ValidationError as exc:
        raise ClientValidationError(
            "Invalid client data", fields=fields_from_errors(exc.errors())
        ) from exc


def _translate_store_errors(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Turn unclassified SQLAlchemy failures into ``StoreFaultError``."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.exception("Client store failure during %s", func.__name__)
            raise StoreFaultError("The client store failed to process the request") from exc

    return wrapper


class ClientDirectory:
    """Serves list / get / create / update / delete / search over clients."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repo = ClientRepository(session)

    @_translate_store_errors
    async def list_active(self) -> list[Client]:
        return await self._repo.list_active()

    @_translate_store_errors
    async def get(self, client_id: int) -> Client:
        """Return the client with *client_id*, including soft-deleted ones."""
        return await self._get_or_raise(client_id)

    @_translate_store_errors
    async def create(self, payload: ClientCreate) -> Client:
        if await self._repo.email_taken(payload.email):
            logger.warning("Rejected new client: email already registered")
            raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)

        client = Client(
            **payload.model_dump(),
            created_at=utcnow(),
            is_active=True,
        )
        self._repo.add(client)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent create for the same email.
            await self._session.rollback()
            if await self._repo.email_taken(payload.email):
                logger.warning("Rejected new client: email claimed concurrently")
                raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE) from exc
            raise

        logger.info("Client created with id %s", client.id)
        return client

    @_translate_store_errors
    async def update(self, client_id: int, changes: ClientUpdate) -> Client:
        """Apply a partial update; only fields present in *changes* are written."""
        client = await self._get_or_raise(client_id)
        values = changes.changes()

        email = values.get("email")
        if email is not None and await self._repo.email_taken(email, exclude_id=client_id):
            logger.warning("Rejected update of client %s: email already registered", client_id)
            raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE, client_id=client_id)

        for field, value in values.items():
            setattr(client, field, value)
        await self._commit_existing(client_id, email=email)

        logger.info("Client %s updated: %s", client_id, ", ".join(sorted(values)) or "no changes")
        return client

    @_translate_store_errors
    async def delete(self, client_id: int) -> None:
        """Soft delete: the row stays and keeps its email reserved."""
        client = await self._get_or_raise(client_id)
        client.is_active = False
        await self._commit_existing(client_id)
        logger.info("Client %s deactivated", client_id)

    @_translate_store_errors
    async def search(self, term: str | None) -> list[Client]:
        if term is None or not term.strip():
            raise ClientValidationError(
                "A search term is required",
                fields={"term": "Search term must not be empty"},
                status_code=400,
            )
        logger.info("Searching clients for %r", term)
        return await self._repo.search_active(term)

    # ── Private helpers ──────────────────────────────────

    async def _get_or_raise(self, client_id: int) -> Client:
        client = await self._repo.get(client_id)
        if client is None:
            logger.warning("Client %s not found", client_id)
            raise ClientNotFoundError("Client not found", client_id=client_id)
        return client

    async def _commit_existing(self, client_id: int, email: str | None = None) -> None:
        """Commit changes to a loaded client, classifying the failures we expect."""
        try:
            await self._session.commit()
        except StaleDataError as exc:
            await self._session.rollback()
            if not await self._repo.exists(client_id):
                logger.warning("Client %s vanished before its changes were saved", client_id)
                raise ClientNotFoundError("Client not found", client_id=client_id) from exc
            raise
        except IntegrityError as exc:
            await self._session.rollback()
            if email is not None and await self._repo.email_taken(email, exclude_id=client_id):
                logger.warning("Rejected update of client %s: email claimed concurrently", client_id)
                raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE, client_id=client_id) from exc
            raise
