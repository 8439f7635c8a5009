"""External users API — async HTTP client for the third-party user directory.

Every call makes exactly one outbound request through a single shared
``httpx.AsyncClient``. Transport failures and undecodable payloads are
logged with their traceback and raised as ``UpstreamUnavailableError``;
the original exception is kept as ``__cause__``.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from bank_clients.schemas.external_user import ExternalUser
from bank_clients.services.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

EXTERNAL_USERS_URL = "https://jsonplaceholder.typicode.com/users"

_USER_LIST = TypeAdapter(list[ExternalUser] | None)
_SINGLE_USER = TypeAdapter(ExternalUser | None)


class ExternalUsersAPI:
    """Read-through proxy to the external user directory. Holds no state between calls."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str = EXTERNAL_USERS_URL,
    ) -> None:
        self._client = client or httpx.AsyncClient()
        self._base_url = base_url.rstrip("/")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_users(self) -> list[ExternalUser]:
        """Fetch every user.

        Any non-2xx status counts as the upstream being unavailable. An empty
        body or a JSON ``null`` yields an empty list.
        """
        logger.info("Fetching users from external directory")
        try:
            resp = await self._client.get(self._base_url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("External users request error: %s", exc)
            raise UpstreamUnavailableError("Could not connect to the external service") from exc

        if not resp.content.strip():
            return []
        users = self._decode(_USER_LIST, resp.content, "user list") or []
        logger.info("Fetched %d external users", len(users))
        return users

    async def get_user(self, user_id: int) -> ExternalUser | None:
        """Fetch one user.

        Returns ``None`` when the upstream answers with a non-2xx status
        (typically 404) or with a JSON ``null``.
        """
        logger.info("Fetching external user %s", user_id)
        try:
            resp = await self._client.get(f"{self._base_url}/{user_id}")
        except httpx.HTTPError as exc:
            logger.exception("External user %s request error: %s", user_id, exc)
            raise UpstreamUnavailableError("Could not connect to the external service") from exc

        if not resp.is_success:
            logger.warning("External user %s not found: %s", user_id, resp.status_code)
            return None
        return self._decode(_SINGLE_USER, resp.content, f"user {user_id}")

    @staticmethod
    def _decode(adapter: TypeAdapter, content: bytes, what: str):
        try:
            return adapter.validate_json(content)
        except ValidationError as exc:
            logger.exception("Invalid external %s payload", what)
            raise UpstreamUnavailableError("Invalid response from the external service") from exc
