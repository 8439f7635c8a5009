"""External users endpoints — proxy to the third-party user directory."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bank_clients.schemas.external_user import ExternalUser
from bank_clients.services.errors import NotFoundError
from bank_clients.services.external_users import ExternalUsersAPI

router = APIRouter(prefix="/api/externalusers", tags=["external-users"])

# ── Shared instance (created once, reused across requests) ──
_external_users_api = ExternalUsersAPI()


def get_external_users_api() -> ExternalUsersAPI:
    return _external_users_api


async def close_external_users_api() -> None:
    await _external_users_api.aclose()


@router.get("", response_model=list[ExternalUser])
async def list_external_users(api: ExternalUsersAPI = Depends(get_external_users_api)):
    return await api.list_users()


@router.get("/{user_id}", response_model=ExternalUser)
async def get_external_user(
    user_id: int, api: ExternalUsersAPI = Depends(get_external_users_api)
):
    user = await api.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found in the external directory")
    return user
