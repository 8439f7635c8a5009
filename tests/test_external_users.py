"""Tests for ExternalUsersAPI — decoding and upstream failure mapping."""

from __future__ import annotations

import httpx
import pytest

from bank_clients.services.errors import UpstreamUnavailableError
from bank_clients.services.external_users import EXTERNAL_USERS_URL, ExternalUsersAPI

LEANNE = {
    "id": 1,
    "name": "Leanne Graham",
    "username": "Bret",
    "email": "Sincere@april.biz",
    "address": {"street": "Kulas Light", "suite": "Apt. 556", "city": "Gwenborough"},
    "phone": "1-770-736-8031 x56442",
    "company": {"name": "Romaguera-Crona"},
}


def make_api(handler) -> tuple[ExternalUsersAPI, list[httpx.Request]]:
    """Build an API whose transport records every outbound request."""
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return ExternalUsersAPI(client=client), seen


def fail_to_connect(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# ──────────────────────────────────────────────────────────
# list_users
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_users_decodes_known_fields():
    api, seen = make_api(lambda request: httpx.Response(200, json=[LEANNE]))

    users = await api.list_users()

    assert len(seen) == 1
    assert str(seen[0].url) == EXTERNAL_USERS_URL
    assert users[0].id == 1
    assert users[0].name == "Leanne Graham"
    assert users[0].email == "Sincere@april.biz"
    assert users[0].address.city == "Gwenborough"
    assert "username" not in users[0].model_dump()


@pytest.mark.asyncio
async def test_list_users_field_names_are_case_insensitive():
    body = [{"ID": 3, "Name": "Clementine", "EMAIL": "c@x.com", "Phone": "1", "Address": {"Street": "A", "CITY": "B"}}]
    api, _ = make_api(lambda request: httpx.Response(200, json=body))

    [user] = await api.list_users()

    assert (user.id, user.name, user.email, user.phone) == (3, "Clementine", "c@x.com", "1")
    assert (user.address.street, user.address.city) == ("A", "B")


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"", b"null", b"[]"])
async def test_list_users_empty_body_is_empty_list(content):
    api, _ = make_api(lambda request: httpx.Response(200, content=content))
    assert await api.list_users() == []


@pytest.mark.asyncio
async def test_list_users_network_failure():
    api, seen = make_api(fail_to_connect)
    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await api.list_users()
    assert len(seen) == 1
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert "refused" not in exc_info.value.message


@pytest.mark.asyncio
async def test_list_users_error_status():
    api, seen = make_api(lambda request: httpx.Response(503))
    with pytest.raises(UpstreamUnavailableError):
        await api.list_users()
    assert len(seen) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"<html>oops</html>", b'{"id": 1}', b'[{"name": "no id"}]'])
async def test_list_users_malformed_body(content):
    api, _ = make_api(lambda request: httpx.Response(200, content=content))
    with pytest.raises(UpstreamUnavailableError):
        await api.list_users()


# ──────────────────────────────────────────────────────────
# get_user
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_get_user_success():
    api, seen = make_api(lambda request: httpx.Response(200, json=LEANNE))

    user = await api.get_user(1)

    assert str(seen[0].url) == f"{EXTERNAL_USERS_URL}/1"
    assert user is not None
    assert user.name == "Leanne Graham"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [404, 500])
async def test_get_user_error_status_is_not_found(status_code):
    api, seen = make_api(lambda request: httpx.Response(status_code, json={}))
    assert await api.get_user(999) is None
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_get_user_null_body_is_not_found():
    api, _ = make_api(lambda request: httpx.Response(200, content=b"null"))
    assert await api.get_user(1) is None


@pytest.mark.asyncio
async def test_get_user_network_failure():
    api, _ = make_api(fail_to_connect)
    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await api.get_user(1)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"", b"not json", b'{"id": "abc"}'])
async def test_get_user_malformed_body(content):
    api, _ = make_api(lambda request: httpx.Response(200, content=content))
    with pytest.raises(UpstreamUnavailableError):
        await api.get_user(1)
