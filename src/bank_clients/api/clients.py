"""Client endpoints — thin HTTP layer over ``ClientDirectory``.

Endpoints
---------
GET    /api/clients                 → active clients
GET    /api/clients/search?term=... → active clients matching a term
GET    /api/clients/{id}            → one client, active or not
POST   /api/clients                 → create
PUT    /api/clients/{id}            → partial update
DELETE /api/clients/{id}            → soft delete
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bank_clients.database.engine import get_session
from bank_clients.schemas.client import ClientCreate, ClientResponse, to_response
from bank_clients.services.client_directory import ClientDirectory, parse_update

router = APIRouter(prefix="/api/clients", tags=["clients"])


def get_directory(session: AsyncSession = Depends(get_session)) -> ClientDirectory:
    return ClientDirectory(session)


@router.get("", response_model=list[ClientResponse])
async def list_clients(directory: ClientDirectory = Depends(get_directory)):
    return [to_response(c) for c in await directory.list_active()]


@router.get("/search", response_model=list[ClientResponse])
async def search_clients(
    term: str | None = Query(None, description="Substring of first name, last name or email"),
    directory: ClientDirectory = Depends(get_directory),
):
    return [to_response(c) for c in await directory.search(term)]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, directory: ClientDirectory = Depends(get_directory)):
    return to_response(await directory.get(client_id))


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    request: Request,
    response: Response,
    directory: ClientDirectory = Depends(get_directory),
):
    client = await directory.create(payload)
    response.headers["Location"] = str(request.url_for("get_client", client_id=client.id))
    return to_response(client)


@router.put("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_client(
    client_id: int,
    body: dict[str, Any] = Body(
        ..., openapi_examples={"balance": {"value": {"balance": 250.0}}}
    ),
    directory: ClientDirectory = Depends(get_directory),
) -> Response:
    """Partial update; only keys present in the body are changed."""
    await directory.update(client_id, parse_update(body))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int, directory: ClientDirectory = Depends(get_directory)
) -> Response:
    await directory.delete(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
