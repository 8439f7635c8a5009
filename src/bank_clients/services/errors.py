"""Service-level exceptions shared by the client directory and the external proxy.

Every exception carries a stable ``kind`` string and the HTTP status the
API layer answers with, so the routers never have to map them by hand.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class ServiceError(Exception):
    """Base class for errors surfaced at a service boundary."""

    kind = "service_error"
    status_code = 500

    def __init__(self, message: str, *, client_id: int | None = None) -> None:
        self.message = message
        self.client_id = client_id
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.client_id is not None:
            data["client_id"] = self.client_id
        return data


class ClientValidationError(ServiceError):
    """Raised when input is malformed; ``fields`` maps each bad field to its problem."""

    kind = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str,
        *,
        fields: dict[str, str] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.fields = fields or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.fields:
            data["fields"] = self.fields
        return data


class DuplicateEmailError(ServiceError):
    """Raised when an email is already held by another client, active or not."""

    kind = "duplicate_email"
    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a lookup targets something that does not exist."""

    kind = "not_found"
    status_code = 404


class ClientNotFoundError(NotFoundError):
    """Raised when no client has the requested id."""


class UpstreamUnavailableError(ServiceError):
    """Raised when the external directory is unreachable or returns garbage.

    The original exception is chained as ``__cause__``; only the generic
    message ever reaches the caller.
    """

    kind = "upstream_unavailable"
    status_code = 502


class StoreFaultError(ServiceError):
    """Raised when the database fails for a reason that is not a data rule."""

    kind = "store_fault"
    status_code = 500


def fields_from_errors(errors: Iterable[dict[str, Any]]) -> dict[str, str]:
    """Flatten pydantic-style error dicts into ``{"field.path": "message"}``.

    Location prefixes added by FastAPI (``body``, ``query``, ``path``) are
    dropped; several problems on one field are joined with ``"; "``.
    """
    fields: dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        name = ".".join(loc) or "__root__"
        msg = err.get("msg", "invalid value")
        fields[name] = f"{fields[name]}; {msg}" if name in fields else msg
    return fields
