"""Pydantic schemas for users fetched from the external directory."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, model_validator


def _lower_keys(data: Any) -> Any:
    """Make field matching case-insensitive by lower-casing incoming keys."""
    if isinstance(data, dict):
        return {str(key).lower(): value for key, value in data.items()}
    return data


class ExternalAddress(BaseModel):
    street: str = ""
    city: str = ""

    @model_validator(mode="before")
    @classmethod
    def lower_keys(cls, data: Any) -> Any:
        return _lower_keys(data)


class ExternalUser(BaseModel):
    """A user as returned by the external directory, reduced to our fields.

    Unknown upstream fields (``username``, ``company``, ...) are ignored.
    """

    id: int
    name: str = ""
    email: str = ""
    phone: str = ""
    address: ExternalAddress | None = None

    @model_validator(mode="before")
    @classmethod
    def lower_keys(cls, data: Any) -> Any:
        return _lower_keys(data)
