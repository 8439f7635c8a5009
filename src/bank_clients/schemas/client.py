"""Pydantic schemas for client requests and responses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

from bank_clients.models.client import Client

EMAIL_MAX_LENGTH = 150

# Digits with optional leading "+" and the usual separators.
PHONE_PATTERN = r"^\+?[0-9][0-9 ().\-]{5,19}$"

# Fields that must never be null, even in a partial update.
REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "account_type",
    "balance",
    "is_active",
)

_CENTS = Decimal("0.01")

Money = Annotated[
    Decimal,
    PlainSerializer(str, return_type=str, when_used="json"),
]


def _check_email_length(value: str | None) -> str | None:
    if value is not None and len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return value


def _check_not_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("Value must not be blank")
    return value


def _quantize(value: Decimal | None) -> Decimal | None:
    return value.quantize(_CENTS) if value is not None else None


class ClientCreate(BaseModel):
    """Request body for creating a client."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone_number: str = Field(max_length=20, pattern=PHONE_PATTERN)
    address: str | None = Field(default=None, max_length=200)
    account_type: str = Field(min_length=1, max_length=50)
    balance: Decimal = Field(ge=0, max_digits=18, decimal_places=2)

    check_email_length = field_validator("email")(_check_email_length)
    check_not_blank = field_validator("first_name", "last_name", "account_type")(
        _check_not_blank
    )
    round_to_cents = field_validator("balance")(_quantize)


class ClientUpdate(BaseModel):
    """Request body for a partial update.

    Omitted fields are left alone. Whether a field was sent at all is read
    from ``model_fields_set``, so an explicit ``""`` or ``null`` for
    ``address`` still replaces the stored value.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    address: str | None = Field(default=None, max_length=200)
    account_type: str | None = Field(default=None, min_length=1, max_length=50)
    balance: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)
    is_active: bool | None = None

    check_email_length = field_validator("email")(_check_email_length)
    check_not_blank = field_validator("first_name", "last_name", "account_type")(
        _check_not_blank
    )
    round_to_cents = field_validator("balance")(_quantize)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> ClientUpdate:
        nulled = [
            name
            for name in REQUIRED_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class ClientResponse(BaseModel):
    """Public representation of a client, including the derived full name."""

    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str
    address: str | None
    account_type: str
    balance: Money
    created_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


def to_response(client: Client) -> ClientResponse:
    """Project a stored client onto its response shape."""
    return ClientResponse.model_validate(client)
