"""Directory records: contacts, linked-identifier mappings, messages, tickets."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from contactkit.models.enums import TicketStatus


def _now() -> datetime:
    return datetime.now(UTC)


class Contact(BaseModel):
    """A canonical directory record.

    ``id`` is assigned by the store on creation; ``0`` marks a contact that
    has not been persisted yet.
    """

    id: int = 0
    tenant_id: int
    name: str
    number: str
    is_group: bool = False
    profile_pic_url: str | None = None
    email: str = ""
    tags: list[str] = Field(default_factory=list)
    extra_info: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class ContactData(BaseModel):
    """Normalized attribute set handed to the contact-upsert collaborator."""

    tenant_id: int
    name: str
    number: str
    is_group: bool = False
    profile_pic_url: str | None = None


class LinkedIdMapping(BaseModel):
    """Associates a tenant's linked identifier with exactly one contact."""

    tenant_id: int
    lid: str
    contact_id: int
    created_at: datetime = Field(default_factory=_now)


class ContactRecord(BaseModel):
    """A contact together with its (optional) linked-identifier mapping."""

    contact: Contact
    mapping: LinkedIdMapping | None = None


class Message(BaseModel):
    """A conversation message owned by one contact."""

    id: int = 0
    tenant_id: int
    contact_id: int
    body: str = ""
    from_me: bool = False
    created_at: datetime = Field(default_factory=_now)


class Ticket(BaseModel):
    """A support ticket owned by one contact.

    Every status other than ``closed`` counts as open.
    """

    id: int = 0
    tenant_id: int
    contact_id: int
    status: TicketStatus = TicketStatus.OPEN
    user_id: int | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def is_open(self) -> bool:
        return self.status != TicketStatus.CLOSED
