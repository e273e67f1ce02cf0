"""In-memory implementation of ContactStore."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime

from contactkit.core.errors import (
    ContactNotFoundError,
    DataIntegrityError,
    DuplicateContactError,
    MappingConflictError,
    TicketNotFoundError,
)
from contactkit.models.contact import Contact, LinkedIdMapping, Message, Ticket
from contactkit.store.base import ContactStore


class InMemoryContactStore(ContactStore):
    """Dict-based in-memory store for development and testing.

    Returned models are copies, so callers never mutate stored state
    without going through an ``update_*`` call.
    """

    def __init__(self) -> None:
        self._contacts: dict[int, Contact] = {}
        self._number_index: dict[tuple[int, str], int] = {}
        self._mappings: dict[tuple[int, str], LinkedIdMapping] = {}
        self._contact_mappings: dict[int, tuple[int, str]] = {}
        self._messages: dict[int, Message] = {}
        self._tickets: dict[int, Ticket] = {}
        self._contact_ids = itertools.count(1)
        self._message_ids = itertools.count(1)
        self._ticket_ids = itertools.count(1)

    # Contact operations

    async def create_contact(self, contact: Contact) -> Contact:
        key = (contact.tenant_id, contact.number)
        if key in self._number_index:
            raise DuplicateContactError(f"tenant {contact.tenant_id} already has {contact.number!r}")
        stored = contact.model_copy(update={"id": next(self._contact_ids)})
        self._contacts[stored.id] = stored
        self._number_index[key] = stored.id
        return stored.model_copy()

    async def get_contact(self, contact_id: int) -> Contact | None:
        contact = self._contacts.get(contact_id)
        return contact.model_copy() if contact is not None else None

    async def find_contact(self, tenant_id: int, number: str) -> Contact | None:
        contact_id = self._number_index.get((tenant_id, number))
        if contact_id is None:
            return None
        return self._contacts[contact_id].model_copy()

    async def find_contact_by_numbers(
        self,
        tenant_id: int,
        numbers: list[str],
        *,
        exclude_id: int | None = None,
    ) -> Contact | None:
        for number in numbers:
            contact_id = self._number_index.get((tenant_id, number))
            if contact_id is not None and contact_id != exclude_id:
                return self._contacts[contact_id].model_copy()
        return None

    async def update_contact(self, contact: Contact) -> Contact:
        current = self._contacts.get(contact.id)
        if current is None:
            raise ContactNotFoundError(str(contact.id))
        new_key = (contact.tenant_id, contact.number)
        owner = self._number_index.get(new_key)
        if owner is not None and owner != contact.id:
            raise DuplicateContactError(f"tenant {contact.tenant_id} already has {contact.number!r}")
        del self._number_index[(current.tenant_id, current.number)]
        self._number_index[new_key] = contact.id
        stored = contact.model_copy(update={"updated_at": datetime.now(UTC)})
        self._contacts[contact.id] = stored
        return stored.model_copy()

    async def delete_contact(self, contact_id: int) -> bool:
        if contact_id not in self._contacts:
            return False
        if any(m.contact_id == contact_id for m in self._messages.values()) or any(
            t.contact_id == contact_id for t in self._tickets.values()
        ):
            raise DataIntegrityError(f"contact {contact_id} still owns messages or tickets")
        contact = self._contacts.pop(contact_id)
        self._number_index.pop((contact.tenant_id, contact.number), None)
        # Cascade the mapping
        mapping_key = self._contact_mappings.pop(contact_id, None)
        if mapping_key is not None:
            self._mappings.pop(mapping_key, None)
        return True

    async def list_contacts(self, tenant_id: int) -> list[Contact]:
        return [c.model_copy() for c in self._contacts.values() if c.tenant_id == tenant_id]

    # Mapping operations

    async def add_mapping(self, mapping: LinkedIdMapping) -> LinkedIdMapping:
        key = (mapping.tenant_id, mapping.lid)
        if key in self._mappings:
            raise MappingConflictError(f"lid {mapping.lid!r} is already mapped")
        if mapping.contact_id in self._contact_mappings:
            raise MappingConflictError(f"contact {mapping.contact_id} is already mapped")
        if mapping.contact_id not in self._contacts:
            raise ContactNotFoundError(str(mapping.contact_id))
        self._mappings[key] = mapping
        self._contact_mappings[mapping.contact_id] = key
        return mapping.model_copy()

    async def find_mapping(self, tenant_id: int, lid: str) -> LinkedIdMapping | None:
        mapping = self._mappings.get((tenant_id, lid))
        return mapping.model_copy() if mapping is not None else None

    async def get_mapping_for_contact(self, contact_id: int) -> LinkedIdMapping | None:
        key = self._contact_mappings.get(contact_id)
        if key is None:
            return None
        return self._mappings[key].model_copy()

    async def list_mappings(self, tenant_id: int) -> list[LinkedIdMapping]:
        return [m.model_copy() for m in self._mappings.values() if m.tenant_id == tenant_id]

    # Message operations

    async def add_message(self, message: Message) -> Message:
        if message.contact_id not in self._contacts:
            raise ContactNotFoundError(str(message.contact_id))
        stored = message.model_copy(update={"id": next(self._message_ids)})
        self._messages[stored.id] = stored
        return stored.model_copy()

    async def list_messages(self, tenant_id: int, contact_id: int) -> list[Message]:
        return [
            m.model_copy()
            for m in self._messages.values()
            if m.tenant_id == tenant_id and m.contact_id == contact_id
        ]

    async def reassign_messages(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        moved = 0
        for message in self._messages.values():
            if message.tenant_id == tenant_id and message.contact_id == from_contact_id:
                message.contact_id = to_contact_id
                moved += 1
        return moved

    # Ticket operations

    async def add_ticket(self, ticket: Ticket) -> Ticket:
        if ticket.contact_id not in self._contacts:
            raise ContactNotFoundError(str(ticket.contact_id))
        stored = ticket.model_copy(update={"id": next(self._ticket_ids)})
        self._tickets[stored.id] = stored
        return stored.model_copy()

    async def get_ticket(self, tenant_id: int, ticket_id: int) -> Ticket | None:
        ticket = self._tickets.get(ticket_id)
        if ticket is None or ticket.tenant_id != tenant_id:
            return None
        return ticket.model_copy()

    async def list_tickets(
        self,
        tenant_id: int,
        contact_id: int,
        *,
        open_only: bool = False,
    ) -> list[Ticket]:
        results: list[Ticket] = []
        for ticket in self._tickets.values():
            if ticket.tenant_id != tenant_id or ticket.contact_id != contact_id:
                continue
            if open_only and not ticket.is_open:
                continue
            results.append(ticket.model_copy())
        return results

    async def update_ticket(self, ticket: Ticket) -> Ticket:
        if ticket.id not in self._tickets:
            raise TicketNotFoundError(str(ticket.id))
        stored = ticket.model_copy(update={"updated_at": datetime.now(UTC)})
        self._tickets[ticket.id] = stored
        return stored.model_copy()

    async def reassign_tickets(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        moved = 0
        for ticket in self._tickets.values():
            if ticket.tenant_id == tenant_id and ticket.contact_id == from_contact_id:
                ticket.contact_id = to_contact_id
                moved += 1
        return moved
