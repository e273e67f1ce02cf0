"""Tests for InMemoryContactStore."""

from __future__ import annotations

import pytest

from contactkit.core.errors import (
    ContactNotFoundError,
    DataIntegrityError,
    DuplicateContactError,
    MappingConflictError,
    TicketNotFoundError,
)
from contactkit.models.contact import Contact, LinkedIdMapping, Message, Ticket
from contactkit.models.enums import TicketStatus
from contactkit.store.memory import InMemoryContactStore
from tests.conftest import TENANT, add_messages, add_ticket, make_contact


class TestContacts:
    async def test_create_assigns_ids(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "5511999")
        b = await make_contact(store, "5511888")
        assert a.id == 1
        assert b.id == 2

    async def test_find_contact(self, store: InMemoryContactStore) -> None:
        created = await make_contact(store, "5511999", name="Ana")
        found = await store.find_contact(TENANT, "5511999")
        assert found is not None
        assert found.id == created.id
        assert found.name == "Ana"

    async def test_find_is_tenant_scoped(self, store: InMemoryContactStore) -> None:
        await make_contact(store, "5511999", tenant_id=1)
        assert await store.find_contact(2, "5511999") is None

    async def test_same_number_other_tenant(self, store: InMemoryContactStore) -> None:
        await make_contact(store, "5511999", tenant_id=1)
        other = await make_contact(store, "5511999", tenant_id=2)
        assert other.tenant_id == 2

    async def test_duplicate_number_rejected(self, store: InMemoryContactStore) -> None:
        await make_contact(store, "5511999")
        with pytest.raises(DuplicateContactError):
            await make_contact(store, "5511999")

    async def test_returned_models_are_copies(self, store: InMemoryContactStore) -> None:
        created = await make_contact(store, "5511999", name="Ana")
        created.name = "changed"
        fetched = await store.get_contact(created.id)
        assert fetched is not None
        assert fetched.name == "Ana"

    async def test_find_by_numbers_in_order(self, store: InMemoryContactStore) -> None:
        stripped = await make_contact(store, "abc123")
        full = await make_contact(store, "abc123@lid")
        found = await store.find_contact_by_numbers(TENANT, ["abc123@lid", "abc123"])
        assert found is not None
        assert found.id == full.id
        found = await store.find_contact_by_numbers(
            TENANT, ["abc123@lid", "abc123"], exclude_id=full.id
        )
        assert found is not None
        assert found.id == stripped.id

    async def test_update_moves_number_index(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "abc123")
        await store.update_contact(contact.model_copy(update={"number": "abc123@lid"}))
        assert await store.find_contact(TENANT, "abc123") is None
        assert await store.find_contact(TENANT, "abc123@lid") is not None

    async def test_update_to_taken_number(self, store: InMemoryContactStore) -> None:
        await make_contact(store, "5511999")
        other = await make_contact(store, "5511888")
        with pytest.raises(DuplicateContactError):
            await store.update_contact(other.model_copy(update={"number": "5511999"}))

    async def test_update_missing(self, store: InMemoryContactStore) -> None:
        with pytest.raises(ContactNotFoundError):
            await store.update_contact(Contact(id=42, tenant_id=TENANT, name="x", number="x"))

    async def test_delete_cascades_mapping(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "abc123@lid")
        await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="x@lid", contact_id=contact.id))
        assert await store.delete_contact(contact.id) is True
        assert await store.find_mapping(TENANT, "x@lid") is None
        assert await store.find_contact(TENANT, "abc123@lid") is None

    async def test_delete_missing(self, store: InMemoryContactStore) -> None:
        assert await store.delete_contact(99) is False

    async def test_delete_with_messages_refused(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "5511999")
        await add_messages(store, contact)
        with pytest.raises(DataIntegrityError):
            await store.delete_contact(contact.id)

    async def test_delete_with_tickets_refused(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "5511999")
        await add_ticket(store, contact, TicketStatus.CLOSED)
        with pytest.raises(DataIntegrityError):
            await store.delete_contact(contact.id)

    async def test_list_contacts(self, store: InMemoryContactStore) -> None:
        await make_contact(store, "1")
        await make_contact(store, "2")
        await make_contact(store, "3", tenant_id=2)
        assert len(await store.list_contacts(TENANT)) == 2


class TestMappings:
    async def test_add_and_find(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "5511999")
        await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="abc@lid", contact_id=contact.id))
        mapping = await store.find_mapping(TENANT, "abc@lid")
        assert mapping is not None
        assert mapping.contact_id == contact.id
        by_contact = await store.get_mapping_for_contact(contact.id)
        assert by_contact is not None
        assert by_contact.lid == "abc@lid"

    async def test_lid_unique_per_tenant(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "1")
        b = await make_contact(store, "2")
        await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="abc@lid", contact_id=a.id))
        with pytest.raises(MappingConflictError):
            await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="abc@lid", contact_id=b.id))

    async def test_one_mapping_per_contact(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "1")
        await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="abc@lid", contact_id=a.id))
        with pytest.raises(MappingConflictError):
            await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="def@lid", contact_id=a.id))

    async def test_missing_contact(self, store: InMemoryContactStore) -> None:
        with pytest.raises(ContactNotFoundError):
            await store.add_mapping(LinkedIdMapping(tenant_id=TENANT, lid="abc@lid", contact_id=7))

    async def test_same_lid_other_tenant(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "1", tenant_id=1)
        b = await make_contact(store, "1", tenant_id=2)
        await store.add_mapping(LinkedIdMapping(tenant_id=1, lid="abc@lid", contact_id=a.id))
        await store.add_mapping(LinkedIdMapping(tenant_id=2, lid="abc@lid", contact_id=b.id))
        assert len(await store.list_mappings(1)) == 1
        assert len(await store.list_mappings(2)) == 1


class TestMessagesAndTickets:
    async def test_message_requires_contact(self, store: InMemoryContactStore) -> None:
        with pytest.raises(ContactNotFoundError):
            await store.add_message(Message(tenant_id=TENANT, contact_id=5))

    async def test_reassign_messages(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "1")
        b = await make_contact(store, "2")
        await add_messages(store, a, 3)
        moved = await store.reassign_messages(TENANT, a.id, b.id)
        assert moved == 3
        assert await store.list_messages(TENANT, a.id) == []
        assert len(await store.list_messages(TENANT, b.id)) == 3

    async def test_open_only_filter(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "1")
        await add_ticket(store, contact, TicketStatus.OPEN)
        await add_ticket(store, contact, TicketStatus.PENDING)
        await add_ticket(store, contact, TicketStatus.CLOSED)
        assert len(await store.list_tickets(TENANT, contact.id)) == 3
        open_tickets = await store.list_tickets(TENANT, contact.id, open_only=True)
        assert {t.status for t in open_tickets} == {TicketStatus.OPEN, TicketStatus.PENDING}

    async def test_get_ticket_is_tenant_scoped(self, store: InMemoryContactStore) -> None:
        contact = await make_contact(store, "1")
        ticket = await add_ticket(store, contact)
        assert await store.get_ticket(TENANT, ticket.id) is not None
        assert await store.get_ticket(2, ticket.id) is None

    async def test_update_missing_ticket(self, store: InMemoryContactStore) -> None:
        with pytest.raises(TicketNotFoundError):
            await store.update_ticket(Ticket(id=9, tenant_id=TENANT, contact_id=1))

    async def test_reassign_tickets(self, store: InMemoryContactStore) -> None:
        a = await make_contact(store, "1")
        b = await make_contact(store, "2")
        await add_ticket(store, a)
        await add_ticket(store, a, TicketStatus.CLOSED)
        assert await store.reassign_tickets(TENANT, a.id, b.id) == 2
        assert await store.list_tickets(TENANT, a.id) == []
