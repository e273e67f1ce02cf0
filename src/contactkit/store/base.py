"""Abstract base class for directory storage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from contactkit.models.contact import Contact, LinkedIdMapping, Message, Ticket


class ContactStore(ABC):
    """Persistent storage for contacts, mappings, messages, and tickets.

    Implement this ABC to plug in any storage backend (SQL, Redis, etc.).
    The library ships with ``InMemoryContactStore`` for development and
    testing and ``PostgresContactStore`` for production.

    Every query is scoped by tenant except lookups by primary key.
    Implementations must enforce unique ``(tenant_id, number)`` for
    contacts and unique ``(tenant_id, lid)`` / ``contact_id`` for mappings,
    and must delete a contact's mapping together with the contact.
    """

    # Contact operations

    @abstractmethod
    async def create_contact(self, contact: Contact) -> Contact:
        """Persist a new contact and return it with its assigned ID.

        Raises:
            DuplicateContactError: The tenant already has this number.
        """
        ...

    @abstractmethod
    async def get_contact(self, contact_id: int) -> Contact | None:
        """Get a contact by ID, or ``None`` if it doesn't exist."""
        ...

    @abstractmethod
    async def find_contact(self, tenant_id: int, number: str) -> Contact | None:
        """Find a tenant's contact by its exact number."""
        ...

    @abstractmethod
    async def find_contact_by_numbers(
        self,
        tenant_id: int,
        numbers: list[str],
        *,
        exclude_id: int | None = None,
    ) -> Contact | None:
        """Find a tenant's contact whose number is any of *numbers*.

        Candidates are tried in the order given.
        """
        ...

    @abstractmethod
    async def update_contact(self, contact: Contact) -> Contact:
        """Update an existing contact.

        Raises:
            ContactNotFoundError: The contact does not exist.
            DuplicateContactError: The new number belongs to another contact.
        """
        ...

    @abstractmethod
    async def delete_contact(self, contact_id: int) -> bool:
        """Delete a contact and its mapping. Returns ``True`` if it existed.

        Raises:
            DataIntegrityError: The contact still owns messages or tickets.
        """
        ...

    @abstractmethod
    async def list_contacts(self, tenant_id: int) -> list[Contact]:
        """List all of a tenant's contacts."""
        ...

    # Mapping operations

    @abstractmethod
    async def add_mapping(self, mapping: LinkedIdMapping) -> LinkedIdMapping:
        """Store a new linked-identifier mapping.

        Raises:
            MappingConflictError: The lid or the contact is already mapped.
        """
        ...

    @abstractmethod
    async def find_mapping(self, tenant_id: int, lid: str) -> LinkedIdMapping | None:
        """Get the mapping for a tenant's linked identifier."""
        ...

    @abstractmethod
    async def get_mapping_for_contact(self, contact_id: int) -> LinkedIdMapping | None:
        """Get the mapping owned by a contact, if any."""
        ...

    @abstractmethod
    async def list_mappings(self, tenant_id: int) -> list[LinkedIdMapping]:
        """List all of a tenant's mappings."""
        ...

    # Message operations

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        """Store a new message and return it with its assigned ID."""
        ...

    @abstractmethod
    async def list_messages(self, tenant_id: int, contact_id: int) -> list[Message]:
        """List a contact's messages in creation order."""
        ...

    @abstractmethod
    async def reassign_messages(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        """Move every message of one contact to another. Returns the count moved."""
        ...

    # Ticket operations

    @abstractmethod
    async def add_ticket(self, ticket: Ticket) -> Ticket:
        """Store a new ticket and return it with its assigned ID."""
        ...

    @abstractmethod
    async def get_ticket(self, tenant_id: int, ticket_id: int) -> Ticket | None:
        """Get a tenant's ticket by ID."""
        ...

    @abstractmethod
    async def list_tickets(
        self,
        tenant_id: int,
        contact_id: int,
        *,
        open_only: bool = False,
    ) -> list[Ticket]:
        """List a contact's tickets, optionally only those not closed."""
        ...

    @abstractmethod
    async def update_ticket(self, ticket: Ticket) -> Ticket:
        """Update an existing ticket."""
        ...

    @abstractmethod
    async def reassign_tickets(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        """Move every ticket of one contact to another. Returns the count moved."""
        ...
