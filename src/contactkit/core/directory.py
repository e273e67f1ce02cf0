"""Explicit directory reads used by the resolver."""

from __future__ import annotations

from contactkit.core.address import lid_forms, strip_domain
from contactkit.core.errors import DataIntegrityError
from contactkit.core.mapping import MappingStore
from contactkit.models.contact import Contact, ContactRecord
from contactkit.store.base import ContactStore


class DirectoryLookup:
    """Read access to contacts by number and by linked identifier.

    Each method states which associated rows it fetches: ``ContactRecord``
    results carry the contact's mapping, plain ``Contact`` results do not.
    """

    def __init__(self, store: ContactStore, mappings: MappingStore | None = None) -> None:
        self._store = store
        self._mappings = mappings or MappingStore(store)

    async def by_number(self, tenant_id: int, number: str) -> ContactRecord | None:
        """Contact with this exact number, plus its mapping."""
        contact = await self._store.find_contact(tenant_id, number)
        if contact is None:
            return None
        mapping = await self._mappings.for_contact(contact.id)
        return ContactRecord(contact=contact, mapping=mapping)

    async def by_mapped_lid(self, tenant_id: int, lid: str) -> ContactRecord | None:
        """Contact reached through the tenant's mapping for *lid*.

        Raises:
            DataIntegrityError: The mapping points at a contact that no
                longer exists.
        """
        mapping = await self._mappings.find(tenant_id, lid)
        if mapping is None:
            return None
        contact = await self._store.get_contact(mapping.contact_id)
        if contact is None:
            raise DataIntegrityError(
                f"mapping ({tenant_id}, {lid!r}) references missing contact {mapping.contact_id}"
            )
        return ContactRecord(contact=contact, mapping=mapping)

    async def by_lid_any_form(
        self,
        tenant_id: int,
        lid: str,
        *,
        exclude_id: int | None = None,
    ) -> Contact | None:
        """Contact whose number is *lid*, exact or domain-stripped."""
        return await self._store.find_contact_by_numbers(
            tenant_id, lid_forms(lid), exclude_id=exclude_id
        )

    async def by_partial_lid(self, tenant_id: int, lid: str) -> Contact | None:
        """Legacy contact stored under the domain-stripped form of *lid*."""
        stripped = strip_domain(lid)
        if stripped == lid:
            return None
        return await self._store.find_contact(tenant_id, stripped)
