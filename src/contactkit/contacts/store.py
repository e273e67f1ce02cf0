"""Contact writer backed by a ContactStore."""

from __future__ import annotations

from typing import Any

from contactkit.contacts.base import ContactWriter
from contactkit.core.errors import DuplicateContactError
from contactkit.models.contact import Contact, ContactData
from contactkit.store.base import ContactStore


class StoreContactWriter(ContactWriter):
    """Default writer that persists straight to the directory store."""

    def __init__(self, store: ContactStore) -> None:
        self._store = store

    async def upsert(self, data: ContactData) -> Contact:
        existing = await self._store.find_contact(data.tenant_id, data.number)
        if existing is None:
            try:
                return await self._store.create_contact(
                    Contact(
                        tenant_id=data.tenant_id,
                        name=data.name,
                        number=data.number,
                        is_group=data.is_group,
                        profile_pic_url=data.profile_pic_url,
                    )
                )
            except DuplicateContactError:
                # Lost a race with another writer; fall through to refresh
                existing = await self._store.find_contact(data.tenant_id, data.number)
                if existing is None:
                    raise
        return await self._refresh(existing, data)

    async def _refresh(self, contact: Contact, data: ContactData) -> Contact:
        changes: dict[str, Any] = {}
        # Keep names a human set; replace placeholders
        if data.name and (not contact.name or contact.name == contact.number):
            changes["name"] = data.name
        if data.profile_pic_url and data.profile_pic_url != contact.profile_pic_url:
            changes["profile_pic_url"] = data.profile_pic_url
        if not changes:
            return contact
        return await self.update(contact, **changes)

    async def update(self, contact: Contact, **changes: Any) -> Contact:
        updated = contact.model_copy(update=changes)
        return await self._store.update_contact(updated)
