"""Linked-identifier mapping store."""

from __future__ import annotations

import logging

from contactkit.core.errors import ContactKitError
from contactkit.models.contact import LinkedIdMapping
from contactkit.store.base import ContactStore

logger = logging.getLogger("contactkit.mapping")


class MappingStore:
    """Durable (tenant, linked identifier) -> contact table."""

    def __init__(self, store: ContactStore) -> None:
        self._store = store

    async def find(self, tenant_id: int, lid: str) -> LinkedIdMapping | None:
        return await self._store.find_mapping(tenant_id, lid)

    async def for_contact(self, contact_id: int) -> LinkedIdMapping | None:
        return await self._store.get_mapping_for_contact(contact_id)

    async def create_safely(self, tenant_id: int, lid: str, contact_id: int) -> bool:
        """Map *lid* to *contact_id* if the contact still exists in *tenant_id*.

        The contact may have been deleted by a merge between lookup and
        write.  Never raises: any failure, including a uniqueness
        violation, is logged and reported as ``False``.  A missing mapping
        only sends later resolutions down the slower lookup paths.
        """
        try:
            contact = await self._store.get_contact(contact_id)
            if contact is None:
                logger.info(
                    "Contact %s vanished before mapping lid %s; skipping",
                    contact_id,
                    lid,
                    extra={"tenant_id": tenant_id, "contact_id": contact_id},
                )
                return False
            if contact.tenant_id != tenant_id:
                logger.warning(
                    "Refusing to map lid %s to contact %s of tenant %s",
                    lid,
                    contact_id,
                    contact.tenant_id,
                    extra={"tenant_id": tenant_id, "contact_id": contact_id},
                )
                return False
            await self._store.add_mapping(
                LinkedIdMapping(tenant_id=tenant_id, lid=lid, contact_id=contact_id)
            )
        except Exception as exc:
            logger.warning(
                "Failed to map lid %s to contact %s: %s",
                lid,
                contact_id,
                exc,
                exc_info=not isinstance(exc, ContactKitError),
                extra={"tenant_id": tenant_id, "contact_id": contact_id},
            )
            return False
        logger.debug("Mapped lid %s to contact %s", lid, contact_id)
        return True
