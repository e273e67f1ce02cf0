"""Abstract base class for the contact-upsert collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from contactkit.models.contact import Contact, ContactData


class ContactWriter(ABC):
    """Creates and updates base contact records."""

    @abstractmethod
    async def upsert(self, data: ContactData) -> Contact:
        """Create the contact for ``(tenant_id, number)`` or refresh the existing one.

        Must be idempotent on ``(tenant_id, number)``.
        """
        ...

    @abstractmethod
    async def update(self, contact: Contact, **changes: Any) -> Contact:
        """Apply *changes* to an existing contact and return the stored result."""
        ...
