"""Contact-upsert collaborator."""

from contactkit.contacts.base import ContactWriter
from contactkit.contacts.store import StoreContactWriter

__all__ = ["ContactWriter", "StoreContactWriter"]
