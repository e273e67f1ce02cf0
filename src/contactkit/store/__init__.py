"""Directory storage backends."""

from contactkit.store.base import ContactStore
from contactkit.store.memory import InMemoryContactStore
from contactkit.store.postgres import PostgresContactStore

__all__ = ["ContactStore", "InMemoryContactStore", "PostgresContactStore"]
