"""Exception hierarchy for contactkit."""

from __future__ import annotations

__all__ = [
    "ContactKitError",
    "ContactNotFoundError",
    "DataIntegrityError",
    "DuplicateContactError",
    "MappingConflictError",
    "OracleUnavailableError",
    "TicketNotFoundError",
]


class ContactKitError(Exception):
    """Base exception for all contactkit errors."""


class ContactNotFoundError(ContactKitError):
    """Contact does not exist."""


class TicketNotFoundError(ContactKitError):
    """Ticket does not exist for the tenant."""


class DuplicateContactError(ContactKitError):
    """A live contact already holds this (tenant, number)."""


class MappingConflictError(ContactKitError):
    """The linked identifier or the contact already has a mapping."""


class DataIntegrityError(ContactKitError):
    """Stored rows contradict each other (e.g. a mapping to a missing contact)."""


class OracleUnavailableError(ContactKitError):
    """The transport's existence check failed or returned garbage."""
